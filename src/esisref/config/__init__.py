"""
esisref.config - Configuration loading and defaults.

Configuration lives in ``.esisref.toml``, looked up from the document's
directory upwards. Values are merged over DEFAULT_CONFIG and may be
overridden with ``ESISREF_<SECTION>_<KEY>`` environment variables, e.g.
``ESISREF_PARSER_COMMAND=onsgmls``.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from esisref.config.defaults import CONFIG_FILE_NAME, DEFAULT_CONFIG, ENV_PREFIX
from esisref.errors import ConfigError

logger = logging.getLogger(__name__)


def parse_toml_document(content: str) -> tomlkit.TOMLDocument:
    """Parse TOML keeping formatting, for round-trip edits."""
    try:
        return tomlkit.parse(content)
    except TOMLKitError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML into plain Python dicts and lists."""
    return parse_toml_document(content).unwrap()


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find ``.esisref.toml`` in *start_path* or any parent directory.

    Args:
        start_path: Directory to start from (default: current directory).

    Returns:
        Path to the config file, or None if there is none.
    """
    current = (start_path or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent

    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def merge_configs(defaults: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge *user* over *defaults* without modifying either."""
    merged = copy.deepcopy(defaults)
    for key, value in user.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: Path) -> dict[str, Any]:
    """Load a config file merged over the defaults.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    try:
        user = parse_toml(content)
    except ConfigError as e:
        raise ConfigError(f"{config_path}: {e}") from e
    return merge_configs(DEFAULT_CONFIG, user)


def _try_parse_numeric(value: str) -> int | float | None:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return None


def _try_parse_env_value(value: str) -> Any:
    """Interpret an environment variable value.

    JSON arrays and objects, booleans and numbers are converted; anything
    else (including malformed JSON) is returned unchanged.
    """
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    if stripped.lower() == "true":
        return True
    if stripped.lower() == "false":
        return False
    numeric = _try_parse_numeric(stripped)
    if numeric is not None:
        return numeric
    return value


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``ESISREF_SECTION_KEY`` environment variables to *config*.

    The first underscore-separated word after the prefix names the section,
    the rest (lower-cased, underscores kept) names the key.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        parts = name[len(ENV_PREFIX):].lower().split("_", 1)
        if len(parts) != 2 or not all(parts):
            continue
        section, key = parts
        config.setdefault(section, {})[key] = _try_parse_env_value(raw)
        logger.debug("Config override from %s", name)
    return config


def get_config(
    config_path: Path | None = None,
    start_path: Path | None = None,
    quiet: bool = False,
) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file; searched for when None.
        start_path: Directory to search from (default: current directory).
        quiet: Do not log which file was used.

    Returns:
        Merged configuration dictionary.
    """
    if config_path is None:
        config_path = find_config_file(start_path)

    if config_path is not None:
        config = load_config(Path(config_path))
        if not quiet:
            logger.info("Using config %s", config_path)
    else:
        config = copy.deepcopy(DEFAULT_CONFIG)

    return _apply_env_overrides(config)


__all__ = [
    "DEFAULT_CONFIG",
    "CONFIG_FILE_NAME",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml",
    "parse_toml_document",
]
