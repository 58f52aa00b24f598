"""
esisref.esis - ESIS event stream parsing.

Runs an SP-family parser (``nsgmls``/``onsgmls``) over a document and turns
its line-oriented ESIS output into typed events. Only two line shapes matter
for the identifier index:

    AID ID BOX1      attribute ``ID`` with declared value ID, value ``BOX1``
    (PARA            start of element ``PARA``

Every other line (data, end tags, ``L`` line markers, processing
instructions, ...) is ignored.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from esisref.errors import ToolInvocationError, ToolTimeoutError

logger = logging.getLogger(__name__)

ID_KIND = "ID"

ATTRIBUTE_PATTERN = re.compile(r"^A(?P<name>\S+)\s+(?P<kind>\S+)(?:\s+(?P<value>.*))?$")
ELEMENT_START_PATTERN = re.compile(r"^\((?P<name>[^\s]+)")

# Last lines of stderr kept on a failed run
STDERR_TAIL_LINES = 20


@dataclass(frozen=True)
class AttributeEvent:
    """An ESIS attribute line whose declared value is ID."""

    attribute_name: str
    value: str
    kind: str = ID_KIND


@dataclass(frozen=True)
class ElementStartEvent:
    """An ESIS element start line."""

    element_name: str


Event = Union[AttributeEvent, ElementStartEvent]


def parse_esis_line(line: str) -> Event | None:
    """Parse one line of ESIS output.

    Args:
        line: A single output line, with or without its trailing newline.

    Returns:
        AttributeEvent for ID-typed attributes, ElementStartEvent for element
        starts, or None for any other line.
    """
    line = line.rstrip("\r\n")

    if line.startswith("A"):
        match = ATTRIBUTE_PATTERN.match(line)
        if match and match.group("kind") == ID_KIND:
            return AttributeEvent(
                attribute_name=match.group("name"),
                value=(match.group("value") or "").strip(),
            )
        return None

    if line.startswith("("):
        match = ELEMENT_START_PATTERN.match(line)
        if match:
            return ElementStartEvent(element_name=match.group("name"))

    return None


def iter_events(lines: Iterable[str]) -> Iterator[Event]:
    """Yield the relevant events from ESIS output lines, in order."""
    for line in lines:
        event = parse_esis_line(line)
        if event is not None:
            yield event


def _stderr_tail(stderr: str | None) -> str:
    if not stderr:
        return ""
    return "\n".join(stderr.strip().splitlines()[-STDERR_TAIL_LINES:])


class EsisParser:
    """Invokes the external markup parser and yields its ESIS events.

    The subprocess runs to completion before any event is produced, so a
    missing tool, a crash or a timeout is raised from ``events()`` itself and
    never leaves a caller holding a partial stream.
    """

    DEFAULT_COMMAND = "nsgmls"
    # -oline: emit L line markers, -oid: report ID-valued attributes as ID
    DEFAULT_ARGS = ("-oline", "-oid")
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        command: str = DEFAULT_COMMAND,
        args: Iterable[str] = DEFAULT_ARGS,
        timeout: float | None = DEFAULT_TIMEOUT,
        tolerate_errors: bool = False,
    ):
        self.command = command
        self.args = list(args)
        self.timeout = timeout
        self.tolerate_errors = tolerate_errors

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> EsisParser:
        """Create a parser from the ``[parser]`` section of a config dict."""
        section = config.get("parser", {})
        timeout = section.get("timeout", cls.DEFAULT_TIMEOUT)
        return cls(
            command=section.get("command", cls.DEFAULT_COMMAND),
            args=section.get("args", cls.DEFAULT_ARGS),
            timeout=float(timeout) if timeout else None,
            tolerate_errors=bool(section.get("tolerate_errors", False)),
        )

    def command_line(self, path: Path | str) -> list[str]:
        """Full argv for parsing *path*."""
        return [self.command, *self.args, str(path)]

    def events(self, path: Path | str) -> Iterator[Event]:
        """Run the parser over *path* and return an iterator of its events.

        Raises:
            ToolInvocationError: The tool is missing, failed to start, or
                exited with a non-zero status.
            ToolTimeoutError: The tool did not finish within ``timeout``.
        """
        cmd = self.command_line(path)
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                # Undecodable bytes (Latin-1 documents) become U+FFFD
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolTimeoutError(cmd, self.timeout or 0.0) from e
        except FileNotFoundError as e:
            raise ToolInvocationError(
                f"{self.command} not found on PATH", command=cmd
            ) from e
        except OSError as e:
            raise ToolInvocationError(
                f"Could not start {self.command}: {e}", command=cmd
            ) from e

        stderr = _stderr_tail(result.stderr)

        if result.returncode != 0:
            # nsgmls exits 1 when the document has markup errors but still
            # prints ESIS for what it could parse
            if self.tolerate_errors and result.returncode == 1 and result.stdout:
                logger.warning(
                    "%s reported errors in %s; indexing partial output", self.command, path
                )
                if stderr:
                    logger.debug("%s stderr:\n%s", self.command, stderr)
            else:
                raise ToolInvocationError(
                    f"{self.command} exited with status {result.returncode}"
                    + (f": {stderr.splitlines()[-1]}" if stderr else ""),
                    command=cmd,
                    returncode=result.returncode,
                    stderr=stderr,
                )

        return iter_events(result.stdout.splitlines())
