"""Shared fixtures for esisref tests."""

from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

from tests.helpers import FAKE_NSGMLS, SAMPLE_ESIS, SAMPLE_SGML


@pytest.fixture
def fake_config():
    """Default config whose parser is the fake nsgmls script."""
    from esisref.config import DEFAULT_CONFIG

    config = copy.deepcopy(DEFAULT_CONFIG)
    config["parser"]["command"] = sys.executable
    config["parser"]["args"] = [str(FAKE_NSGMLS), "-oline", "-oid"]
    config["parser"]["timeout"] = 10.0
    return config


@pytest.fixture
def write_document(tmp_path):
    """Write a document and the ESIS the fake parser will print for it."""

    def _write(text: str, esis: str | None, name: str = "manual.sgml") -> Path:
        document = tmp_path / name
        document.write_text(text, encoding="utf-8")
        if esis is not None:
            (tmp_path / (name + ".esis")).write_text(esis, encoding="utf-8")
        return document

    return _write


@pytest.fixture
def sample_document(write_document):
    return write_document(SAMPLE_SGML, SAMPLE_ESIS)
