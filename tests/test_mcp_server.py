"""Tests for the MCP tool implementations.

The tool bodies are plain functions over a SessionRegistry, so they are tested
without the mcp package installed.
"""

from __future__ import annotations

import pytest

from esisref.mcp.server import (
    _index_status,
    _list_identifiers,
    _rebuild_index,
    _resolve_identifier,
    _resolve_path,
)
from esisref.session import SessionRegistry


@pytest.fixture
def registry(fake_config):
    return SessionRegistry(config=fake_config)


class TestRebuildIndex:
    def test_success(self, registry, sample_document):
        result = _rebuild_index(registry, sample_document)
        assert result == {
            "success": True,
            "identifiers": 3,
            "declarations": 3,
            "anomalies": [],
        }

    def test_non_utf8_parser_output(self, registry, tmp_path):
        document = tmp_path / "latin1.sgml"
        document.write_bytes(b"<p id=caf\xe9>\n")
        (tmp_path / "latin1.sgml.esis").write_bytes(b"AID ID CAF\xc9\n(P\n")

        result = _rebuild_index(registry, document)

        assert result["success"] is True
        assert result["identifiers"] == 1

    def test_failure_reports_error_type(self, registry, sample_document, monkeypatch):
        _rebuild_index(registry, sample_document)
        monkeypatch.setenv("FAKE_NSGMLS_EXIT", "2")

        result = _rebuild_index(registry, sample_document)

        assert result["success"] is False
        assert result["error_type"] == "ToolInvocationError"
        assert result["status"]["state"] == "ready"
        assert result["status"]["identifiers"] == 3


class TestListAndResolve:
    def test_not_ready(self, registry, sample_document):
        result = _list_identifiers(registry, sample_document)
        assert result["success"] is False
        assert result["error_type"] == "IndexNotReadyError"

    def test_list(self, registry, sample_document):
        _rebuild_index(registry, sample_document)
        result = _list_identifiers(registry, sample_document)
        assert result["lines"][2:] == ["intro (section)", "setup (section)", "p1 (para)"]
        assert result["entries"][2] == {"identifier": "p1", "attribute": "id", "element": "para"}

    def test_resolve(self, registry, sample_document):
        _rebuild_index(registry, sample_document)
        result = _resolve_identifier(registry, sample_document, "Setup")
        assert result["success"] is True
        assert result["line"] == 6
        assert result["text"] == "id=setup"

    def test_resolve_unknown(self, registry, sample_document):
        _rebuild_index(registry, sample_document)
        result = _resolve_identifier(registry, sample_document, "nope")
        assert result["error_type"] == "UnknownIdentifierError"

    def test_status(self, registry, sample_document):
        assert _index_status(registry, sample_document)["state"] == "empty"
        _rebuild_index(registry, sample_document)
        status = _index_status(registry, sample_document)
        assert status["state"] == "ready"
        assert status["declarations"] == 3


class TestResolvePath:
    def test_relative(self, tmp_path):
        assert _resolve_path(tmp_path, "a/b.sgml") == (tmp_path / "a" / "b.sgml").resolve()

    def test_absolute(self, tmp_path):
        target = tmp_path / "doc.sgml"
        assert _resolve_path(tmp_path / "elsewhere", str(target)) == target.resolve()
