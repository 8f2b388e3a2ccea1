"""Tests for configuration and logging helpers."""

import json
import logging
from pathlib import Path

import pytest

from dblayer.config import env_flag, resolve_db_path
from dblayer.logging_config import JSONFormatter


class TestEnvFlag:
    """Tests for env_flag()."""

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_true_values(self, monkeypatch, value):
        """Test values read as true."""
        monkeypatch.setenv("DBLAYER_TEST_FLAG", value)
        assert env_flag("DBLAYER_TEST_FLAG") is True

    def test_false_value(self, monkeypatch):
        """Test a value read as false."""
        monkeypatch.setenv("DBLAYER_TEST_FLAG", "0")
        assert env_flag("DBLAYER_TEST_FLAG", default=True) is False

    def test_default(self, monkeypatch):
        """Test the default for a missing variable."""
        monkeypatch.delenv("DBLAYER_TEST_FLAG", raising=False)
        assert env_flag("DBLAYER_TEST_FLAG", default=True) is True


class TestResolveDbPath:
    """Tests for resolve_db_path()."""

    def test_memory(self):
        """Test the in-memory database."""
        assert resolve_db_path(":memory:") == ":memory:"

    def test_environment(self, monkeypatch):
        """Test falling back to DATABASE_URL."""
        monkeypatch.setenv("DATABASE_URL", "sqlite:////tmp/app.db")
        assert resolve_db_path() == Path("/tmp/app.db")

    def test_no_value(self, monkeypatch):
        """Test that nothing configured means in-memory."""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert resolve_db_path() == ":memory:"

    def test_relative(self, tmp_path, monkeypatch):
        """Test that relative paths resolve against the working directory."""
        monkeypatch.chdir(tmp_path)
        assert resolve_db_path("data/app.db") == tmp_path / "data" / "app.db"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format(self):
        """Test formatting a record with context."""
        record = logging.LogRecord(
            "dblayer.events", logging.ERROR, __file__, 1, "failed %s", ("x",), None
        )
        record.context = {"event": "task"}
        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "ERROR"
        assert data["logger"] == "dblayer.events"
        assert data["message"] == "failed x"
        assert data["context"] == {"event": "task"}
