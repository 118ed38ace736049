"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from coreprov.core.observability.logging_config import (
    FILE_ENV_VAR,
    FILE_LEVEL_ENV_VAR,
    LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(LEVEL_ENV_VAR, "INFO")
        assert resolve_level(debug=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_env_then_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(LEVEL_ENV_VAR, "DEBUG")
        assert resolve_level() == "DEBUG"
        monkeypatch.delenv(LEVEL_ENV_VAR)
        assert resolve_level() == "WARNING"


class TestSetupLogging:
    def test_console_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(FILE_ENV_VAR, raising=False)
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_bad_level_falls_back(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(FILE_ENV_VAR, raising=False)
        setup_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING

    def test_file_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        log_file = tmp_path / "coreprov.log"
        monkeypatch.setenv(FILE_ENV_VAR, str(log_file))
        setup_logging("WARNING", log_file_level="DEBUG")

        logging.getLogger("coreprov.test").debug("staged download")
        for h in logging.getLogger().handlers:
            h.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "staged download" in log_file.read_text()

    def test_file_level_defaults_to_console_level(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(FILE_LEVEL_ENV_VAR, raising=False)
        setup_logging("ERROR", log_file=str(tmp_path / "coreprov.log"))
        root = logging.getLogger()
        assert [h.level for h in root.handlers] == [logging.ERROR, logging.ERROR]
        assert root.level == logging.ERROR

    def test_file_level_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(FILE_LEVEL_ENV_VAR, "INFO")
        setup_logging("ERROR", log_file=str(tmp_path / "coreprov.log"))
        root = logging.getLogger()
        assert root.handlers[1].level == logging.INFO
        assert root.level == logging.INFO

    def test_console_layout_follows_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(FILE_ENV_VAR, raising=False)
        record = logging.LogRecord("coreprov.x", logging.WARNING, __file__, 7, "mirror down", None, None)

        setup_logging("WARNING")
        assert logging.getLogger().handlers[0].format(record) == "mirror down"

        setup_logging("DEBUG")
        debug_line = logging.getLogger().handlers[0].format(record)
        assert "coreprov.x:7" in debug_line
        assert debug_line.endswith("mirror down")
