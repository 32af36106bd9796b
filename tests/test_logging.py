"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from myagent_installer.core.observability.logging_config import (
    InstallerFormatter,
    _parse_level,
    component_name,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(name: str, level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


class TestSetupLogging:
    def test_default_warning(self):
        setup_logging()
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, InstallerFormatter)

    def test_debug_format_has_location(self):
        setup_logging("DEBUG")
        fmt = logging.getLogger().handlers[0].formatter._fmt
        assert "%(lineno)d" in fmt

    def test_file_handler_with_own_level(self, tmp_path: Path):
        log_file = tmp_path / "install.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("myagent_installer.core.services.lifecycle.execution.archive").debug(
            "placed binary",
        )
        for h in root.handlers:
            h.flush()
        text = log_file.read_text()
        assert "lifecycle.execution.archive" in text
        assert "myagent_installer.core" not in text
        assert "placed binary" in text
        root.handlers[1].close()

    def test_repeat_calls_do_not_stack_handlers(self):
        setup_logging("INFO")
        setup_logging("INFO")
        assert len(logging.getLogger().handlers) == 1


class TestInstallerFormatter:
    @pytest.mark.parametrize("name,expected", [
        ("myagent_installer.core.services.harness.snapshot", "harness.snapshot"),
        ("myagent_installer.core.config.loader", "core.config.loader"),
        ("myagent_installer.main", "main"),
        ("werkzeug", "werkzeug"),
    ])
    def test_component_name(self, name, expected):
        assert component_name(name) == expected

    def test_problem_lines_are_marked(self):
        fmt = InstallerFormatter("%(mark)s%(message)s")
        error = _record("myagent_installer.core.services.harness.snapshot", logging.ERROR,
                        "Restore failed: disk full (backup kept in /tmp/v)")
        warning = _record("myagent_installer.main", logging.WARNING, "careful")
        info = _record("myagent_installer.main", logging.INFO, "fine")
        assert fmt.format(error) == "❌ Restore failed: disk full (backup kept in /tmp/v)"
        assert fmt.format(warning) == "⚠️  careful"
        assert fmt.format(info) == "fine"

    def test_verbose_shows_component(self):
        fmt = InstallerFormatter("[%(component)s] %(message)s")
        rec = _record("myagent_installer.core.services.harness.selftest", logging.INFO,
                      "PASS  install")
        assert fmt.format(rec) == "[harness.selftest] PASS  install"


class TestParseLevel:
    @pytest.mark.parametrize("raw,expected", [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("bogus", logging.WARNING),
        (None, logging.WARNING),
        ("", logging.WARNING),
    ])
    def test_parse(self, raw, expected):
        assert _parse_level(raw) == expected
