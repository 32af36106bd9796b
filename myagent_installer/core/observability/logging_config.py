"""
Logging configuration — one-time setup for the installer CLI.

main.py calls ``setup_logging`` before any command runs.  Modules log
through ``logging.getLogger(__name__)``; records from this package are
shown by component, with the package prefix trimmed
(``lifecycle.execution.archive``, ``harness.snapshot``).

Console level:  CLI flag  >  MYAGENT_INSTALL_LOG_LEVEL  >  WARNING
File output:    MYAGENT_INSTALL_LOG_FILE (+ MYAGENT_INSTALL_LOG_FILE_LEVEL)

At the default level the console carries problems only, marked the way
the CLI marks its own messages.  Progress and PASS/FAIL lines are
printed by the CLI, not logged at that level.
"""

from __future__ import annotations

import logging
import sys

# Longest prefix first
_TRIMMED_PREFIXES = ("myagent_installer.core.services.", "myagent_installer.")

_LEVEL_MARKS = {
    logging.WARNING: "⚠️  ",
    logging.ERROR: "❌ ",
    logging.CRITICAL: "❌ ",
}

# ── Format strings ──────────────────────────────────────────────

_FMT_PROBLEMS = "%(mark)s%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(component)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(component)s:%(lineno)d  %(message)s"
_DATEFMT_CONSOLE = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(component)s:%(lineno)d  %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


class InstallerFormatter(logging.Formatter):
    """Formatter that adds ``%(component)s`` and ``%(mark)s`` to records."""

    def format(self, record: logging.LogRecord) -> str:
        record.component = component_name(record.name)
        record.mark = _LEVEL_MARKS.get(record.levelno, "")
        return super().format(record)


def component_name(logger_name: str) -> str:
    """``myagent_installer.core.services.harness.snapshot`` → ``harness.snapshot``."""
    for prefix in _TRIMMED_PREFIXES:
        if logger_name.startswith(prefix):
            return logger_name[len(prefix):]
    return logger_name


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure logging for the whole process.  Safe to call again.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path of a log file, appended to.
        log_file_level: Level for the file; defaults to ``level``.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_CONSOLE
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_CONSOLE
    else:
        fmt, datefmt = _FMT_PROBLEMS, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(InstallerFormatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(InstallerFormatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    # Handlers may outlive the stream they were given (CliRunner swaps stderr)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
