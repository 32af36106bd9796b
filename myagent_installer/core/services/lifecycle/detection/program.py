"""
L3 Detection — Installed program detection.

Asks the installed executable about itself (``--version``, ``status``)
and reads the pid file it maintains.  Never changes anything.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any

from myagent_installer.core.services.lifecycle.data.constants import STATUS_NOT_RUNNING
from myagent_installer.core.services.lifecycle.domain.version import extract_version

logger = logging.getLogger(__name__)


def _query(binary: Path, *args: str) -> dict[str, Any]:
    """Run ``binary *args`` and capture combined output."""
    if not binary.is_file():
        return {"ok": False, "error": f"{binary} not found", "output": ""}
    try:
        r = subprocess.run(
            [str(binary), *args],
            capture_output=True, text=True,
        )
    except OSError as exc:
        return {"ok": False, "error": str(exc), "output": ""}

    output = (r.stdout or "") + (r.stderr or "")
    return {"ok": r.returncode == 0, "returncode": r.returncode, "output": output}


def query_version(binary: Path) -> dict[str, Any]:
    """``binary --version``.

    Returns:
        ``{"ok": bool, "output": "...", "version": "0.4.1" | None}``
    """
    result = _query(binary, "--version")
    result["version"] = extract_version(result["output"]) if result["ok"] else None
    return result


def query_status(binary: Path) -> dict[str, Any]:
    """``binary status``.

    Returns:
        ``{"ok": bool, "output": "...", "running": bool}``
    """
    result = _query(binary, "status")
    result["running"] = bool(result["ok"]) and STATUS_NOT_RUNNING not in result["output"]
    return result


def installed_version(binary: Path) -> str | None:
    """Version of the installed binary, or None if absent / unparsable."""
    return query_version(binary)["version"]


def read_pid(pid_file: Path) -> int | None:
    """PID recorded by the daemon, or None when there is no usable pid file."""
    try:
        raw = pid_file.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.debug("Ignoring malformed pid file %s: %r", pid_file, raw)
        return None
