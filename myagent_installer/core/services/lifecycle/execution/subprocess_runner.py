"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for lifecycle
operations that act on the system.  Logging and error handling are
centralised here.
"""

from __future__ import annotations

import logging
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)


def _run_subprocess(cmd: list[str]) -> dict[str, Any]:
    """Run a subprocess command and report the outcome as a dict.

    Never raises for command failures: a missing executable or a
    non-zero exit comes back as ``{"ok": False, ...}`` so the
    caller decides whether the failure matters.

    Args:
        cmd: Command list for ``subprocess.run()``.  No timeout is set.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("Subprocess could not start: %s (%s)", cmd, e)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout[-2000:] if result.stdout else ""
    stderr = result.stderr[-2000:] if result.stderr else ""

    if result.returncode == 0:
        return {"ok": True, "stdout": stdout, "elapsed_ms": elapsed_ms}

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "returncode": result.returncode,
        "stderr": stderr,
        "stdout": stdout,
        "elapsed_ms": elapsed_ms,
    }
