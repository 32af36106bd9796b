"""
L4 Execution — Ask the installed program to stop its daemon.

Must run before the binary is deleted: once the executable is gone
there is no way left to tell a live daemon to shut down.  Every
failure here is tolerated; the daemon may never have been started.
"""

from __future__ import annotations

import logging

from myagent_installer.core.services.lifecycle.detection.program import read_pid
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.report import StepReport, StepStatus
from myagent_installer.core.services.lifecycle.execution.subprocess_runner import _run_subprocess

logger = logging.getLogger(__name__)


def stop_daemon(paths: InstallPaths) -> StepReport:
    """Run ``<binary> stop``.  Never raises."""
    pid = read_pid(paths.pid_file_path)
    if pid is not None:
        logger.info("Daemon pid file found (pid %d); asking it to stop", pid)

    if not paths.binary_path.is_file():
        logger.debug("No binary at %s; nothing to stop", paths.binary_path)
        return StepReport(
            "daemon", StepStatus.NOT_RUNNING, str(paths.binary_path),
            detail="binary not installed",
        )

    result = _run_subprocess([str(paths.binary_path), "stop"])
    if result["ok"]:
        logger.info("Daemon stopped")
        return StepReport("daemon", StepStatus.STOPPED, str(paths.binary_path))

    # Exit 1 from "stop" usually just means nothing was running
    logger.debug("stop returned: %s", result.get("error", "unknown"))
    return StepReport(
        "daemon", StepStatus.NOT_RUNNING, str(paths.binary_path),
        detail=result.get("error", ""),
    )
