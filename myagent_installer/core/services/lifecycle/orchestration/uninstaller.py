"""
L5 Orchestration — The uninstall flow.

Order is fixed: stop the daemon, delete the binary, delete the config
dir, remove the PATH entry.  A missing target is that step's success
condition, never an error.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from myagent_installer.core.services.lifecycle.domain.errors import InstallPermissionError
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.report import StepReport, StepStatus
from myagent_installer.core.services.lifecycle.execution.daemon_guard import stop_daemon
from myagent_installer.core.services.lifecycle.orchestration.path_selection import PathManager

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[list[str]], bool]


@dataclass
class UninstallReport:
    steps: list[StepReport] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "cancelled": self.cancelled,
            "steps": [s.to_dict() for s in self.steps],
        }


def plan_uninstall(paths: InstallPaths, path_manager: PathManager) -> list[str]:
    """Human-readable list of what uninstall would remove right now."""
    plan: list[str] = []
    if paths.binary_path.is_file() or paths.binary_path.is_symlink():
        plan.append(str(paths.binary_path))
    if paths.config_dir.is_dir():
        plan.append(f"{paths.config_dir}/ (config, logs, data)")
    if path_manager.is_present():
        plan.append(path_manager.describe())
    return plan


def _remove_binary(paths: InstallPaths) -> StepReport:
    target = paths.binary_path
    if not (target.is_file() or target.is_symlink()):
        return StepReport("binary", StepStatus.ABSENT, str(target))
    try:
        target.unlink()
    except FileNotFoundError:
        return StepReport("binary", StepStatus.ABSENT, str(target))
    except OSError as exc:
        raise InstallPermissionError(f"Cannot remove {target}: {exc}") from exc
    logger.info("Removed %s", target)
    return StepReport("binary", StepStatus.REMOVED, str(target))


def _remove_config_dir(paths: InstallPaths) -> StepReport:
    target = paths.config_dir
    if not target.is_dir():
        return StepReport("config", StepStatus.ABSENT, str(target))
    try:
        shutil.rmtree(target)
    except FileNotFoundError:
        return StepReport("config", StepStatus.ABSENT, str(target))
    except OSError as exc:
        raise InstallPermissionError(f"Cannot remove {target}: {exc}") from exc
    logger.info("Removed %s", target)
    return StepReport("config", StepStatus.REMOVED, str(target))


def uninstall(
    paths: InstallPaths,
    path_manager: PathManager,
    *,
    confirm: ConfirmCallback | None = None,
    assume_yes: bool = False,
) -> UninstallReport:
    """Remove the program, its data and its PATH entry.

    Args:
        confirm: Receives the removal plan; returning False cancels.
            Not called when ``assume_yes`` is set.  Without either,
            nothing is removed and the report comes back cancelled.
        assume_yes: Skip confirmation (``--yes`` or
            ``MYAGENT_UNINSTALL_CONFIRM=yes``).

    Raises:
        InstallPermissionError: A target exists but cannot be removed.
        ProfileWriteError: The PATH entry cannot be removed.
    """
    if not assume_yes:
        if confirm is None:
            logger.warning("Uninstall not confirmed; nothing removed")
            return UninstallReport(cancelled=True)
        plan = plan_uninstall(paths, path_manager)
        if not confirm(plan):
            logger.info("Uninstall cancelled")
            return UninstallReport(cancelled=True)

    report = UninstallReport()
    # The daemon must be asked to stop while its binary still exists
    report.steps.append(stop_daemon(paths))
    report.steps.append(_remove_binary(paths))
    report.steps.append(_remove_config_dir(paths))
    report.steps.append(path_manager.remove())
    return report
