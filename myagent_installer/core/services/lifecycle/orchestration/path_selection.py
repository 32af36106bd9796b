"""
L5 Orchestration — Pick the path manager for the platform.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from myagent_installer.core.services.lifecycle.detection.environment import (
    detect_shell,
    profile_for_shell,
)
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import PlatformDescriptor
from myagent_installer.core.services.lifecycle.domain.report import StepReport
from myagent_installer.core.services.lifecycle.execution.path_posix import PosixProfilePathManager
from myagent_installer.core.services.lifecycle.execution.path_registry import RegistryPathManager


class PathManager(Protocol):
    def add(self) -> StepReport: ...

    def remove(self) -> StepReport: ...

    def is_present(self) -> bool: ...

    def describe(self) -> str: ...


def select_path_manager(
    platform: PlatformDescriptor,
    paths: InstallPaths,
    program: str,
    shell: str | None = None,
    *,
    profile: Path | None = None,
) -> PathManager:
    """Registry manager on Windows, shell-profile manager elsewhere.

    ``shell`` defaults to the one named by ``$SHELL``; ``profile``
    defaults to that shell's profile under ``paths.home``.
    """
    if platform.is_windows:
        return RegistryPathManager(paths)

    shell = shell or detect_shell()
    profile = profile or profile_for_shell(shell, paths.home)
    return PosixProfilePathManager(paths, program, shell, profile)
