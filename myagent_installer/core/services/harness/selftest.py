"""
Harness — End-to-end install/uninstall self-test.

Backup → exercise → restore.  The exercise phase installs the program,
checks that it runs, uninstalls it and checks that it is gone.  The
pre-existing installation is restored whatever the outcome.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from myagent_installer.core.models.settings import InstallerSettings
from myagent_installer.core.services.harness.feed import LocalFeedServer, SyntheticFeed
from myagent_installer.core.services.harness.snapshot import preserved_installation
from myagent_installer.core.services.lifecycle.data.constants import STATUS_NOT_RUNNING
from myagent_installer.core.services.lifecycle.detection.program import (
    query_status,
    query_version,
)
from myagent_installer.core.services.lifecycle.domain.errors import InstallerError
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import PlatformDescriptor
from myagent_installer.core.services.lifecycle.execution.path_posix import PosixProfilePathManager
from myagent_installer.core.services.lifecycle.execution.path_registry import RegistryPathManager
from myagent_installer.core.services.lifecycle.orchestration.installer import install
from myagent_installer.core.services.lifecycle.orchestration.path_selection import PathManager
from myagent_installer.core.services.lifecycle.orchestration.uninstaller import uninstall

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    name: str
    passed: bool
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "passed": self.passed, "detail": self.detail}


@dataclass
class SelfTestReport:
    checks: list[CheckResult] = field(default_factory=list)

    def record(self, name: str, passed: bool, detail: str = "") -> bool:
        self.checks.append(CheckResult(name, passed, detail))
        logger.info("%s  %s%s", "PASS" if passed else "FAIL", name, f" ({detail})" if detail else "")
        return passed

    @property
    def passed(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def failed(self) -> int:
        return sum(1 for c in self.checks if not c.passed)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "passed": self.passed,
            "failed": self.failed,
            "checks": [c.to_dict() for c in self.checks],
        }


@contextmanager
def _preserved_user_path(path_manager: PathManager) -> Iterator[None]:
    """Registry ``Path`` counterpart of the profile snapshot."""
    if not isinstance(path_manager, RegistryPathManager):
        yield
        return
    saved = path_manager.store.read()
    try:
        yield
    finally:
        try:
            path_manager.store.write(saved)
        except OSError as exc:
            logger.error("Could not restore the user Path: %s", exc)


def _exercise(
    report: SelfTestReport,
    settings: InstallerSettings,
    paths: InstallPaths,
    platform: PlatformDescriptor,
    path_manager: PathManager,
) -> None:
    program = settings.program_name
    binary = paths.binary_path
    # A user-written export line is left in place by uninstall
    path_before = path_manager.is_present()

    try:
        install(settings, paths, platform, path_manager)
    except InstallerError as exc:
        report.record("install", False, str(exc))
        return
    report.record("install", True)

    report.record(f"Binary exists at {binary}", binary.is_file())
    report.record("Binary is executable", os.access(binary, os.X_OK))

    version = query_version(binary)
    report.record(f"{program} --version works", version["ok"], version.get("error", ""))
    report.record(
        f"Version output contains '{program}'",
        program in version["output"],
        version["output"].strip(),
    )

    status = query_status(binary)
    report.record(
        "Status reports not running",
        STATUS_NOT_RUNNING in status["output"],
        status["output"].strip(),
    )

    report.record("PATH entry present", path_manager.is_present())

    try:
        uninstall(paths, path_manager, assume_yes=True)
    except InstallerError as exc:
        report.record("uninstall", False, str(exc))
        return
    report.record("uninstall", True)

    report.record("Binary removed after uninstall", not binary.exists())
    report.record("Config removed after uninstall", not paths.config_dir.exists())
    report.record(
        "PATH entry back to its pre-install state",
        path_manager.is_present() == path_before,
    )


def run_selftest(
    settings: InstallerSettings,
    paths: InstallPaths,
    platform: PlatformDescriptor,
    path_manager: PathManager,
    *,
    local_binary: Path | None = None,
) -> SelfTestReport:
    """Install, verify, uninstall, verify, then restore prior state.

    With ``settings.local_mode`` the release feed is a synthetic one
    built from ``local_binary`` and served on ``settings.local_port``.
    Otherwise the real feed is used.

    The report reflects check outcomes only; a failed restore is
    logged and does not change it.
    """
    if settings.local_mode and local_binary is None:
        raise ValueError("local mode needs a binary to package")

    report = SelfTestReport()
    profile = path_manager.profile if isinstance(path_manager, PosixProfilePathManager) else None

    with preserved_installation(paths.known_binary_locations(), paths.config_dir, profile), \
            _preserved_user_path(path_manager):
        serve_root: Path | None = None
        server: LocalFeedServer | None = None
        try:
            if settings.local_mode:
                serve_root = Path(tempfile.mkdtemp(prefix="myagent-feed-"))
                SyntheticFeed.build(
                    local_binary, platform, settings.program_name, serve_root,
                    tag=settings.test_version,
                )
                server = LocalFeedServer(
                    serve_root, settings.local_port, settings.startup_delay,
                ).start()
            _exercise(report, settings, paths, platform, path_manager)
        finally:
            if server is not None:
                server.stop()
            if serve_root is not None:
                shutil.rmtree(serve_root, ignore_errors=True)

    logger.info("Self-test: %d passed, %d failed", report.passed, report.failed)
    return report
