"""
L5 Orchestration — The install flow.

Platform Resolver → Release Locator → Archive Installer → Path Manager.
Platform, tag and URL are all settled before anything on disk changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from myagent_installer.core.models.settings import InstallerSettings
from myagent_installer.core.services.lifecycle.detection.program import installed_version
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import PlatformDescriptor
from myagent_installer.core.services.lifecycle.domain.release import (
    ReleaseDescriptor,
    ReleaseFeed,
    build_release,
)
from myagent_installer.core.services.lifecycle.domain.report import StepReport
from myagent_installer.core.services.lifecycle.execution.archive import install_archive
from myagent_installer.core.services.lifecycle.execution.download import fetch_latest_tag
from myagent_installer.core.services.lifecycle.orchestration.path_selection import PathManager

logger = logging.getLogger(__name__)


def feed_for(settings: InstallerSettings) -> ReleaseFeed:
    """The release feed this run talks to: local synthetic or the real one."""
    if settings.local_mode:
        logger.info("Local test mode: using feed on 127.0.0.1:%d", settings.local_port)
        return ReleaseFeed.local(settings.repository, settings.local_port)
    return ReleaseFeed(
        repository=settings.repository,
        latest_url_template=settings.latest_url_template,
        download_url_template=settings.download_url_template,
    )


def locate_release(
    feed: ReleaseFeed,
    platform: PlatformDescriptor,
    program: str,
    tag: str | None = None,
    *,
    timeout: float | None = None,
) -> ReleaseDescriptor:
    """Resolve the tag (latest unless pinned) and the asset URL.

    Raises:
        NetworkError: Feed unreachable.
        VersionNotFoundError: Feed has no tag.
    """
    if tag is None:
        tag = fetch_latest_tag(feed, timeout=timeout)
    return build_release(feed, platform, program, tag)


@dataclass
class InstallResult:
    """What an install run did."""

    release: ReleaseDescriptor
    binary_path: Path
    previous_version: str | None = None
    path_step: StepReport | None = None

    @property
    def upgraded(self) -> bool:
        return self.previous_version is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": True,
            "release": self.release.to_dict(),
            "binary_path": str(self.binary_path),
            "previous_version": self.previous_version,
            "path": self.path_step.to_dict() if self.path_step else None,
        }


def install(
    settings: InstallerSettings,
    paths: InstallPaths,
    platform: PlatformDescriptor,
    path_manager: PathManager,
    *,
    tag: str | None = None,
) -> InstallResult:
    """Install (or upgrade) the program.

    Raises:
        InstallerError: Any fatal step.  ``ProfileWriteError`` is raised
            after the binary has been placed and leaves it in place.
    """
    feed = feed_for(settings)
    release = locate_release(
        feed, platform, settings.program_name, tag,
        timeout=settings.network_timeout,
    )
    logger.info("Installing %s %s (%s)", settings.program_name, release.version_tag, release.asset_filename)

    previous = installed_version(paths.binary_path) if paths.binary_path.is_file() else None

    binary = install_archive(release, platform, paths, timeout=settings.network_timeout)
    if previous:
        logger.info("Upgraded %s → %s", previous, release.version_tag)

    result = InstallResult(release=release, binary_path=binary, previous_version=previous)
    result.path_step = path_manager.add()
    return result
