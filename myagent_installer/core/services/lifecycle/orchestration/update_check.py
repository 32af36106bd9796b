"""
L5 Orchestration — Installed version vs. latest release.
"""

from __future__ import annotations

import logging
from typing import Any

from myagent_installer.core.services.lifecycle.detection.program import installed_version
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.release import ReleaseFeed
from myagent_installer.core.services.lifecycle.domain.version import is_newer
from myagent_installer.core.services.lifecycle.execution.download import fetch_latest_tag

logger = logging.getLogger(__name__)


def check_for_update(
    paths: InstallPaths,
    feed: ReleaseFeed,
    *,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Compare the installed binary's version with the feed's latest tag.

    Returns:
        ``{"installed": "0.4.1" | None, "latest": "v0.5.0",
        "update_available": bool}``

    Raises:
        NetworkError, VersionNotFoundError: Feed unusable.
    """
    current = installed_version(paths.binary_path)
    latest = fetch_latest_tag(feed, timeout=timeout)
    available = current is not None and is_newer(latest, current)
    if available:
        logger.info("Update available: %s → %s", current, latest)
    return {
        "installed": current,
        "latest": latest,
        "update_available": available,
    }
