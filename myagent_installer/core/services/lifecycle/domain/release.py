"""
L1 Domain — Release naming and feed addressing (pure).

The asset name depends only on the platform descriptor; the download
URL depends only on (repository, tag, asset).  No per-OS branches.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from myagent_installer.core.services.lifecycle.data.constants import ASSET_TEMPLATE
from myagent_installer.core.services.lifecycle.domain.errors import VersionNotFoundError
from myagent_installer.core.services.lifecycle.domain.platform import PlatformDescriptor

# Tolerates any whitespace and any field order; only the key must be verbatim.
_TAG_RE = re.compile(r'"tag_name"\s*:\s*"([^"]*)"')


@dataclass(frozen=True)
class ReleaseFeed:
    """Where "latest" metadata and release assets are served from.

    Both templates accept ``{repository}``, ``{tag}`` and ``{asset}``.
    """

    repository: str
    latest_url_template: str
    download_url_template: str

    @classmethod
    def local(cls, repository: str, port: int, host: str = "127.0.0.1") -> ReleaseFeed:
        """Synthetic feed served by the test harness."""
        base = f"http://{host}:{port}"
        return cls(
            repository=repository,
            latest_url_template=f"{base}/latest",
            download_url_template=f"{base}/download/{{asset}}",
        )

    @property
    def latest_url(self) -> str:
        return self.latest_url_template.format(repository=self.repository)

    def download_url(self, tag: str, asset: str) -> str:
        return self.download_url_template.format(
            repository=self.repository, tag=tag, asset=asset,
        )


@dataclass(frozen=True)
class ReleaseDescriptor:
    """One concrete downloadable release asset."""

    version_tag: str
    asset_filename: str
    download_url: str

    def to_dict(self) -> dict:
        return {
            "version": self.version_tag,
            "asset": self.asset_filename,
            "url": self.download_url,
        }


def asset_filename(platform: PlatformDescriptor, program: str) -> str:
    """Release asset name, e.g. ``myagent-darwin-aarch64.tar.gz``."""
    return ASSET_TEMPLATE.format(
        program=program,
        os=platform.os,
        arch=platform.arch,
        ext=platform.archive_format,
    )


def build_release(
    feed: ReleaseFeed,
    platform: PlatformDescriptor,
    program: str,
    tag: str,
) -> ReleaseDescriptor:
    asset = asset_filename(platform, program)
    return ReleaseDescriptor(
        version_tag=tag,
        asset_filename=asset,
        download_url=feed.download_url(tag, asset),
    )


def extract_tag(document: str) -> str:
    """Pull the ``tag_name`` value out of a "latest release" document.

    Raises:
        VersionNotFoundError: If the field is absent or empty.
    """
    m = _TAG_RE.search(document)
    if not m or not m.group(1).strip():
        raise VersionNotFoundError("No version tag found in the release feed")
    return m.group(1).strip()
