"""
L1 Domain — Installer error taxonomy.

Ordering matters to callers:

- ``UnsupportedPlatformError``, ``NetworkError`` and
  ``VersionNotFoundError`` are raised before anything on disk changes.
- ``DownloadError`` cleans up its scratch file before it propagates.
- ``ArchiveError`` and ``InstallPermissionError`` may leave a partially
  extracted install behind.
- ``ProfileWriteError`` is raised after the binary is already placed.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for every fatal installer failure."""


class UnsupportedPlatformError(InstallerError):
    """No release asset is published for this (os, arch) pair."""

    def __init__(self, os_name: str, arch: str) -> None:
        super().__init__(f"Unsupported platform: {os_name}/{arch}")
        self.os_name = os_name
        self.arch = arch


class NetworkError(InstallerError):
    """The release feed could not be reached."""


class VersionNotFoundError(InstallerError):
    """The release feed answered, but without a usable version tag."""


class DownloadError(InstallerError):
    """The release asset could not be downloaded."""


class ArchiveError(InstallerError):
    """The downloaded archive is unreadable or lacks the executable."""


class InstallPermissionError(InstallerError):
    """The install directory or executable could not be written."""


class ProfileWriteError(InstallerError):
    """The command search path could not be updated."""
