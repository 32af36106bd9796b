"""
L1 Domain — Platform resolution (pure).

Maps raw OS / machine strings onto the published asset matrix.
No I/O: the emulation check result is passed in by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from myagent_installer.core.services.lifecycle.data.constants import (
    ARCHIVE_FORMATS,
    SUPPORTED_PLATFORMS,
    _ARCH_MAP,
    _OS_MAP,
)
from myagent_installer.core.services.lifecycle.domain.errors import (
    UnsupportedPlatformError,
)


class OsFamily(StrEnum):
    """Operating system families with published assets."""

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"


class Arch(StrEnum):
    """Canonical CPU architectures."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class ArchiveFormat(StrEnum):
    """Release archive containers."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"


@dataclass(frozen=True)
class PlatformDescriptor:
    """Canonical (os, arch) pair for one run."""

    os: OsFamily
    arch: Arch

    @property
    def archive_format(self) -> ArchiveFormat:
        return ArchiveFormat(ARCHIVE_FORMATS[self.os])

    @property
    def is_windows(self) -> bool:
        return self.os == OsFamily.WINDOWS

    def executable_name(self, program: str) -> str:
        """File name of the program's executable on this platform."""
        return f"{program}.exe" if self.is_windows else program

    def to_dict(self) -> dict:
        return {
            "os": str(self.os),
            "arch": str(self.arch),
            "archive_format": str(self.archive_format),
        }


def normalize_arch(machine: str) -> str:
    """Map an architecture synonym onto its canonical name.

    Unknown values are returned lowercased so the caller can report them.
    """
    value = machine.strip().lower()
    return _ARCH_MAP.get(value, value)


def normalize_os(os_name: str) -> str:
    """Map an OS name (``platform.system()`` style) onto its family name."""
    value = os_name.strip().lower()
    return _OS_MAP.get(value, value)


def resolve_platform(
    os_name: str,
    machine: str,
    *,
    translated: bool = False,
) -> PlatformDescriptor:
    """Resolve raw platform signals into a ``PlatformDescriptor``.

    Args:
        os_name: Raw OS name, e.g. ``"Darwin"``.
        machine: Raw machine string, e.g. ``"arm64"`` or ``"AMD64"``.
        translated: True when the process runs under Rosetta on an
            ARM Mac.  The native (aarch64) asset is selected instead
            of the emulated x86_64 one.

    Raises:
        UnsupportedPlatformError: For any pair outside the asset matrix.
    """
    os_family = normalize_os(os_name)
    arch = normalize_arch(machine)

    if translated and os_family == OsFamily.DARWIN and arch == Arch.X86_64:
        arch = Arch.AARCH64.value

    if (os_family, arch) not in SUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError(os_family, arch)

    return PlatformDescriptor(os=OsFamily(os_family), arch=Arch(arch))
