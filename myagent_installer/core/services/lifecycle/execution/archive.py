"""
L4 Execution — Download, stage, extract, and place the executable.

The asset is downloaded into a scratch directory under the system temp
dir, never into the install directory, so a failed download leaves an
existing installation untouched.  The executable is then copied next
to its final name and renamed over it, which replaces an older binary
in one step (the upgrade path) even while that binary is running.
"""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

from myagent_installer.core.services.lifecycle.domain.errors import (
    ArchiveError,
    InstallPermissionError,
)
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import (
    ArchiveFormat,
    PlatformDescriptor,
)
from myagent_installer.core.services.lifecycle.domain.release import ReleaseDescriptor
from myagent_installer.core.services.lifecycle.execution.download import download_file

logger = logging.getLogger(__name__)


def _extract_tar_gz(archive: Path, dest: Path) -> None:
    with tarfile.open(archive, "r:gz") as tf:
        tf.extractall(dest, filter="data")


def _extract_zip(archive: Path, dest: Path) -> None:
    with zipfile.ZipFile(archive, "r") as zf:
        zf.extractall(dest)


_EXTRACTORS = {
    ArchiveFormat.TAR_GZ: _extract_tar_gz,
    ArchiveFormat.ZIP: _extract_zip,
}


def extract_archive(archive: Path, fmt: ArchiveFormat, dest: Path) -> None:
    """Unpack ``archive`` into ``dest``.

    Raises:
        ArchiveError: Corrupt or unreadable archive.
    """
    dest.mkdir(parents=True, exist_ok=True)
    try:
        _EXTRACTORS[fmt](archive, dest)
    except (tarfile.TarError, zipfile.BadZipFile, OSError, EOFError) as exc:
        raise ArchiveError(f"Extract failed for {archive.name}: {exc}") from exc


def _find_executable(extract_dir: Path, name: str) -> Path | None:
    direct = extract_dir / name
    if direct.is_file():
        return direct
    for p in sorted(extract_dir.rglob(name)):
        if p.is_file():
            return p
    return None


def place_executable(src: Path, target: Path) -> None:
    """Copy ``src`` beside ``target``, mark it runnable, rename over ``target``.

    Raises:
        InstallPermissionError: The install directory is not writable.
    """
    partial = target.with_name(f".{target.name}.partial")
    try:
        shutil.copy2(src, partial)
        os.chmod(partial, 0o755)
        os.replace(partial, target)
    except OSError as exc:
        partial.unlink(missing_ok=True)
        raise InstallPermissionError(f"Cannot write {target}: {exc}") from exc


def install_archive(
    release: ReleaseDescriptor,
    platform: PlatformDescriptor,
    paths: InstallPaths,
    *,
    timeout: float | None = None,
) -> Path:
    """Download ``release`` and place its executable at ``paths.binary_path``.

    The scratch directory is removed on every exit path.

    Raises:
        DownloadError: Download failed (scratch file already removed).
        ArchiveError: Archive unreadable or missing the executable.
        InstallPermissionError: Install directory or binary not writable.

    Returns:
        The installed binary path.
    """
    staging = Path(tempfile.mkdtemp(prefix=f"{paths.binary_path.stem}-install-"))
    scratch = staging / release.asset_filename
    try:
        download_file(release.download_url, scratch, timeout=timeout)

        try:
            paths.install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InstallPermissionError(
                f"Cannot create {paths.install_dir}: {exc}",
            ) from exc

        extract_dir = staging / "extracted"
        extract_archive(scratch, platform.archive_format, extract_dir)

        found = _find_executable(extract_dir, paths.binary_path.name)
        if found is None:
            available = sorted(p.name for p in extract_dir.rglob("*") if p.is_file())
            raise ArchiveError(
                f"'{paths.binary_path.name}' not found in {release.asset_filename}"
                f" (contains: {', '.join(available[:10]) or 'nothing'})",
            )

        place_executable(found, paths.binary_path)
        logger.info("Installed %s", paths.binary_path)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    return paths.binary_path
