"""
Tests for the archive installer — staging, extraction, placement.
"""

import io
import os
import stat
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from myagent_installer.core.services.harness.feed import SyntheticFeed
from myagent_installer.core.services.lifecycle.domain.errors import (
    ArchiveError,
    DownloadError,
    InstallPermissionError,
)
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import ArchiveFormat
from myagent_installer.core.services.lifecycle.domain.release import ReleaseDescriptor, build_release
from myagent_installer.core.services.lifecycle.execution import archive
from myagent_installer.core.services.lifecycle.execution.archive import (
    extract_archive,
    install_archive,
    place_executable,
)

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell stub")


def _staging_dirs() -> set[str]:
    return {p.name for p in Path(tempfile.gettempdir()).glob("myagent-install-*")}


class TestExtractArchive:
    def test_tar_gz(self, tmp_path: Path, stub_program: Path):
        arc = tmp_path / "a.tar.gz"
        with tarfile.open(arc, "w:gz") as tf:
            tf.add(stub_program, arcname="myagent")
        extract_archive(arc, ArchiveFormat.TAR_GZ, tmp_path / "out")
        assert (tmp_path / "out" / "myagent").read_bytes() == stub_program.read_bytes()

    def test_zip(self, tmp_path: Path):
        arc = tmp_path / "a.zip"
        with zipfile.ZipFile(arc, "w") as zf:
            zf.writestr("myagent.exe", b"MZ")
        extract_archive(arc, ArchiveFormat.ZIP, tmp_path / "out")
        assert (tmp_path / "out" / "myagent.exe").read_bytes() == b"MZ"

    def test_corrupt_archive(self, tmp_path: Path):
        arc = tmp_path / "a.tar.gz"
        arc.write_bytes(b"not an archive")
        with pytest.raises(ArchiveError):
            extract_archive(arc, ArchiveFormat.TAR_GZ, tmp_path / "out")

    def test_path_traversal_rejected(self, tmp_path: Path):
        arc = tmp_path / "evil.tar.gz"
        data = b"pwned"
        with tarfile.open(arc, "w:gz") as tf:
            info = tarfile.TarInfo("../escape")
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
        with pytest.raises(ArchiveError):
            extract_archive(arc, ArchiveFormat.TAR_GZ, tmp_path / "out")
        assert not (tmp_path / "escape").exists()


class TestPlaceExecutable:
    @posix_only
    def test_marks_runnable(self, tmp_path: Path):
        src = tmp_path / "src"
        src.write_bytes(b"#!/bin/sh\n")
        src.chmod(0o644)
        target = tmp_path / "myagent"
        place_executable(src, target)
        assert stat.S_IMODE(target.stat().st_mode) == 0o755
        assert not (tmp_path / ".myagent.partial").exists()

    def test_overwrites_existing(self, tmp_path: Path):
        src = tmp_path / "src"
        src.write_bytes(b"NEW")
        target = tmp_path / "myagent"
        target.write_bytes(b"OLDBIN")
        place_executable(src, target)
        assert target.read_bytes() == b"NEW"

    def test_unwritable_target(self, tmp_path: Path):
        src = tmp_path / "src"
        src.write_bytes(b"x")
        with pytest.raises(InstallPermissionError):
            place_executable(src, tmp_path / "missing-dir" / "myagent")


@posix_only
class TestInstallArchive:
    def test_fresh_install(self, feed_server, synthetic_feed, linux, paths, stub_program):
        rel = build_release(feed_server, linux, "myagent", synthetic_feed.tag)
        before = _staging_dirs()

        binary = install_archive(rel, linux, paths)

        assert binary == paths.binary_path
        assert binary.read_bytes() == stub_program.read_bytes()
        assert os.access(binary, os.X_OK)
        assert _staging_dirs() == before

    def test_upgrade_overwrites(self, feed_server, synthetic_feed, linux, paths, stub_program):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        rel = build_release(feed_server, linux, "myagent", synthetic_feed.tag)

        install_archive(rel, linux, paths)

        assert paths.binary_path.read_bytes() == stub_program.read_bytes()

    def test_failed_download_leaves_prior_install(self, feed_server, linux, paths):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        rel = ReleaseDescriptor(
            version_tag="v9.9.9",
            asset_filename="myagent-linux-x86_64.tar.gz",
            download_url=feed_server.download_url("v9.9.9", "does-not-exist.tar.gz"),
        )
        before = _staging_dirs()

        with pytest.raises(DownloadError):
            install_archive(rel, linux, paths)

        assert paths.binary_path.read_bytes() == b"OLDBIN"
        assert sorted(p.name for p in paths.install_dir.iterdir()) == ["myagent"]
        assert _staging_dirs() == before

    def test_archive_without_executable(self, tmp_path, feed_server, synthetic_feed, linux, paths):
        other = tmp_path / "README"
        other.write_text("hello")
        with tarfile.open(synthetic_feed.archive_path, "w:gz") as tf:
            tf.add(other, arcname="README")
        rel = build_release(feed_server, linux, "myagent", synthetic_feed.tag)

        with pytest.raises(ArchiveError) as exc:
            install_archive(rel, linux, paths)
        assert "README" in str(exc.value)
        assert not paths.binary_path.exists()

    def test_nested_executable_found(self, tmp_path, feed_server, synthetic_feed, linux, paths, stub_program):
        with tarfile.open(synthetic_feed.archive_path, "w:gz") as tf:
            tf.add(stub_program, arcname="myagent-linux-x86_64/myagent")
        rel = build_release(feed_server, linux, "myagent", synthetic_feed.tag)

        install_archive(rel, linux, paths)

        assert paths.binary_path.read_bytes() == stub_program.read_bytes()

    def test_install_dir_not_creatable(self, feed_server, synthetic_feed, linux, home):
        blocker = home / "blocked"
        blocker.write_text("a file, not a directory")
        paths = InstallPaths.for_home(home, "myagent", linux)
        paths = InstallPaths(
            home=home,
            install_dir=blocker / "bin",
            binary_path=blocker / "bin" / "myagent",
            config_dir=paths.config_dir,
            pid_file_path=paths.pid_file_path,
        )
        rel = build_release(feed_server, linux, "myagent", synthetic_feed.tag)

        with pytest.raises(InstallPermissionError):
            install_archive(rel, linux, paths)

    def test_zip_variant_selected_by_platform(self, feed_server, synthetic_feed, stub_program, windows, home):
        win_feed = SyntheticFeed.build(stub_program, windows, "myagent", synthetic_feed.root)
        paths = InstallPaths.for_home(home, "myagent", windows)
        rel = build_release(feed_server, windows, "myagent", win_feed.tag)

        unzip = MagicMock(wraps=archive._extract_zip)
        with patch.dict(archive._EXTRACTORS, {ArchiveFormat.ZIP: unzip}):
            install_archive(rel, windows, paths)

        unzip.assert_called_once()
        assert rel.asset_filename == "myagent-windows-x86_64.zip"
        assert paths.binary_path.name == "myagent.exe"
        assert paths.binary_path.read_bytes() == stub_program.read_bytes()

