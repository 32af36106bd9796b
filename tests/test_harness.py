"""
Tests for the self-test harness — snapshot/restore, synthetic feed,
feed server process, and the end-to-end run.
"""

import json
import shutil
import socket
import stat
import sys
import tempfile
import threading
import time
import urllib.request
from pathlib import Path
from unittest.mock import patch

import pytest
from werkzeug.serving import make_server

from myagent_installer.core.models.settings import InstallerSettings
from myagent_installer.core.services.harness import selftest as selftest_mod
from myagent_installer.core.services.harness import snapshot as snapshot_mod
from myagent_installer.core.services.harness.feed import LocalFeedServer, SyntheticFeed
from myagent_installer.core.services.harness.selftest import SelfTestReport, run_selftest
from myagent_installer.core.services.harness.snapshot import (
    SnapshotError,
    clear_installation,
    preserved_installation,
    restore_snapshot,
    take_snapshot,
)
from myagent_installer.core.services.lifecycle.execution.path_posix import PosixProfilePathManager
from myagent_installer.ui.web.feed_server import create_feed_app

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell stub")


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class InThreadFeedServer:
    """Drop-in for ``LocalFeedServer`` that serves from a thread."""

    def __init__(self, serve_dir: Path, port: int, startup_delay: float = 0.0) -> None:
        self._server = make_server("127.0.0.1", port, create_feed_app(serve_dir))
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    def start(self):
        self._thread.start()
        return self

    def stop(self) -> None:
        self._server.shutdown()
        self._thread.join(timeout=5)


@pytest.fixture
def pm(paths) -> PosixProfilePathManager:
    return PosixProfilePathManager(paths, "myagent", "bash", paths.home / ".bashrc")


@pytest.fixture
def local_settings(home) -> InstallerSettings:
    return InstallerSettings(home=home, local_mode=True, local_port=_free_port(), startup_delay=0)


# ── Snapshot / restore ───────────────────────────────────────────────


class TestSnapshot:
    def test_clears_then_restores(self, paths):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        (paths.config_dir / "logs").mkdir(parents=True)
        (paths.config_dir / "settings.json").write_text('{"k": 1}')

        with preserved_installation(paths.known_binary_locations(), paths.config_dir) as snap:
            assert not paths.binary_path.exists()
            assert not paths.config_dir.exists()
            assert snap.vault_path.is_dir()
            paths.config_dir.mkdir()
            (paths.config_dir / "junk").write_text("from the run")

        assert paths.binary_path.read_bytes() == b"OLDBIN"
        assert (paths.config_dir / "settings.json").read_text() == '{"k": 1}'
        assert (paths.config_dir / "logs").is_dir()
        assert not (paths.config_dir / "junk").exists()
        assert not snap.vault_path.exists()

    @posix_only
    def test_mode_preserved(self, paths):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        paths.binary_path.chmod(0o700)
        with preserved_installation([paths.binary_path], paths.config_dir):
            pass
        assert stat.S_IMODE(paths.binary_path.stat().st_mode) == 0o700

    @posix_only
    def test_symlink_restored_as_link(self, paths, tmp_path: Path):
        real = tmp_path / "cargo-build" / "myagent"
        real.parent.mkdir()
        real.write_bytes(b"REAL")
        cargo = paths.home / ".cargo" / "bin" / "myagent"
        cargo.parent.mkdir(parents=True)
        cargo.symlink_to(real)

        with preserved_installation(paths.known_binary_locations(), paths.config_dir):
            assert not cargo.exists() and not cargo.is_symlink()

        assert cargo.is_symlink()
        assert cargo.resolve() == real.resolve()
        assert real.read_bytes() == b"REAL"

    def test_absent_locations_stay_absent(self, paths):
        with preserved_installation(paths.known_binary_locations(), paths.config_dir):
            paths.install_dir.mkdir(parents=True)
            paths.binary_path.write_bytes(b"NEW")
            paths.config_dir.mkdir()
        assert not paths.binary_path.exists()
        assert not paths.config_dir.exists()

    def test_profile_bytes_restored(self, paths, pm):
        pm.profile.write_text("export EDITOR=vim\n")
        with preserved_installation([paths.binary_path], paths.config_dir, pm.profile):
            pm.add()
            pm.profile.write_text("clobbered\n")
        assert pm.profile.read_text() == "export EDITOR=vim\n"

    def test_profile_created_by_run_is_removed(self, paths, pm):
        with preserved_installation([paths.binary_path], paths.config_dir, pm.profile):
            pm.add()
        assert not pm.profile.exists()

    def test_restored_when_run_raises(self, paths):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        with pytest.raises(RuntimeError):
            with preserved_installation([paths.binary_path], paths.config_dir):
                paths.binary_path.parent.mkdir(parents=True, exist_ok=True)
                paths.binary_path.write_bytes(b"HALF")
                raise RuntimeError("assertion blew up")
        assert paths.binary_path.read_bytes() == b"OLDBIN"

    def test_restore_runs_once(self, paths):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        snap = take_snapshot([paths.binary_path], paths.config_dir)
        restore_snapshot(snap)
        paths.binary_path.write_bytes(b"LATER")
        restore_snapshot(snap)
        assert paths.binary_path.read_bytes() == b"LATER"

    def test_restore_failure_is_logged_not_raised(self, paths, caplog):
        with patch.object(snapshot_mod, "restore_snapshot", side_effect=OSError("disk full")):
            with preserved_installation([paths.binary_path], paths.config_dir) as snap:
                pass
        shutil.rmtree(snap.vault_path, ignore_errors=True)
        assert "Restore failed" in caplog.text
        assert "disk full" in caplog.text

    def test_backup_failure_raises_and_drops_vault(self, paths):
        (paths.config_dir / "logs").mkdir(parents=True)
        made = []
        real_mkdtemp = tempfile.mkdtemp

        def _mkdtemp(**kw):
            made.append(Path(real_mkdtemp(**kw)))
            return str(made[-1])

        with patch.object(snapshot_mod.tempfile, "mkdtemp", side_effect=_mkdtemp), \
                patch.object(snapshot_mod.shutil, "copytree", side_effect=PermissionError("denied")):
            with pytest.raises(SnapshotError, match="denied"):
                take_snapshot([paths.binary_path], paths.config_dir)

        assert len(made) == 1
        assert not made[0].exists()
        assert (paths.config_dir / "logs").is_dir()

    def test_clear_failure_is_typed(self, paths):
        paths.config_dir.mkdir()
        snap = take_snapshot([paths.binary_path], paths.config_dir)
        try:
            with patch.object(snapshot_mod.shutil, "rmtree", side_effect=OSError("busy")):
                with pytest.raises(SnapshotError, match="busy"):
                    clear_installation(snap)
        finally:
            restore_snapshot(snap)
        assert paths.config_dir.is_dir()

    @posix_only
    def test_symlinked_config_dir(self, paths, tmp_path: Path):
        real = tmp_path / "dotfiles" / "myagent"
        real.mkdir(parents=True)
        (real / "settings.json").write_text("{}")
        paths.config_dir.symlink_to(real)

        with preserved_installation([paths.binary_path], paths.config_dir):
            assert not paths.config_dir.is_symlink()
            assert (real / "settings.json").exists()
            paths.config_dir.mkdir()

        assert paths.config_dir.is_symlink()
        assert paths.config_dir.resolve() == real.resolve()
        assert (real / "settings.json").read_text() == "{}"


# ── Synthetic feed ───────────────────────────────────────────────────


class TestSyntheticFeed:
    def test_layout(self, tmp_path, stub_program, linux):
        feed = SyntheticFeed.build(stub_program, linux, "myagent", tmp_path / "serve")
        assert json.loads((tmp_path / "serve" / "latest").read_text()) == {"tag_name": "0.0.0-test"}
        assert feed.archive_path == tmp_path / "serve" / "download" / "myagent-linux-x86_64.tar.gz"
        assert feed.archive_path.is_file()

    def test_windows_asset_is_zip(self, tmp_path, stub_program, windows):
        import zipfile

        feed = SyntheticFeed.build(stub_program, windows, "myagent", tmp_path / "serve", tag="v1.2.3")
        assert feed.asset == "myagent-windows-x86_64.zip"
        with zipfile.ZipFile(feed.archive_path) as zf:
            assert zf.namelist() == ["myagent.exe"]
        assert "v1.2.3" in (tmp_path / "serve" / "latest").read_text()


class TestLocalFeedServerProcess:
    """The real detached server process."""

    def test_serves_and_stops(self, synthetic_feed):
        port = _free_port()
        server = LocalFeedServer(synthetic_feed.root, port, startup_delay=0.5).start()
        try:
            body = None
            deadline = time.monotonic() + 20
            while body is None and time.monotonic() < deadline:
                try:
                    with urllib.request.urlopen(f"http://127.0.0.1:{port}/latest") as resp:
                        body = resp.read().decode()
                except OSError:
                    time.sleep(0.2)
            assert body is not None
            assert '"tag_name": "0.0.0-test"' in body
            proc = server.proc
        finally:
            server.stop()
        assert server.proc is None
        assert proc.poll() is not None

    def test_stop_without_start(self, tmp_path):
        LocalFeedServer(tmp_path, _free_port()).stop()


# ── End to end ───────────────────────────────────────────────────────


@posix_only
class TestRunSelftest:
    def test_fresh_machine_passes(self, local_settings, paths, linux, pm, stub_program):
        with patch.object(selftest_mod, "LocalFeedServer", InThreadFeedServer):
            report = run_selftest(local_settings, paths, linux, pm, local_binary=stub_program)

        assert report.ok, report.to_dict()
        names = [c.name for c in report.checks]
        assert "Status reports not running" in names
        assert "Version output contains 'myagent'" in names
        assert not paths.binary_path.exists()
        assert not pm.profile.exists()

    def test_oldbin_is_restored(self, local_settings, paths, linux, pm, stub_program):
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")
        assert not paths.config_dir.exists()

        with patch.object(selftest_mod, "LocalFeedServer", InThreadFeedServer):
            report = run_selftest(local_settings, paths, linux, pm, local_binary=stub_program)

        assert report.ok, report.to_dict()
        assert report.failed == 0
        assert paths.binary_path.read_bytes() == b"OLDBIN"
        assert not paths.config_dir.exists()

    def test_users_own_path_line_left_alone(self, local_settings, paths, linux, pm, stub_program):
        original = 'alias ll="ls -l"\nexport PATH="$HOME/.local/bin:$PATH"\n'
        pm.profile.write_text(original)

        with patch.object(selftest_mod, "LocalFeedServer", InThreadFeedServer):
            report = run_selftest(local_settings, paths, linux, pm, local_binary=stub_program)

        assert report.ok, report.to_dict()
        assert pm.profile.read_text() == original

    def test_failed_check_counts_and_still_restores(self, local_settings, paths, linux, pm, tmp_path):
        chatty = tmp_path / "chatty" / "myagent"
        chatty.parent.mkdir()
        chatty.write_text('#!/bin/sh\necho "myagent 1.0.0"; [ "$1" = status ] && echo "running"\nexit 0\n')
        chatty.chmod(0o755)
        paths.install_dir.mkdir(parents=True)
        paths.binary_path.write_bytes(b"OLDBIN")

        with patch.object(selftest_mod, "LocalFeedServer", InThreadFeedServer):
            report = run_selftest(local_settings, paths, linux, pm, local_binary=chatty)

        assert not report.ok
        failed = [c.name for c in report.checks if not c.passed]
        assert failed == ["Status reports not running"]
        assert paths.binary_path.read_bytes() == b"OLDBIN"

    def test_install_failure_recorded(self, local_settings, paths, linux, pm, stub_program):
        class DeadServer:
            """Never listens, so the install cannot reach the feed."""

            def __init__(self, serve_dir, port, startup_delay=0.0):
                pass

            def start(self):
                return self

            def stop(self) -> None:
                pass

        with patch.object(selftest_mod, "LocalFeedServer", DeadServer):
            report = run_selftest(local_settings, paths, linux, pm, local_binary=stub_program)

        assert report.failed == 1
        assert report.checks[0].name == "install"
        assert not report.checks[0].passed

    def test_local_mode_requires_binary(self, local_settings, paths, linux, pm):
        with pytest.raises(ValueError):
            run_selftest(local_settings, paths, linux, pm)


class TestSelfTestReport:
    def test_counts(self):
        r = SelfTestReport()
        r.record("a", True)
        r.record("b", False, "why")
        assert (r.passed, r.failed, r.ok) == (1, 1, False)
        assert r.to_dict()["checks"][1] == {"name": "b", "passed": False, "detail": "why"}
