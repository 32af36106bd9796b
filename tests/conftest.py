"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path

import pytest
from werkzeug.serving import make_server

from myagent_installer.core.services.harness.feed import SyntheticFeed
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import (
    Arch,
    OsFamily,
    PlatformDescriptor,
)
from myagent_installer.core.services.lifecycle.domain.release import ReleaseFeed
from myagent_installer.ui.web.feed_server import create_feed_app

# Stands in for the real program: answers --version, status and stop
STUB_PROGRAM = """\
#!/bin/sh
case "$1" in
    --version) echo "myagent 0.0.0-test" ;;
    status)    echo "myagent is not running" ;;
    stop)      echo "myagent is not running" >&2; exit 1 ;;
    *)         exit 0 ;;
esac
"""


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory."""
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def linux() -> PlatformDescriptor:
    return PlatformDescriptor(OsFamily.LINUX, Arch.X86_64)


@pytest.fixture
def windows() -> PlatformDescriptor:
    return PlatformDescriptor(OsFamily.WINDOWS, Arch.X86_64)


@pytest.fixture
def paths(home: Path, linux: PlatformDescriptor) -> InstallPaths:
    return InstallPaths.for_home(home, "myagent", linux)


@pytest.fixture
def stub_program(tmp_path: Path) -> Path:
    """An executable shell script that behaves like a stopped myagent."""
    p = tmp_path / "build" / "myagent"
    p.parent.mkdir(parents=True)
    p.write_text(STUB_PROGRAM)
    p.chmod(0o755)
    return p


@pytest.fixture
def synthetic_feed(tmp_path: Path, stub_program: Path, linux: PlatformDescriptor) -> SyntheticFeed:
    """Feed directory with ``latest`` and the linux/x86_64 asset."""
    return SyntheticFeed.build(stub_program, linux, "myagent", tmp_path / "feed")


@pytest.fixture
def feed_server(synthetic_feed: SyntheticFeed) -> Iterator[ReleaseFeed]:
    """Serve the synthetic feed in-process on an ephemeral port."""
    server = make_server("127.0.0.1", 0, create_feed_app(synthetic_feed.root))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield ReleaseFeed.local("vecbase-labs/myagent", server.server_port)
    finally:
        server.shutdown()
        thread.join(timeout=5)
