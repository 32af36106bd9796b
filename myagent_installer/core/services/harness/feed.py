"""
Harness — Synthetic release feed.

``SyntheticFeed.build`` lays out a directory that mimics the release
feed: a ``latest`` document and ``download/<asset>``.  ``LocalFeedServer``
serves it on 127.0.0.1 from a separate process.
"""

from __future__ import annotations

import json
import logging
import subprocess
import sys
import tarfile
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path

from myagent_installer.core.services.lifecycle.domain.platform import (
    ArchiveFormat,
    PlatformDescriptor,
)
from myagent_installer.core.services.lifecycle.domain.release import asset_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyntheticFeed:
    root: Path
    tag: str
    asset: str

    @property
    def archive_path(self) -> Path:
        return self.root / "download" / self.asset

    @classmethod
    def build(
        cls,
        binary: Path,
        platform: PlatformDescriptor,
        program: str,
        root: Path,
        tag: str = "0.0.0-test",
    ) -> SyntheticFeed:
        """Package ``binary`` as the release asset for ``platform``.

        The archive holds a single entry named like the installed
        executable (``myagent`` / ``myagent.exe``).
        """
        asset = asset_filename(platform, program)
        download = root / "download"
        download.mkdir(parents=True, exist_ok=True)

        member = platform.executable_name(program)
        archive = download / asset
        if platform.archive_format == ArchiveFormat.ZIP:
            with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
                zf.write(binary, arcname=member)
        else:
            with tarfile.open(archive, "w:gz") as tf:
                tf.add(binary, arcname=member)

        (root / "latest").write_text(json.dumps({"tag_name": tag}) + "\n", encoding="utf-8")
        logger.info("Synthetic feed ready in %s (%s, %s)", root, tag, asset)
        return cls(root=root, tag=tag, asset=asset)


class LocalFeedServer:
    """Feed server subprocess, torn down by its recorded process handle."""

    def __init__(self, serve_dir: Path, port: int, startup_delay: float = 1.0) -> None:
        self.serve_dir = serve_dir
        self.port = port
        self.startup_delay = startup_delay
        self.proc: subprocess.Popen | None = None

    def start(self) -> LocalFeedServer:
        self.proc = subprocess.Popen(
            [
                sys.executable, "-m", "myagent_installer.ui.web.feed_server",
                "--root", str(self.serve_dir),
                "--port", str(self.port),
            ],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        logger.info("Feed server started on 127.0.0.1:%d (pid %d)", self.port, self.proc.pid)
        # Fixed delay so the first request does not race server startup
        time.sleep(self.startup_delay)
        return self

    def stop(self) -> None:
        proc, self.proc = self.proc, None
        if proc is None:
            return
        if proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
        logger.info("Feed server stopped")

    def __enter__(self) -> LocalFeedServer:
        return self.start()

    def __exit__(self, *exc: object) -> None:
        self.stop()
