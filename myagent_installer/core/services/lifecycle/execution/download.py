"""
L4 Execution — Release feed HTTP access.

One GET for the "latest" metadata, one GET for the asset.  Each is
attempted exactly once; failures surface as typed errors.
"""

from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from pathlib import Path

from myagent_installer.core.services.lifecycle.data.constants import USER_AGENT
from myagent_installer.core.services.lifecycle.domain.download_helpers import (
    _fmt_size,
    _progress_step,
)
from myagent_installer.core.services.lifecycle.domain.errors import (
    DownloadError,
    NetworkError,
)
from myagent_installer.core.services.lifecycle.domain.release import (
    ReleaseFeed,
    extract_tag,
)

logger = logging.getLogger(__name__)

# Everything urllib can raise for a transport-level failure.
_TRANSPORT_ERRORS = (urllib.error.URLError, http.client.HTTPException, OSError, ValueError)


def _request(url: str, accept: str) -> urllib.request.Request:
    return urllib.request.Request(
        url,
        headers={"User-Agent": USER_AGENT, "Accept": accept},
    )


def fetch_latest_tag(feed: ReleaseFeed, *, timeout: float | None = None) -> str:
    """Fetch the feed's "latest" document and return its version tag.

    Raises:
        NetworkError: Transport or HTTP failure.
        VersionNotFoundError: Document has no (or an empty) tag field.
    """
    url = feed.latest_url
    logger.debug("Fetching latest release metadata: %s", url)
    try:
        req = _request(url, "application/vnd.github.v3+json")
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read().decode("utf-8", errors="replace")
    except _TRANSPORT_ERRORS as exc:
        raise NetworkError(f"Failed to fetch latest version from {url}: {exc}") from exc

    tag = extract_tag(body)
    logger.info("Latest release: %s", tag)
    return tag


def download_file(url: str, dest: Path, *, timeout: float | None = None) -> int:
    """Stream ``url`` into ``dest``.

    On any failure the partial ``dest`` is deleted before
    ``DownloadError`` propagates.

    Returns:
        Number of bytes written.
    """
    logger.info("Downloading %s", url)
    downloaded = 0
    try:
        req = _request(url, "application/octet-stream")
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            total = int(resp.headers.get("Content-Length", 0) or 0)
            last_pct = 0
            with open(dest, "wb") as f:
                while True:
                    chunk = resp.read(8192)
                    if not chunk:
                        break
                    f.write(chunk)
                    downloaded += len(chunk)

                    pct = _progress_step(downloaded, total, last_pct)
                    if pct is not None:
                        last_pct = pct
                        logger.info(
                            "Download progress: %d%% (%s / %s)",
                            pct, _fmt_size(downloaded), _fmt_size(total),
                        )
    except _TRANSPORT_ERRORS as exc:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"Download failed: {url}: {exc}") from exc

    logger.info("Downloaded %s to %s", _fmt_size(downloaded), dest)
    return downloaded
