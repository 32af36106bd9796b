"""
L1 Domain — Version parsing and comparison (pure).
"""

from __future__ import annotations

import re

_SEMVER_RE = re.compile(r"\bv?(\d+)\.(\d+)\.(\d+)(?:[-+][0-9A-Za-z.-]+)?\b")


def parse_version(value: str) -> tuple[int, int, int] | None:
    """Parse ``"v1.2.3"`` / ``"1.2.3"`` into ``(1, 2, 3)``.

    Pre-release suffixes are ignored.  Returns None if unparsable.
    """
    m = _SEMVER_RE.fullmatch(value.strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def extract_version(output: str) -> str | None:
    """Find the first version string in ``--version`` output.

    ``"myagent 0.4.1\\n"`` → ``"0.4.1"``.
    """
    m = _SEMVER_RE.search(output)
    return m.group(0).lstrip("v") if m else None


def is_newer(latest: str, current: str) -> bool:
    """True iff ``latest`` is strictly newer than ``current``.

    Unparsable versions never count as newer.
    """
    lv, cv = parse_version(latest), parse_version(current)
    if lv is None or cv is None:
        return False
    return lv > cv
