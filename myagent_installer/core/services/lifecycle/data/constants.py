"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

# Architecture name normalization.
#
# Release assets use raw ``uname -m`` naming (x86_64 / aarch64).  Every
# synonym maps onto that for every OS: Darwin reports ``arm64``, Windows
# reports ``AMD64``.  Lookups are done on the lowercased value.
_ARCH_MAP: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

# OS name normalization (lowercased ``platform.system()`` / ``sys.platform``).
_OS_MAP: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "windows": "windows",
    "win32": "windows",
}

# The published asset matrix.  Anything else has no release asset.
SUPPORTED_PLATFORMS: frozenset[tuple[str, str]] = frozenset({
    ("linux", "x86_64"),
    ("linux", "aarch64"),
    ("darwin", "x86_64"),
    ("darwin", "aarch64"),
    ("windows", "x86_64"),
})

# Asset naming: myagent-linux-x86_64.tar.gz, myagent-windows-x86_64.zip
ASSET_TEMPLATE = "{program}-{os}-{arch}.{ext}"

# Archive container per OS family.
ARCHIVE_FORMATS: dict[str, str] = {
    "linux": "tar.gz",
    "darwin": "tar.gz",
    "windows": "zip",
}

# Default locations, relative to the user's home directory.
INSTALL_DIR_PARTS: tuple[str, ...] = (".local", "bin")
CONFIG_DIR_TEMPLATE = ".{program}"
PID_FILE_TEMPLATE = "{program}.pid"

# Every place a previous install may have left the binary
# (installer script, or ``cargo install``).
KNOWN_INSTALL_DIRS: tuple[tuple[str, ...], ...] = (
    (".local", "bin"),
    (".cargo", "bin"),
)

# Sentinels delimiting the PATH block written into a shell profile.
PATH_BLOCK_START = "# >>> {program} installer: PATH >>>"
PATH_BLOCK_END = "# <<< {program} installer: PATH <<<"

# Marker the program prints when no daemon is running.
STATUS_NOT_RUNNING = "not running"

USER_AGENT = "myagent-installer/1.0"
