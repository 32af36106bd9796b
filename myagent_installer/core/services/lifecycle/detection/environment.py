"""
L3 Detection — Host platform and shell detection.

Read-only: ``platform`` module, ``sysctl`` on macOS, ``$SHELL``.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
from collections.abc import Mapping
from pathlib import Path

from myagent_installer.core.services.lifecycle.data.profile_maps import (
    _DEFAULT_SHELL,
    _PROFILE_MAP,
)
from myagent_installer.core.services.lifecycle.domain.platform import (
    PlatformDescriptor,
    normalize_arch,
    normalize_os,
    resolve_platform,
)

logger = logging.getLogger(__name__)


def _rosetta_translated() -> bool:
    """True when this process runs under Rosetta 2 on Apple silicon.

    ``sysctl.proc_translated`` is 1 for translated processes, 0 for
    native ones, and missing on Intel Macs.
    """
    try:
        r = subprocess.run(
            ["sysctl", "-n", "sysctl.proc_translated"],
            capture_output=True, text=True,
        )
    except OSError:
        return False
    return r.returncode == 0 and r.stdout.strip() == "1"


def detect_platform() -> PlatformDescriptor:
    """Detect the host platform and map it onto the asset matrix.

    Raises:
        UnsupportedPlatformError: Host has no published asset.
    """
    os_name = platform.system()
    machine = platform.machine()

    translated = False
    if normalize_os(os_name) == "darwin" and normalize_arch(machine) == "x86_64":
        translated = _rosetta_translated()
        if translated:
            logger.info("Rosetta translation detected; selecting the native arm64 build")

    descriptor = resolve_platform(os_name, machine, translated=translated)
    logger.debug("Platform: %s/%s (raw: %s/%s)", descriptor.os, descriptor.arch, os_name, machine)
    return descriptor


def detect_shell(environ: Mapping[str, str] | None = None) -> str:
    """Shell type from ``$SHELL``, e.g. ``/usr/bin/zsh`` → ``zsh``.

    Unrecognised shells fall back to ``sh``.
    """
    env = os.environ if environ is None else environ
    shell_type = os.path.basename(env.get("SHELL", "") or "")
    return shell_type if shell_type in _PROFILE_MAP else _DEFAULT_SHELL


def profile_for_shell(shell_type: str, home: Path) -> Path:
    """The one profile file the installer targets for ``shell_type``."""
    rc_file = _PROFILE_MAP.get(shell_type, _PROFILE_MAP[_DEFAULT_SHELL])
    return home / rc_file.removeprefix("~/")
