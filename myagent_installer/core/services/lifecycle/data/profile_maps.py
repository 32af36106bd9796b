"""
L0 Data — Shell profile/rc file mappings.

Maps shell types to the one profile file the installer targets.
Anything not listed falls back to ``sh``.
"""

from __future__ import annotations

_PROFILE_MAP: dict[str, str] = {
    "bash": "~/.bashrc",
    "zsh": "~/.zshrc",
    "fish": "~/.config/fish/config.fish",
    "sh": "~/.profile",
}

_DEFAULT_SHELL = "sh"
