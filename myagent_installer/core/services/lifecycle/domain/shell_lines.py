"""
L1 Domain — Shell profile lines (pure).

Generates the PATH export line for a given shell type.
"""

from __future__ import annotations


def _shell_config_line(shell_type: str, path_entry: str) -> str:
    """Generate a shell-specific line that prepends ``path_entry`` to PATH.

    Args:
        shell_type: ``"bash"`` | ``"zsh"`` | ``"fish"`` | ``"sh"`` | etc.
        path_entry: Directory to add, e.g. ``"$HOME/.local/bin"``.
    """
    if shell_type == "fish":
        return f"set -gx PATH {path_entry} $PATH"
    # POSIX (bash, zsh, sh, dash, ash)
    return f'export PATH="{path_entry}:$PATH"'
