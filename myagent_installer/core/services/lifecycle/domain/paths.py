"""
L1 Domain — Install locations (pure).

``InstallPaths`` is computed once per invocation from the home
directory and handed to every step.  Nothing downstream re-derives a
location or looks at the current working directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from myagent_installer.core.services.lifecycle.data.constants import (
    CONFIG_DIR_TEMPLATE,
    INSTALL_DIR_PARTS,
    KNOWN_INSTALL_DIRS,
    PID_FILE_TEMPLATE,
)
from myagent_installer.core.services.lifecycle.domain.platform import PlatformDescriptor


@dataclass(frozen=True)
class InstallPaths:
    """Every on-disk location the installer touches."""

    home: Path
    install_dir: Path
    binary_path: Path
    config_dir: Path
    pid_file_path: Path

    @classmethod
    def for_home(
        cls,
        home: Path,
        program: str,
        platform: PlatformDescriptor,
    ) -> InstallPaths:
        home = Path(home).expanduser()
        install_dir = home.joinpath(*INSTALL_DIR_PARTS)
        config_dir = home / CONFIG_DIR_TEMPLATE.format(program=program)
        return cls(
            home=home,
            install_dir=install_dir,
            binary_path=install_dir / platform.executable_name(program),
            config_dir=config_dir,
            pid_file_path=config_dir / PID_FILE_TEMPLATE.format(program=program),
        )

    def install_dir_for_shell(self) -> str:
        """Install dir spelled the way a shell profile should reference it.

        ``$HOME/.local/bin`` when it lives under home, so the profile
        line stays valid if the home directory moves.
        """
        try:
            rel = self.install_dir.relative_to(self.home)
        except ValueError:
            return str(self.install_dir)
        return f"$HOME/{rel.as_posix()}"

    def known_binary_locations(self) -> list[Path]:
        """Every location a previous install may have placed the binary."""
        name = self.binary_path.name
        locations = [self.home.joinpath(*parts) / name for parts in KNOWN_INSTALL_DIRS]
        if self.binary_path not in locations:
            locations.insert(0, self.binary_path)
        return locations

    def to_dict(self) -> dict:
        return {
            "install_dir": str(self.install_dir),
            "binary_path": str(self.binary_path),
            "config_dir": str(self.config_dir),
            "pid_file_path": str(self.pid_file_path),
        }
