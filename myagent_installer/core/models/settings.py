"""
Installer settings — what to install, and from where.

Loaded from an optional YAML file (see ``core/config/loader.py``) and
overlaid with environment overrides.  Every field has a default, so a
bare run with no config file installs ``vecbase-labs/myagent``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class InstallerSettings(BaseModel):
    """Settings for one installer invocation."""

    program_name: str = "myagent"
    repository: str = "vecbase-labs/myagent"

    # Feed templates: {repository}, {tag}, {asset}
    latest_url_template: str = "https://api.github.com/repos/{repository}/releases/latest"
    download_url_template: str = (
        "https://github.com/{repository}/releases/download/{tag}/{asset}"
    )

    # Local test mode (synthetic feed on 127.0.0.1)
    local_port: int = Field(default=18199, ge=1, le=65535)
    test_version: str = "0.0.0-test"
    startup_delay: float = Field(default=1.0, ge=0)

    # None means block indefinitely (no timeout)
    network_timeout: float | None = None

    # Overrides Path.home() for every install location
    home: Path | None = None

    # ── Environment-sourced switches ──
    assume_yes: bool = False
    local_mode: bool = False

    def resolved_home(self) -> Path:
        """Home directory that all install locations hang off."""
        return (self.home or Path.home()).expanduser()
