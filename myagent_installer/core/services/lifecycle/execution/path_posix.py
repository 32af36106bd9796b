"""
L4 Execution — PATH via a shell profile (Linux, macOS).

Writes one marker-delimited block into exactly one profile file, chosen
from the user's shell.  Add is idempotent; remove deletes the block and
nothing else.
"""

from __future__ import annotations

import logging
from pathlib import Path

from myagent_installer.core.services.lifecycle.data.constants import (
    PATH_BLOCK_END,
    PATH_BLOCK_START,
)
from myagent_installer.core.services.lifecycle.domain.errors import ProfileWriteError
from myagent_installer.core.services.lifecycle.domain.marked_block import (
    MarkedBlock,
    has_exact_line,
)
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.report import StepReport, StepStatus
from myagent_installer.core.services.lifecycle.domain.shell_lines import _shell_config_line

logger = logging.getLogger(__name__)


class PosixProfilePathManager:
    """Adds/removes the install dir in one shell profile file."""

    def __init__(
        self,
        paths: InstallPaths,
        program: str,
        shell: str,
        profile: Path,
    ) -> None:
        self.paths = paths
        self.shell = shell
        self.profile = profile
        self.block = MarkedBlock(
            start=PATH_BLOCK_START.format(program=program),
            end=PATH_BLOCK_END.format(program=program),
        )
        entry = paths.install_dir_for_shell()
        self.line = _shell_config_line(shell, entry)
        # Bare export line (older installers, or the user). Counts as
        # present for add; remove never touches it.
        self.legacy_line = _shell_config_line("sh", entry)

    # ── I/O ──

    def _read(self) -> str | None:
        try:
            with self.profile.open(encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ProfileWriteError(f"Cannot read {self.profile}: {exc}") from exc

    def _write(self, content: str | None) -> None:
        try:
            if content is None:
                self.profile.unlink(missing_ok=True)
                return
            self.profile.parent.mkdir(parents=True, exist_ok=True)
            self.profile.write_text(content, encoding="utf-8", newline="")
        except OSError as exc:
            raise ProfileWriteError(f"Cannot write {self.profile}: {exc}") from exc

    # ── Operations ──

    def is_present(self) -> bool:
        content = self._read()
        return self.block.contains(content) or has_exact_line(content, self.legacy_line)

    def add(self) -> StepReport:
        """Append the PATH block unless it (or the legacy line) is there."""
        content = self._read()
        if self.block.contains(content) or has_exact_line(content, self.legacy_line):
            logger.debug("PATH entry already present in %s", self.profile)
            return StepReport("path", StepStatus.UNCHANGED, str(self.profile))

        self._write(self.block.insert(content, [self.line]))
        logger.info("Added %s to PATH in %s", self.paths.install_dir, self.profile)
        return StepReport(
            "path", StepStatus.DONE, str(self.profile),
            detail="restart your shell or source the profile",
        )

    def remove(self) -> StepReport:
        """Delete the PATH block.  A bare export line the user wrote stays."""
        content = self._read()
        if content is None:
            return StepReport("path", StepStatus.ABSENT, str(self.profile))

        updated = self.block.remove(content)
        if updated == content:
            return StepReport("path", StepStatus.ABSENT, str(self.profile))

        self._write(updated)
        logger.info("Removed PATH entry from %s", self.profile)
        return StepReport("path", StepStatus.REMOVED, str(self.profile))

    def describe(self) -> str:
        return f"PATH entry in {self.profile}"
