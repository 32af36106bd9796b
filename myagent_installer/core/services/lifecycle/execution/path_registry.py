"""
L4 Execution — PATH via the user-scope registry value (Windows).

``HKCU\\Environment\\Path`` is read, the install dir is prepended if it
is not already contained, and the value is written back.  The running
process's ``PATH`` is updated too, so the same session can call the
program without restarting.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from typing import Protocol

from myagent_installer.core.services.lifecycle.domain.errors import ProfileWriteError
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.report import StepReport, StepStatus

logger = logging.getLogger(__name__)

_ENV_KEY = "Environment"
_PATH_VALUE = "Path"


class UserPathStore(Protocol):
    def read(self) -> str: ...

    def write(self, value: str) -> None: ...


class WinregUserPathStore:
    """The real store: ``HKEY_CURRENT_USER\\Environment``."""

    def read(self) -> str:
        import winreg

        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, _ENV_KEY, 0, winreg.KEY_READ) as key:
                value, _ = winreg.QueryValueEx(key, _PATH_VALUE)
        except FileNotFoundError:
            return ""
        return value or ""

    def write(self, value: str) -> None:
        import winreg

        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER, _ENV_KEY, 0, winreg.KEY_ALL_ACCESS,
        ) as key:
            winreg.SetValueEx(key, _PATH_VALUE, 0, winreg.REG_EXPAND_SZ, value)


class RegistryPathManager:
    """Adds/removes the install dir in the persisted user ``Path``."""

    def __init__(
        self,
        paths: InstallPaths,
        store: UserPathStore | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self.paths = paths
        self.store = store if store is not None else WinregUserPathStore()
        self.environ = os.environ if environ is None else environ
        self.entry = str(paths.install_dir)

    def _read(self) -> str:
        try:
            return self.store.read()
        except OSError as exc:
            raise ProfileWriteError(f"Cannot read user Path: {exc}") from exc

    def _write(self, value: str) -> None:
        try:
            self.store.write(value)
        except OSError as exc:
            raise ProfileWriteError(f"Cannot write user Path: {exc}") from exc

    def is_present(self) -> bool:
        return self.entry.lower() in self._read().lower()

    def add(self) -> StepReport:
        current = self._read()
        if self.entry.lower() in current.lower():
            logger.debug("%s already on the user Path", self.entry)
            return StepReport("path", StepStatus.UNCHANGED, "user Path")

        self._write(f"{self.entry};{current}" if current else self.entry)

        session = self.environ.get("PATH", "")
        self.environ["PATH"] = f"{self.entry}{os.pathsep}{session}" if session else self.entry

        logger.info("Added %s to the user Path", self.entry)
        return StepReport(
            "path", StepStatus.DONE, "user Path",
            detail="new terminals pick it up automatically",
        )

    def remove(self) -> StepReport:
        current = self._read()
        parts = current.split(";") if current else []
        kept = [p for p in parts if p.rstrip("\\/").lower() != self.entry.rstrip("\\/").lower()]
        if len(kept) == len(parts):
            return StepReport("path", StepStatus.ABSENT, "user Path")

        self._write(";".join(kept))
        logger.info("Removed %s from the user Path", self.entry)
        return StepReport("path", StepStatus.REMOVED, "user Path")

    def describe(self) -> str:
        return f"{self.entry} in the user Path"
