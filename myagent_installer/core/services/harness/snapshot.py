"""
Harness — Preserve a real installation across a test run.

Acquire: copy every known binary location, the config dir and the
shell profile into a private vault, then clear the binaries and the
config dir.  Release: put everything back exactly as it was, delete the
vault.  Release happens once, on every exit path.

The profile is saved but not cleared: the run may add its PATH block,
and restore writes the original bytes back.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from myagent_installer.core.services.lifecycle.domain.errors import InstallerError

logger = logging.getLogger(__name__)


class SnapshotError(InstallerError):
    """The pre-run state could not be saved or cleared."""


@dataclass
class BackupSnapshot:
    """What was on disk before the run, and where the copies live."""

    vault_path: Path
    locations: list[Path]
    config_dir: Path
    profile: Path | None = None
    saved_binaries: dict[Path, Path] = field(default_factory=dict)
    saved_links: dict[Path, str] = field(default_factory=dict)
    saved_config_dir: Path | None = None
    saved_config_link: str | None = None
    saved_profile: Path | None = None
    restored: bool = False


def take_snapshot(
    locations: Sequence[Path],
    config_dir: Path,
    profile: Path | None = None,
) -> BackupSnapshot:
    """Copy current state into a fresh vault.  Changes nothing else.

    Raises:
        SnapshotError: Something could not be copied.  The vault is
            removed again before this propagates.
    """
    vault = Path(tempfile.mkdtemp(prefix="myagent-backup-"))
    snap = BackupSnapshot(
        vault_path=vault,
        locations=list(locations),
        config_dir=config_dir,
        profile=profile,
    )

    try:
        for i, loc in enumerate(snap.locations):
            if loc.is_symlink():
                snap.saved_links[loc] = os.readlink(loc)
                logger.info("Backed up link %s → %s", loc, snap.saved_links[loc])
            elif loc.is_file():
                copy = vault / f"binary-{i}"
                shutil.copy2(loc, copy)
                snap.saved_binaries[loc] = copy
                logger.info("Backed up %s", loc)

        if config_dir.is_symlink():
            snap.saved_config_link = os.readlink(config_dir)
            logger.info("Backed up link %s → %s", config_dir, snap.saved_config_link)
        elif config_dir.is_dir():
            copy = vault / "config"
            shutil.copytree(config_dir, copy, symlinks=True)
            snap.saved_config_dir = copy
            logger.info("Backed up %s", config_dir)

        if profile is not None and profile.is_file():
            copy = vault / "profile"
            shutil.copy2(profile, copy)
            snap.saved_profile = copy
    except OSError as exc:
        shutil.rmtree(vault, ignore_errors=True)
        raise SnapshotError(f"Cannot back up the existing installation: {exc}") from exc

    return snap


def _reset(path: Path) -> None:
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def clear_installation(snap: BackupSnapshot) -> None:
    """Remove binaries and the config dir so the run starts clean.

    A symlinked config dir is unlinked; its target is left alone.

    Raises:
        SnapshotError: A location could not be removed.
    """
    try:
        for loc in snap.locations:
            if loc.is_symlink() or loc.is_file():
                loc.unlink()
        _reset(snap.config_dir)
    except OSError as exc:
        raise SnapshotError(f"Cannot clear the existing installation: {exc}") from exc


def restore_snapshot(snap: BackupSnapshot) -> None:
    """Put back exactly what ``take_snapshot`` saw, then drop the vault.

    Locations that were empty before the run are emptied again.
    Calling this a second time is a no-op.
    """
    if snap.restored:
        return
    snap.restored = True

    for loc in snap.locations:
        _reset(loc)
        if loc in snap.saved_links:
            loc.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(snap.saved_links[loc], loc)
        elif loc in snap.saved_binaries:
            loc.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(snap.saved_binaries[loc], loc)

    _reset(snap.config_dir)
    if snap.saved_config_link is not None:
        os.symlink(snap.saved_config_link, snap.config_dir)
    elif snap.saved_config_dir is not None:
        shutil.copytree(snap.saved_config_dir, snap.config_dir, symlinks=True)

    if snap.profile is not None:
        if snap.saved_profile is not None:
            shutil.copy2(snap.saved_profile, snap.profile)
        else:
            snap.profile.unlink(missing_ok=True)

    # Only reached when everything is back; a failed restore keeps the vault
    shutil.rmtree(snap.vault_path, ignore_errors=True)
    logger.info("Restore complete")


@contextmanager
def preserved_installation(
    locations: Sequence[Path],
    config_dir: Path,
    profile: Path | None = None,
) -> Iterator[BackupSnapshot]:
    """Scope a test run: snapshot + clear on entry, restore on exit.

    A failed restore is logged, not raised, so it cannot replace the
    exception (or result) of the run itself.
    """
    snap = take_snapshot(locations, config_dir, profile)
    try:
        clear_installation(snap)
        yield snap
    finally:
        try:
            restore_snapshot(snap)
        except OSError as exc:
            logger.error("Restore failed: %s (backup kept in %s)", exc, snap.vault_path)
