"""
CLI commands for the install lifecycle.

Thin wrappers over ``myagent_installer.core.services.lifecycle``.
"""

from __future__ import annotations

import json
import shutil
import sys
from typing import NoReturn

import click

from myagent_installer.core.models.settings import InstallerSettings
from myagent_installer.core.services.lifecycle.detection.environment import detect_platform
from myagent_installer.core.services.lifecycle.domain.errors import (
    InstallerError,
    ProfileWriteError,
)
from myagent_installer.core.services.lifecycle.domain.paths import InstallPaths
from myagent_installer.core.services.lifecycle.domain.platform import PlatformDescriptor
from myagent_installer.core.services.lifecycle.execution.path_posix import PosixProfilePathManager
from myagent_installer.core.services.lifecycle.orchestration.path_selection import (
    PathManager,
    select_path_manager,
)


def _fail(message: str, as_json: bool = False) -> NoReturn:
    if as_json:
        click.echo(json.dumps({"ok": False, "error": message}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def _resolve(
    settings: InstallerSettings,
) -> tuple[PlatformDescriptor, InstallPaths, PathManager]:
    """Platform, locations and path manager for this run, computed once."""
    platform = detect_platform()
    paths = InstallPaths.for_home(settings.resolved_home(), settings.program_name, platform)
    path_manager = select_path_manager(platform, paths, settings.program_name)
    return platform, paths, path_manager


def _next_steps(program: str, path_manager: PathManager) -> None:
    click.echo()
    if shutil.which(program):
        click.echo(f"Run: {program} init")
        return
    if isinstance(path_manager, PosixProfilePathManager):
        click.echo("Run this to start using it now:")
        click.echo(f"  source {path_manager.profile}")
        click.echo()
        click.echo("Or open a new terminal, then run:")
    else:
        click.echo("Open a new terminal, then run:")
    click.echo(f"  {program} init")


# ── install ─────────────────────────────────────────────────────────


@click.command()
@click.option("--local", is_flag=True, help="Use the local synthetic release feed.")
@click.option("--version", "tag", default=None, help="Install this tag instead of the latest.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, local: bool, tag: str | None, as_json: bool) -> None:
    """Install or upgrade the program."""
    from myagent_installer.core.services.lifecycle.orchestration.installer import (
        install as run_install,
    )

    settings: InstallerSettings = ctx.obj["settings"]
    if local:
        settings = settings.model_copy(update={"local_mode": True})

    quiet = ctx.obj.get("quiet", False)
    if not quiet and not as_json:
        click.echo(f"Installing {settings.program_name}...")

    try:
        platform, paths, path_manager = _resolve(settings)
    except InstallerError as e:
        _fail(str(e), as_json)

    try:
        result = run_install(settings, paths, platform, path_manager, tag=tag)
    except ProfileWriteError as e:
        _fail(f"Installed {paths.binary_path}, but PATH was not updated: {e}", as_json)
    except InstallerError as e:
        _fail(str(e), as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(
        f"✅ {settings.program_name} {result.release.version_tag} installed to {result.binary_path}",
        fg="green", bold=True,
    )
    if result.upgraded:
        click.echo(f"   Upgraded from {result.previous_version}")
    if result.path_step is not None:
        click.echo(f"   PATH: {result.path_step.status} ({result.path_step.target})")
    if not quiet:
        _next_steps(settings.program_name, path_manager)


# ── uninstall ───────────────────────────────────────────────────────


@click.command()
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def uninstall(ctx: click.Context, assume_yes: bool, as_json: bool) -> None:
    """Remove the program, its config/data and its PATH entry."""
    from myagent_installer.core.services.lifecycle.orchestration.uninstaller import (
        uninstall as run_uninstall,
    )

    settings: InstallerSettings = ctx.obj["settings"]
    assume_yes = assume_yes or settings.assume_yes

    # An interactive prompt cannot share stdout with a JSON document
    if as_json and not assume_yes:
        _fail("--json needs --yes (or MYAGENT_UNINSTALL_CONFIRM=yes)", as_json)

    def _confirm(plan: list[str]) -> bool:
        click.echo()
        if not plan:
            click.echo("Nothing to remove.")
        else:
            click.echo("This will remove:")
            for item in plan:
                click.echo(f"  - {item}")
        click.echo()
        return click.confirm("Continue?", default=False)

    try:
        _, paths, path_manager = _resolve(settings)
        report = run_uninstall(paths, path_manager, confirm=_confirm, assume_yes=assume_yes)
    except InstallerError as e:
        _fail(str(e), as_json)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if report.cancelled:
        click.echo("Aborted.")
        return

    for step in report.steps:
        color = "green" if step.status in ("removed", "stopped") else None
        click.secho(f"   {step.step:8s} {step.status:15s} {step.target}", fg=color)
    click.echo()
    click.secho(f"✅ {settings.program_name} has been uninstalled", fg="green", bold=True)


# ── check ───────────────────────────────────────────────────────────


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Compare the installed version with the latest release."""
    from myagent_installer.core.services.lifecycle.orchestration.installer import feed_for
    from myagent_installer.core.services.lifecycle.orchestration.update_check import (
        check_for_update,
    )

    settings: InstallerSettings = ctx.obj["settings"]
    try:
        _, paths, _ = _resolve(settings)
        result = check_for_update(paths, feed_for(settings), timeout=settings.network_timeout)
    except InstallerError as e:
        _fail(str(e), as_json)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    installed = result["installed"] or "not installed"
    click.echo(f"   Installed: {installed}")
    click.echo(f"   Latest:    {result['latest']}")
    if result["update_available"]:
        click.secho(
            "⬆️  Update available: run myagent-installer install",
            fg="yellow",
        )
    elif result["installed"]:
        click.secho("✅ Up to date", fg="green")


# ── platform ────────────────────────────────────────────────────────


@click.command("platform")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def platform_cmd(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved platform, asset name and install locations."""
    from myagent_installer.core.services.lifecycle.domain.release import asset_filename

    settings: InstallerSettings = ctx.obj["settings"]
    try:
        platform, paths, path_manager = _resolve(settings)
    except InstallerError as e:
        _fail(str(e), as_json)

    info = {
        "platform": platform.to_dict(),
        "asset": asset_filename(platform, settings.program_name),
        "paths": paths.to_dict(),
        "path_entry": path_manager.describe(),
    }

    if as_json:
        click.echo(json.dumps(info, indent=2))
        return

    click.echo(f"   Platform: {platform.os}/{platform.arch}")
    click.echo(f"   Asset:    {info['asset']}")
    click.echo(f"   Binary:   {paths.binary_path}")
    click.echo(f"   Config:   {paths.config_dir}")
    click.echo(f"   PATH:     {info['path_entry']}")
