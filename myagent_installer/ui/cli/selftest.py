"""
CLI command for the end-to-end install/uninstall self-test.

Thin wrapper over ``myagent_installer.core.services.harness``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from myagent_installer.core.models.settings import InstallerSettings
from myagent_installer.core.services.lifecycle.domain.errors import InstallerError
from myagent_installer.ui.cli.lifecycle import _fail, _resolve


@click.command()
@click.option("--local", is_flag=True, help="Serve a synthetic release feed on 127.0.0.1.")
@click.option(
    "--binary", "binary",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Executable to package into the synthetic release (with --local).",
)
@click.option("--port", type=int, default=None, help="Port for the synthetic feed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def selftest(
    ctx: click.Context,
    local: bool,
    binary: str | None,
    port: int | None,
    as_json: bool,
) -> None:
    """Install, verify, uninstall and restore any existing installation."""
    from myagent_installer.core.services.harness.selftest import run_selftest

    settings: InstallerSettings = ctx.obj["settings"]
    updates: dict = {}
    if local:
        updates["local_mode"] = True
    if port is not None:
        updates["local_port"] = port
    if updates:
        settings = settings.model_copy(update=updates)

    if settings.local_mode and binary is None:
        _fail("--binary is required in local mode", as_json)

    try:
        platform, paths, path_manager = _resolve(settings)
    except InstallerError as e:
        _fail(str(e), as_json)

    if not as_json:
        mode = "local feed" if settings.local_mode else "GitHub release"
        click.secho(f"=== {settings.program_name} install/uninstall self-test ({mode}) ===", bold=True)

    try:
        report = run_selftest(
            settings, paths, platform, path_manager,
            local_binary=Path(binary) if binary else None,
        )
    except InstallerError as e:
        _fail(str(e), as_json)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.ok else 1)

    for c in report.checks:
        if c.passed:
            click.secho(f"[PASS]  {c.name}", fg="green")
        else:
            suffix = f" ({c.detail})" if c.detail else ""
            click.secho(f"[FAIL]  {c.name}{suffix}", fg="red")

    total = report.passed + report.failed
    click.echo("===============================")
    if report.ok:
        click.secho(f"All {total} tests passed", fg="green", bold=True)
    else:
        click.secho(f"{report.failed}/{total} tests failed", fg="red", bold=True)
    click.echo("===============================")

    sys.exit(0 if report.ok else 1)
