"""
myagent installer — CLI entrypoint.

Usage:
    python -m myagent_installer.main --help
    myagent-installer install
    myagent-installer uninstall --yes
    TEST_LOCAL=1 myagent-installer selftest --binary ./target/release/myagent
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from myagent_installer import __version__
from myagent_installer.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="myagent-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to installer.yml (default: MYAGENT_INSTALLER_CONFIG, then built-ins).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """myagent installer — install, upgrade and remove myagent."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("MYAGENT_INSTALL_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("MYAGENT_INSTALL_LOG_FILE"),
        log_file_level=os.environ.get("MYAGENT_INSTALL_LOG_FILE_LEVEL"),
    )

    # ── Settings (file + environment overrides) ─────────────────
    from myagent_installer.core.config.loader import ConfigError, load_settings

    try:
        ctx.obj["settings"] = load_settings(ctx.obj["config_path"])
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


# ── Register sub-commands from myagent_installer/ui/cli/ ──────────

from myagent_installer.ui.cli.lifecycle import check, install, platform_cmd, uninstall  # noqa: E402
from myagent_installer.ui.cli.selftest import selftest  # noqa: E402

cli.add_command(install)
cli.add_command(uninstall)
cli.add_command(check)
cli.add_command(platform_cmd)
cli.add_command(selftest)


if __name__ == "__main__":
    cli()
