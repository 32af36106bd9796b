"""
Configuration loader — reads installer.yml into InstallerSettings.

The file is optional.  Lookup order:

    --config PATH  >  MYAGENT_INSTALLER_CONFIG  >  built-in defaults

Environment overrides are applied last, on top of whatever the file
says, so automation can flip them without editing config.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from myagent_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MYAGENT_INSTALLER_CONFIG"
CONFIRM_ENV_VAR = "MYAGENT_UNINSTALL_CONFIRM"
LOCAL_MODE_ENV_VARS = ("TEST_LOCAL", "MYAGENT_TEST_LOCAL")


class ConfigError(Exception):
    """Raised when installer configuration is invalid or missing."""


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit path to a YAML config.  If None, the
            ``MYAGENT_INSTALLER_CONFIG`` env var is consulted; if that is
            unset too, defaults are used.
        environ: Environment mapping (default: ``os.environ``).

    Returns:
        Validated settings with environment overrides applied.

    Raises:
        ConfigError: If an explicitly named file is missing or invalid.
    """
    env = os.environ if environ is None else environ

    if path is None and env.get(CONFIG_ENV_VAR):
        path = Path(env[CONFIG_ENV_VAR]).expanduser()

    data: dict = {}
    if path is not None:
        data = _read_yaml(path)

    try:
        settings = InstallerSettings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    return apply_env_overrides(settings, env)


def apply_env_overrides(
    settings: InstallerSettings,
    environ: Mapping[str, str],
) -> InstallerSettings:
    """Overlay the recognised environment switches onto ``settings``."""
    updates: dict = {}

    if environ.get(CONFIRM_ENV_VAR, "") == "yes":
        updates["assume_yes"] = True

    if any(environ.get(name, "") == "1" for name in LOCAL_MODE_ENV_VARS):
        updates["local_mode"] = True

    if not updates:
        return settings

    logger.debug("Environment overrides: %s", sorted(updates))
    return settings.model_copy(update=updates)


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept either a flat file or one wrapped under "installer:"
    if "installer" in data:
        data = data["installer"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected 'installer' to be a mapping in {path}")
    return data
