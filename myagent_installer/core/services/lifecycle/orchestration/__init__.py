"""
L5 Orchestration — Top-level flows: install, uninstall, update check.
"""

from myagent_installer.core.services.lifecycle.orchestration.installer import (  # noqa: F401
    InstallResult,
    feed_for,
    install,
    locate_release,
)
from myagent_installer.core.services.lifecycle.orchestration.path_selection import (  # noqa: F401
    PathManager,
    select_path_manager,
)
from myagent_installer.core.services.lifecycle.orchestration.uninstaller import (  # noqa: F401
    UninstallReport,
    plan_uninstall,
    uninstall,
)
from myagent_installer.core.services.lifecycle.orchestration.update_check import (  # noqa: F401
    check_for_update,
)
