"""
Install lifecycle service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → domain → detection → execution →
orchestration)::

    from myagent_installer.core.services.lifecycle import install, uninstall
"""

# ── L1: Domain ──
from myagent_installer.core.services.lifecycle.domain import (  # noqa: F401
    InstallerError,
    InstallPaths,
    PlatformDescriptor,
    ReleaseDescriptor,
    ReleaseFeed,
    resolve_platform,
)
from myagent_installer.core.services.lifecycle.domain.report import (  # noqa: F401
    StepReport,
    StepStatus,
)

# ── L3: Detection ──
from myagent_installer.core.services.lifecycle.detection import (  # noqa: F401
    detect_platform,
    detect_shell,
    installed_version,
    query_status,
    query_version,
)

# ── L4: Execution ──
from myagent_installer.core.services.lifecycle.execution import (  # noqa: F401
    install_archive,
    stop_daemon,
)

# ── L5: Orchestration ──
from myagent_installer.core.services.lifecycle.orchestration import (  # noqa: F401
    InstallResult,
    UninstallReport,
    check_for_update,
    feed_for,
    install,
    locate_release,
    plan_uninstall,
    select_path_manager,
    uninstall,
)
