"""
L4 Execution — ``__init__.py`` re-exports all execution functions.

These functions WRITE to the system: downloads, extraction, profile
and registry edits, subprocess calls.
"""

from myagent_installer.core.services.lifecycle.execution.archive import (  # noqa: F401
    extract_archive,
    install_archive,
    place_executable,
)
from myagent_installer.core.services.lifecycle.execution.daemon_guard import (  # noqa: F401
    stop_daemon,
)
from myagent_installer.core.services.lifecycle.execution.download import (  # noqa: F401
    download_file,
    fetch_latest_tag,
)
from myagent_installer.core.services.lifecycle.execution.path_posix import (  # noqa: F401
    PosixProfilePathManager,
)
from myagent_installer.core.services.lifecycle.execution.path_registry import (  # noqa: F401
    RegistryPathManager,
    WinregUserPathStore,
)
from myagent_installer.core.services.lifecycle.execution.subprocess_runner import (  # noqa: F401
    _run_subprocess,
)
