"""
L3 Detection — ``__init__.py`` re-exports all detection helpers.

These functions READ system state only.
"""

from myagent_installer.core.services.lifecycle.detection.environment import (  # noqa: F401
    detect_platform,
    detect_shell,
    profile_for_shell,
)
from myagent_installer.core.services.lifecycle.detection.program import (  # noqa: F401
    installed_version,
    query_status,
    query_version,
    read_pid,
)
