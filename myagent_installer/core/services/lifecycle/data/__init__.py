"""
L0 Data — ``__init__.py`` re-exports all data constants.
"""

from myagent_installer.core.services.lifecycle.data.constants import (  # noqa: F401
    ARCHIVE_FORMATS,
    ASSET_TEMPLATE,
    KNOWN_INSTALL_DIRS,
    PATH_BLOCK_END,
    PATH_BLOCK_START,
    STATUS_NOT_RUNNING,
    SUPPORTED_PLATFORMS,
    _ARCH_MAP,
    _OS_MAP,
)
from myagent_installer.core.services.lifecycle.data.profile_maps import (  # noqa: F401
    _DEFAULT_SHELL,
    _PROFILE_MAP,
)
