"""
L1 Domain — ``__init__.py`` re-exports all pure domain types and functions.

These have NO subprocess calls, NO filesystem access, NO network
calls. Pure input→output.
"""

from myagent_installer.core.services.lifecycle.domain.errors import (  # noqa: F401
    ArchiveError,
    DownloadError,
    InstallerError,
    InstallPermissionError,
    NetworkError,
    ProfileWriteError,
    UnsupportedPlatformError,
    VersionNotFoundError,
)
from myagent_installer.core.services.lifecycle.domain.marked_block import (  # noqa: F401
    MarkedBlock,
)
from myagent_installer.core.services.lifecycle.domain.paths import (  # noqa: F401
    InstallPaths,
)
from myagent_installer.core.services.lifecycle.domain.platform import (  # noqa: F401
    Arch,
    ArchiveFormat,
    OsFamily,
    PlatformDescriptor,
    resolve_platform,
)
from myagent_installer.core.services.lifecycle.domain.release import (  # noqa: F401
    ReleaseDescriptor,
    ReleaseFeed,
    asset_filename,
    build_release,
    extract_tag,
)
from myagent_installer.core.services.lifecycle.domain.version import (  # noqa: F401
    extract_version,
    is_newer,
)
