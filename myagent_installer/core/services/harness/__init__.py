"""
Self-test harness — package re-exports.
"""

from myagent_installer.core.services.harness.feed import (  # noqa: F401
    LocalFeedServer,
    SyntheticFeed,
)
from myagent_installer.core.services.harness.selftest import (  # noqa: F401
    CheckResult,
    SelfTestReport,
    run_selftest,
)
from myagent_installer.core.services.harness.snapshot import (  # noqa: F401
    BackupSnapshot,
    SnapshotError,
    clear_installation,
    preserved_installation,
    restore_snapshot,
    take_snapshot,
)
