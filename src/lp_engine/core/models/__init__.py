"""Domain models for LP-Engine."""

from lp_engine.core.models.manifest import DescEntry, IndexEntry
from lp_engine.core.models.package import (
    CacheEntry,
    ImportResult,
    PackageDescriptor,
    folder_name_for_branch,
)
from lp_engine.core.models.sync import (
    CommitResult,
    MergeResult,
    PackageSyncResult,
    SyncOutcome,
)

__all__ = [
    "IndexEntry",
    "DescEntry",
    "PackageDescriptor",
    "CacheEntry",
    "ImportResult",
    "folder_name_for_branch",
    "CommitResult",
    "MergeResult",
    "SyncOutcome",
    "PackageSyncResult",
]
