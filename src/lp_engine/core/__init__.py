"""Core domain models and interfaces for LP-Engine."""

from lp_engine.core.exceptions import (
    CacheUnavailable,
    ConfigurationError,
    DestinationExists,
    GitCommandError,
    IndexMissing,
    InvalidWorkspace,
    LPEngineError,
    ManifestCorrupt,
    ManifestError,
    ManifestMissing,
    MergeConflict,
    PackageAmbiguous,
    RepoUnreachable,
    TargetRequired,
)
from lp_engine.core.models import (
    CacheEntry,
    CommitResult,
    DescEntry,
    ImportResult,
    IndexEntry,
    MergeResult,
    PackageDescriptor,
    PackageSyncResult,
    SyncOutcome,
)

__all__ = [
    # Models
    "IndexEntry",
    "DescEntry",
    "PackageDescriptor",
    "CacheEntry",
    "ImportResult",
    "CommitResult",
    "MergeResult",
    "SyncOutcome",
    "PackageSyncResult",
    # Exceptions
    "LPEngineError",
    "ConfigurationError",
    "GitCommandError",
    "CacheUnavailable",
    "RepoUnreachable",
    "ManifestError",
    "ManifestMissing",
    "ManifestCorrupt",
    "IndexMissing",
    "TargetRequired",
    "DestinationExists",
    "MergeConflict",
    "InvalidWorkspace",
    "PackageAmbiguous",
]
