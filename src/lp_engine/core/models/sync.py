"""Workspace synchronization result models."""

from enum import Enum

from pydantic import BaseModel, Field


class CommitResult(str, Enum):
    """Result of staging and committing a working tree."""

    COMMITTED = "committed"
    NO_CHANGES = "no_changes"


class MergeResult(str, Enum):
    """Result of merging a ref into the current branch."""

    MERGED = "merged"
    CONFLICT = "conflict"


class SyncOutcome(str, Enum):
    """Terminal state of one package's update."""

    MERGED = "merged"
    FORCED = "forced"
    UP_TO_DATE = "up_to_date"
    CONFLICT = "conflict"
    SKIPPED = "skipped"
    FAILED = "failed"


class PackageSyncResult(BaseModel):
    """Per-package entry of an update batch."""

    package_name: str
    message: str
    conflict: bool = False
    outcome: SyncOutcome
    conflicted_files: list[str] = Field(default_factory=list)
