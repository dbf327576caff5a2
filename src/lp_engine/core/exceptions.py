"""Exception hierarchy for LP-Engine."""

from typing import Any


class LPEngineError(Exception):
    """Base exception for all LP-Engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(LPEngineError):
    """Invalid or missing configuration."""


class GitCommandError(LPEngineError):
    """A git invocation exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        args: list[str] | None = None,
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"args": args or [], "stderr": stderr, "returncode": returncode},
        )
        self.stderr = stderr
        self.returncode = returncode


class CacheUnavailable(LPEngineError):
    """The storage cache could not reach or read the remote repository."""


class RepoUnreachable(CacheUnavailable):
    """The repository index could not be fetched."""


class ManifestError(LPEngineError):
    """Base class for package metadata contract violations."""


class ManifestMissing(ManifestError):
    """A mandatory manifest file is absent."""


class ManifestCorrupt(ManifestError):
    """A manifest file is not valid JSON or violates its schema."""


class IndexMissing(ManifestError):
    """The repository default branch carries no index.json."""


class TargetRequired(LPEngineError):
    """The caller did not supply the path an import needs."""


class DestinationExists(LPEngineError):
    """The import destination already exists."""


class MergeConflict(LPEngineError):
    """Local edits and upstream changes cannot be merged automatically."""

    def __init__(self, message: str, files: list[str] | None = None) -> None:
        super().__init__(message, details={"files": files or []})
        self.files = files or []


class InvalidWorkspace(LPEngineError):
    """The workspace path is missing or not a directory."""


class PackageAmbiguous(LPEngineError):
    """More than one cached repository provides the same package name."""
