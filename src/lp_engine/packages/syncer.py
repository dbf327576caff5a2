"""Re-synchronization of imported packages with their upstream release branch."""

from collections.abc import Iterable
from pathlib import Path

import structlog

from lp_engine.core.exceptions import (
    CacheUnavailable,
    GitCommandError,
    InvalidWorkspace,
    LPEngineError,
    MergeConflict,
)
from lp_engine.core.models.package import CacheEntry
from lp_engine.core.models.sync import (
    CommitResult,
    MergeResult,
    PackageSyncResult,
    SyncOutcome,
)
from lp_engine.git.backend import GitBackend
from lp_engine.manifest.reader import ManifestReader
from lp_engine.storage.cache import INDEX_FOLDER, StorageCache
from lp_engine.utils.files import (
    DATA_MD,
    clear_directory,
    copy_listed_files,
    overlay_tree,
    project_tree,
    collect_data_md,
)

logger = structlog.get_logger(__name__)

DEFAULT_RESERVED = frozenset({".obsidian", ".git", ".trash", INDEX_FOLDER})

MSG_NO_CACHE = "skipped: no cached copy of this package"
MSG_NO_REMOTE_BRANCH = "skipped: upstream release branch no longer exists"
MSG_FORCED = "forced: reset to upstream release"
MSG_UP_TO_DATE = "already up to date"
MSG_MERGED = "merged upstream changes"
MSG_CONFLICT = "conflict: manual resolution or force-update required"


class WorkspaceSyncer:
    """Brings every package of a workspace up to date with upstream.

    Each package is reconciled on a ``user/<pkg>`` branch of its cache entry:
    the workspace copy is committed there, then ``origin/release/<pkg>`` is
    merged in. Packages are processed sequentially and independently; one
    failing package never stops the batch.
    """

    def __init__(
        self,
        cache: StorageCache,
        backend: GitBackend,
        reader: ManifestReader | None = None,
        commit_message: str = "sync user workspace changes",
        reserved_names: Iterable[str] = (),
    ) -> None:
        self._cache = cache
        self._backend = backend
        self._reader = reader or ManifestReader()
        self._commit_message = commit_message
        self._reserved = DEFAULT_RESERVED | frozenset(reserved_names)

    def discover_packages(self, workspace: Path) -> list[Path]:
        """Return the package directories of a workspace."""
        return [
            child
            for child in workspace.iterdir()
            if child.is_dir()
            and child.name not in self._reserved
            and not child.name.startswith(".")
        ]

    def update_workspace(
        self, workspace_path: Path | str, force_update: bool = False
    ) -> list[PackageSyncResult]:
        workspace = Path(workspace_path)
        if not workspace.is_dir():
            raise InvalidWorkspace(
                f"Workspace does not exist: {workspace}",
                details={"workspace": str(workspace)},
            )

        results = []
        for package_dir in self.discover_packages(workspace):
            try:
                result = self.update_package(package_dir, force_update=force_update)
            except (LPEngineError, OSError) as exc:
                logger.error("Package update failed", package=package_dir.name, error=str(exc))
                result = PackageSyncResult(
                    package_name=package_dir.name,
                    message=f"failed: {exc}",
                    outcome=SyncOutcome.FAILED,
                )
            results.append(result)

        logger.info(
            "Workspace updated",
            workspace=str(workspace),
            packages=len(results),
            conflicts=sum(1 for r in results if r.conflict),
            force=force_update,
        )
        return results

    def update_package(self, package_dir: Path, force_update: bool = False) -> PackageSyncResult:
        """Run the sync state machine for one package directory."""
        name = package_dir.name
        entry = self._cache.locate_by_package_name(name)
        if entry is None:
            return PackageSyncResult(
                package_name=name, message=MSG_NO_CACHE, outcome=SyncOutcome.SKIPPED
            )

        with self._cache.restoring_release(entry):
            if not self._fetch_release(entry):
                return PackageSyncResult(
                    package_name=name, message=MSG_NO_REMOTE_BRANCH, outcome=SyncOutcome.SKIPPED
                )

            if force_update:
                return self._force(entry, package_dir)
            try:
                return self._merge(entry, package_dir)
            except MergeConflict as exc:
                logger.warning("Merge conflict", package=name, files=exc.files)
                return PackageSyncResult(
                    package_name=name,
                    message=MSG_CONFLICT,
                    conflict=True,
                    outcome=SyncOutcome.CONFLICT,
                    conflicted_files=exc.files,
                )

    def _fetch_release(self, entry: CacheEntry) -> bool:
        """Fetch ``origin/release/<pkg>``; False when upstream no longer has it."""
        try:
            # A configured single-branch fetch dies once upstream deletes the branch
            if not self._backend.remote_branch_exists(entry.path, "origin", entry.release_branch):
                return False
            self._backend.fetch(
                entry.path,
                "origin",
                f"+refs/heads/{entry.release_branch}:refs/remotes/{entry.origin_release}",
                prune=True,
            )
        except GitCommandError as exc:
            raise CacheUnavailable(
                f"Cannot fetch {entry.release_branch}: {exc.message}",
                details={
                    "package": entry.package_name,
                    "path": str(entry.path),
                    "stderr": exc.stderr,
                },
            ) from exc
        return True

    def _checkout_user_branch(self, entry: CacheEntry) -> None:
        if self._backend.branch_exists(entry.path, f"refs/heads/{entry.user_branch}"):
            self._backend.checkout(entry.path, entry.user_branch, force=True)
        else:
            self._backend.create_branch(entry.path, entry.user_branch, entry.release_branch)

    def _force(self, entry: CacheEntry, package_dir: Path) -> PackageSyncResult:
        self._checkout_user_branch(entry)
        self._backend.reset_hard(entry.path, entry.origin_release)
        self._backend.clean(entry.path)

        clear_directory(package_dir)
        project_tree(entry.path, package_dir)

        logger.info("Package force-updated", package=entry.package_name)
        return PackageSyncResult(
            package_name=entry.package_name, message=MSG_FORCED, outcome=SyncOutcome.FORCED
        )

    def _merge(self, entry: CacheEntry, package_dir: Path) -> PackageSyncResult:
        self._checkout_user_branch(entry)

        # Overlay only: files that exist upstream but not locally must not read as deletions
        overlay_tree(package_dir, entry.path)
        if DATA_MD in self._reader.read_filelist(entry.path):
            # data.md lives beside the package folder, so the overlay above misses it
            collect_data_md(package_dir, entry.path)
        commit = self._backend.commit_all(entry.path, self._commit_message)
        logger.debug("User changes recorded", package=entry.package_name, commit=commit.value)

        local_sha = self._backend.rev_parse(entry.path, "HEAD")
        origin_sha = self._backend.rev_parse(entry.path, entry.origin_release)
        base_sha = self._backend.merge_base(entry.path, "HEAD", entry.origin_release)
        if local_sha == origin_sha or base_sha == origin_sha:
            return PackageSyncResult(
                package_name=entry.package_name,
                message=MSG_UP_TO_DATE,
                outcome=SyncOutcome.UP_TO_DATE,
            )

        merge = self._backend.merge(
            entry.path, entry.origin_release, f"merge {entry.origin_release}"
        )
        if merge is MergeResult.CONFLICT:
            files = self._backend.unmerged_paths(entry.path)
            self._backend.merge_abort(entry.path)
            raise MergeConflict(MSG_CONFLICT, files=files)

        filelist = self._reader.read_filelist(entry.path)
        copy_listed_files(entry.path, package_dir, filelist)
        logger.info(
            "Package merged",
            package=entry.package_name,
            committed=commit is CommitResult.COMMITTED,
        )
        return PackageSyncResult(
            package_name=entry.package_name, message=MSG_MERGED, outcome=SyncOutcome.MERGED
        )
