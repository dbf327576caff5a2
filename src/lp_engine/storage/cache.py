"""Local git mirrors of remote packages, shared by every vault."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from lp_engine.core.exceptions import CacheUnavailable, GitCommandError, PackageAmbiguous
from lp_engine.core.models.package import CacheEntry
from lp_engine.git.backend import GitBackend
from lp_engine.git.url_resolver import repo_dir_name

logger = structlog.get_logger(__name__)

INDEX_FOLDER = ".index"


class StorageCache:
    """Maps ``(repo_url, package)`` to a local git working copy.

    Layout: ``<root>/<repo_dir>/<package>/``. Entries are cloned lazily and
    fetched afterwards, never re-cloned. Between operations every entry sits
    on ``release/<package>``; callers that switch branches wrap their work in
    :meth:`restoring_release`.
    """

    def __init__(self, root: Path, backend: GitBackend, clone_depth: int | None = 1) -> None:
        self._root = Path(root)
        self._backend = backend
        self._clone_depth = clone_depth

    @property
    def root(self) -> Path:
        return self._root

    def entry_for(self, repo_url: str, folder_name: str) -> CacheEntry:
        """Build the entry descriptor for a package without touching disk."""
        repo_dir = repo_dir_name(repo_url)
        return CacheEntry(
            package_name=folder_name,
            path=self._root / repo_dir / folder_name,
            repo_dir=repo_dir,
        )

    def ensure(self, repo_url: str, branch: str, folder_name: str) -> CacheEntry:
        """Make the cache entry exist and match ``origin/<branch>`` exactly."""
        entry = self.entry_for(repo_url, folder_name)
        self._sync_branch(repo_url, branch, entry.path)
        return entry

    def ensure_index(self, repo_url: str) -> Path:
        """Mirror the repository's default branch, which carries index.json."""
        path = self._root / repo_dir_name(repo_url) / INDEX_FOLDER
        try:
            branch = self._backend.default_branch(repo_url)
        except GitCommandError as exc:
            raise CacheUnavailable(
                f"Cannot resolve default branch of {repo_url}",
                details={"repo": repo_url, "stderr": exc.stderr},
            ) from exc
        self._sync_branch(repo_url, branch, path)
        return path

    def _sync_branch(self, repo_url: str, branch: str, path: Path) -> None:
        try:
            if not self._backend.is_repository(path):
                logger.info("Cloning package into cache", repo=repo_url, branch=branch, path=str(path))
                self._backend.clone(repo_url, path, branch, depth=self._clone_depth)
                return

            logger.info("Refreshing cached package", repo=repo_url, branch=branch, path=str(path))
            self._backend.fetch(
                path, "origin", f"+refs/heads/{branch}:refs/remotes/origin/{branch}"
            )
            self._backend.create_branch(path, branch, f"origin/{branch}", force=True)
            self._backend.clean(path)
        except GitCommandError as exc:
            raise CacheUnavailable(
                f"Cannot update cache for {repo_url} ({branch}): {exc.message}",
                details={"repo": repo_url, "branch": branch, "path": str(path), "stderr": exc.stderr},
            ) from exc

    def mark_imported(self, entry: CacheEntry) -> None:
        """Record the commit a workspace copy was built from as the sync base.

        ``user/<package>`` is only created here when missing; once it exists
        it carries the merge history of earlier updates and is left alone.
        """
        try:
            if not self._backend.branch_exists(entry.path, f"refs/heads/{entry.user_branch}"):
                self._backend.branch_at(entry.path, entry.user_branch, "HEAD")
        except GitCommandError as exc:
            raise CacheUnavailable(
                f"Cannot record sync base for {entry.package_name}: {exc.message}",
                details={"path": str(entry.path), "stderr": exc.stderr},
            ) from exc

    def locate_by_package_name(self, package_name: str) -> CacheEntry | None:
        """Find the cached entry of a package when only its name is known.

        Scans one level of repository directories. A name provided by more
        than one repository is rejected instead of guessed.
        """
        if not self._root.is_dir():
            return None
        matches = [
            repo_dir / package_name
            for repo_dir in sorted(self._root.iterdir())
            if repo_dir.is_dir() and (repo_dir / package_name / ".git").exists()
        ]
        if not matches:
            return None
        if len(matches) > 1:
            raise PackageAmbiguous(
                f"Package {package_name!r} is cached from several repositories",
                details={"paths": [str(m) for m in matches]},
            )
        path = matches[0]
        return CacheEntry(package_name=package_name, path=path, repo_dir=path.parent.name)

    def entries(self) -> list[CacheEntry]:
        """List every cached package."""
        if not self._root.is_dir():
            return []
        return [
            CacheEntry(package_name=package_dir.name, path=package_dir, repo_dir=repo_dir.name)
            for repo_dir in sorted(self._root.iterdir())
            if repo_dir.is_dir()
            for package_dir in sorted(repo_dir.iterdir())
            if package_dir.name != INDEX_FOLDER and (package_dir / ".git").exists()
        ]

    @contextmanager
    def restoring_release(self, entry: CacheEntry) -> Iterator[CacheEntry]:
        """Leave ``entry`` on its release branch on every exit path.

        A failing restore is logged, never raised, so it cannot mask the
        outcome of the wrapped operation.
        """
        try:
            yield entry
        finally:
            try:
                self._backend.checkout(entry.path, entry.release_branch, force=True)
                current = self._backend.current_branch(entry.path)
                if current != entry.release_branch:
                    logger.error(
                        "Cache entry not at rest",
                        package=entry.package_name,
                        expected=entry.release_branch,
                        actual=current,
                    )
            except (GitCommandError, OSError) as exc:
                logger.error(
                    "Failed to restore release branch",
                    package=entry.package_name,
                    branch=entry.release_branch,
                    error=str(exc),
                )
