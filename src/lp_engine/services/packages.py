"""Package service: the single entry point used by the CLI and the API."""

import shutil
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from lp_engine.core.exceptions import ConfigurationError
from lp_engine.core.models.package import CacheEntry, ImportResult, PackageDescriptor
from lp_engine.core.models.sync import PackageSyncResult
from lp_engine.git.backend import GitCLIBackend
from lp_engine.manifest.reader import ManifestReader
from lp_engine.packages import PackageCatalog, PackageImporter, WorkspaceSyncer
from lp_engine.storage.cache import StorageCache

if TYPE_CHECKING:
    from lp_engine.config.settings import Settings

logger = structlog.get_logger(__name__)

# The cache root is shared by every vault; operations must not interleave.
_operation_lock = threading.Lock()


class PackageService:
    """Service for package listing, import and workspace update operations."""

    def __init__(
        self,
        catalog: PackageCatalog,
        importer: PackageImporter,
        syncer: WorkspaceSyncer,
        cache: StorageCache,
    ) -> None:
        self._catalog = catalog
        self._importer = importer
        self._syncer = syncer
        self._cache = cache

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PackageService":
        """Wire the engine components from application settings."""
        cache_root = Path(settings.cache_root)
        if cache_root.exists() and not cache_root.is_dir():
            raise ConfigurationError(
                f"Cache root is not a directory: {cache_root}",
                details={"cache_root": str(cache_root)},
            )
        if shutil.which(settings.git_executable) is None:
            raise ConfigurationError(
                f"git executable not found: {settings.git_executable}",
                details={"git_executable": settings.git_executable},
            )

        backend = GitCLIBackend(
            executable=settings.git_executable,
            author_name=settings.commit_author_name,
            author_email=settings.commit_author_email,
        )
        cache = StorageCache(
            cache_root, backend, clone_depth=settings.clone_depth or None
        )
        reader = ManifestReader()
        logger.debug("Package service created", cache_root=settings.cache_root)
        return cls(
            catalog=PackageCatalog(cache, reader),
            importer=PackageImporter(cache, reader),
            syncer=WorkspaceSyncer(
                cache,
                backend,
                reader,
                commit_message=settings.sync_commit_message,
                reserved_names=settings.reserved_dir_names,
            ),
            cache=cache,
        )

    def list_packages(self, repo_url: str) -> list[PackageDescriptor]:
        """List the packages offered by a repository."""
        with _operation_lock:
            return self._catalog.list_packages(repo_url)

    def clone_package(
        self,
        repo_url: str,
        branch: str,
        vault_path: str | None,
        target_workspace_path: str | None = None,
        has_data_md: bool = False,
    ) -> ImportResult:
        """Import a package into a vault or an existing workspace."""
        with _operation_lock:
            return self._importer.import_package(
                repo_url,
                branch,
                vault_path,
                target_workspace_path=target_workspace_path,
                has_data_md=has_data_md,
            )

    def update_workspace(
        self, workspace_path: str, force_update: bool = False
    ) -> list[PackageSyncResult]:
        """Update every package of a workspace from upstream."""
        with _operation_lock:
            return self._syncer.update_workspace(workspace_path, force_update=force_update)

    def cached_packages(self) -> list[CacheEntry]:
        return self._cache.entries()
