"""Listing of the packages a remote repository offers."""

import structlog

from lp_engine.core.exceptions import CacheUnavailable, ManifestError, RepoUnreachable
from lp_engine.core.models.package import PackageDescriptor, folder_name_for_branch
from lp_engine.manifest.reader import ManifestReader
from lp_engine.storage.cache import StorageCache

logger = structlog.get_logger(__name__)


class PackageCatalog:
    """Reads a repository's index and describes each listed package.

    ``has_data_md`` is derived from each package's own release branch, so
    every listed package is mirrored into the storage cache.
    """

    def __init__(self, cache: StorageCache, reader: ManifestReader | None = None) -> None:
        self._cache = cache
        self._reader = reader or ManifestReader()

    def list_packages(self, repo_url: str) -> list[PackageDescriptor]:
        try:
            index_dir = self._cache.ensure_index(repo_url)
        except CacheUnavailable as exc:
            raise RepoUnreachable(
                f"Repository unreachable: {repo_url}", details=exc.details
            ) from exc
        entries = self._reader.read_index(index_dir)

        packages = []
        for item in entries:
            try:
                cache_entry = self._cache.ensure(
                    repo_url, item.branch, folder_name_for_branch(item.branch)
                )
            except CacheUnavailable as exc:
                raise RepoUnreachable(
                    f"Cannot fetch {item.branch} from {repo_url}", details=exc.details
                ) from exc

            has_data_md = False
            description = item.description or ""
            try:
                has_data_md = self._reader.has_data_md(cache_entry.path)
                if not description:
                    description = self._reader.read_desc(cache_entry.path).description or ""
            except ManifestError as exc:
                logger.warning(
                    "Package manifest unreadable",
                    package=item.name,
                    branch=item.branch,
                    error=exc.message,
                )

            packages.append(
                PackageDescriptor(
                    name=item.name,
                    branch=item.branch,
                    repo=repo_url,
                    has_data_md=has_data_md,
                    description=description,
                )
            )

        logger.info("Packages listed", repo=repo_url, count=len(packages))
        return packages
