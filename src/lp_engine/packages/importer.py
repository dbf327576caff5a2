"""Projection of a cached package into a vault workspace."""

from pathlib import Path

import structlog

from lp_engine.core.exceptions import DestinationExists, TargetRequired
from lp_engine.core.models.package import ImportResult, folder_name_for_branch
from lp_engine.manifest.reader import ManifestReader
from lp_engine.storage.cache import StorageCache
from lp_engine.utils.files import copy_listed_files

logger = structlog.get_logger(__name__)


class PackageImporter:
    """Materializes one package branch into a workspace.

    Flow:
    1. Resolve the package folder name from the branch
    2. Check caller-supplied targets
    3. Clone or refresh the package in the storage cache
    4. Read filelist.json and desc.json
    5. Refuse existing destinations
    6. Copy the listed files, relocating data.md to the workspace level
    7. Pin ``user/<package>`` at the imported commit if it does not exist yet
    """

    def __init__(self, cache: StorageCache, reader: ManifestReader | None = None) -> None:
        self._cache = cache
        self._reader = reader or ManifestReader()

    def import_package(
        self,
        repo_url: str,
        branch: str,
        vault_path: Path | str | None,
        target_workspace_path: Path | str | None = None,
        has_data_md: bool = False,
    ) -> ImportResult:
        folder_name = folder_name_for_branch(branch)
        if not folder_name:
            raise TargetRequired(
                f"Cannot derive a package folder from branch {branch!r}",
                details={"branch": branch},
            )

        if has_data_md and not vault_path:
            raise TargetRequired(
                "A vault path is required to import a standalone workspace package",
                details={"branch": branch},
            )
        if not has_data_md and not target_workspace_path:
            raise TargetRequired(
                "A target workspace is required for packages without data.md",
                details={"branch": branch},
            )

        entry = self._cache.ensure(repo_url, branch, folder_name)
        filelist = self._reader.read_filelist(entry.path)
        workspace_name = self._reader.read_desc(entry.path).name

        if has_data_md:
            destination = Path(vault_path) / workspace_name / folder_name
        else:
            destination = Path(target_workspace_path) / folder_name

        if destination.exists():
            raise DestinationExists(
                f"Destination already exists: {destination}",
                details={"destination": str(destination)},
            )

        destination.mkdir(parents=True)
        report = copy_listed_files(entry.path, destination, filelist)
        self._cache.mark_imported(entry)

        logger.info(
            "Package imported",
            repo=repo_url,
            branch=branch,
            destination=str(destination),
            copied=len(report.copied),
            skipped=len(report.skipped),
        )
        message = f"Imported {folder_name} into {destination}"
        if report.skipped:
            message += f" ({len(report.skipped)} listed files missing upstream)"
        return ImportResult(
            package_name=folder_name,
            workspace_name=workspace_name,
            destination=destination,
            copied=report.copied,
            skipped=report.skipped,
            message=message,
        )
