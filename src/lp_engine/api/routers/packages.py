"""Package API endpoints."""

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from lp_engine.api.dependencies import PackageServiceDep
from lp_engine.core.exceptions import (
    CacheUnavailable,
    DestinationExists,
    IndexMissing,
    InvalidWorkspace,
    LPEngineError,
    ManifestError,
    PackageAmbiguous,
    TargetRequired,
)
from lp_engine.core.models.package import PackageDescriptor
from lp_engine.core.models.sync import PackageSyncResult

router = APIRouter()


# --- Request/Response models ---

class ClonePackageRequest(BaseModel):
    """Request to import a package branch."""

    repo_url: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    vault_path: str | None = None
    target_workspace_path: str | None = None
    has_data_md: bool = False


class ClonePackageResponse(BaseModel):
    """Result of a package import."""

    message: str
    destination: str
    workspace_name: str
    skipped: list[str] = Field(default_factory=list)


class UpdateWorkspaceRequest(BaseModel):
    """Request to update every package of a workspace."""

    workspace_path: str = Field(..., min_length=1)
    force_update: bool = False


class CachedPackage(BaseModel):
    """A package present in the storage cache."""

    repo_dir: str
    package_name: str
    path: str


def _http_error(exc: LPEngineError) -> HTTPException:
    """Map engine errors onto HTTP status codes."""
    if isinstance(exc, TargetRequired):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (DestinationExists, PackageAmbiguous)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, (InvalidWorkspace, IndexMissing)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ManifestError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, CacheUnavailable):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=exc.message)


# --- Package endpoints ---

@router.get("/packages", response_model=list[PackageDescriptor])
def list_packages(
    service: PackageServiceDep,
    repo_url: str = Query(..., min_length=1),
) -> list[PackageDescriptor]:
    """List the packages a repository offers."""
    try:
        return service.list_packages(repo_url)
    except LPEngineError as exc:
        raise _http_error(exc) from exc


@router.post(
    "/packages/clone",
    response_model=ClonePackageResponse,
    status_code=status.HTTP_201_CREATED,
)
def clone_package(
    request: ClonePackageRequest,
    service: PackageServiceDep,
) -> ClonePackageResponse:
    """Import a package into a vault or an existing workspace."""
    try:
        result = service.clone_package(
            request.repo_url,
            request.branch,
            request.vault_path,
            target_workspace_path=request.target_workspace_path,
            has_data_md=request.has_data_md,
        )
    except LPEngineError as exc:
        raise _http_error(exc) from exc
    return ClonePackageResponse(
        message=result.message,
        destination=str(result.destination),
        workspace_name=result.workspace_name,
        skipped=result.skipped,
    )


# --- Workspace endpoints ---

@router.post("/workspaces/update", response_model=list[PackageSyncResult])
def update_workspace(
    request: UpdateWorkspaceRequest,
    service: PackageServiceDep,
) -> list[PackageSyncResult]:
    """Update every package of a workspace; conflicts are reported per package."""
    try:
        return service.update_workspace(request.workspace_path, force_update=request.force_update)
    except LPEngineError as exc:
        raise _http_error(exc) from exc


# --- Cache endpoints ---

@router.get("/cache", response_model=list[CachedPackage])
def list_cache(service: PackageServiceDep) -> list[CachedPackage]:
    """List the packages held in the storage cache."""
    return [
        CachedPackage(repo_dir=e.repo_dir, package_name=e.package_name, path=str(e.path))
        for e in service.cached_packages()
    ]
