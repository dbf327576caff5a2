"""Request-scoped access to settings and the package service."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from lp_engine.config import Settings, get_settings
from lp_engine.core.exceptions import ConfigurationError
from lp_engine.services.packages import PackageService


def get_settings_dep() -> Settings:
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]


def get_package_service(request: Request, settings: SettingsDep) -> PackageService:
    """Return the app-wide PackageService, building it on first use."""
    service = getattr(request.app.state, "package_service", None)
    if service is None:
        try:
            service = PackageService.from_settings(settings)
        except ConfigurationError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=exc.message
            ) from exc
        request.app.state.package_service = service
    return service


PackageServiceDep = Annotated[PackageService, Depends(get_package_service)]
