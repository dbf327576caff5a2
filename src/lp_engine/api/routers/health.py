"""Health check endpoint."""

from pathlib import Path

from fastapi import APIRouter

from lp_engine import __version__
from lp_engine.api.dependencies import SettingsDep

router = APIRouter()


@router.get("/health")
def health(settings: SettingsDep) -> dict[str, str | bool]:
    return {
        "status": "ok",
        "version": __version__,
        "environment": settings.environment,
        "cache_ready": Path(settings.cache_root).is_dir(),
    }
