"""Business logic services for LP-Engine."""

from lp_engine.services.packages import PackageService

__all__ = ["PackageService"]
