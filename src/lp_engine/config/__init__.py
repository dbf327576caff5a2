"""Configuration for LP-Engine."""

from lp_engine.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
