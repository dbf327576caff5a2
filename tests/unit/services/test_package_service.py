"""Tests for PackageService wiring."""

from pathlib import Path

import pytest

from lp_engine.config.settings import Settings
from lp_engine.core.exceptions import ConfigurationError
from lp_engine.services.packages import PackageService


@pytest.mark.unit
class TestFromSettings:
    """Tests for PackageService.from_settings."""

    def test_builds_service(self, tmp_path: Path) -> None:
        service = PackageService.from_settings(Settings(cache_root=str(tmp_path / "storage")))
        assert service.cached_packages() == []

    def test_cache_root_is_a_file(self, tmp_path: Path) -> None:
        cache_root = tmp_path / "storage"
        cache_root.write_text("not a directory")
        with pytest.raises(ConfigurationError) as exc_info:
            PackageService.from_settings(Settings(cache_root=str(cache_root)))
        assert exc_info.value.details == {"cache_root": str(cache_root)}

    def test_git_executable_missing(self, tmp_path: Path) -> None:
        settings = Settings(
            cache_root=str(tmp_path / "storage"), git_executable="definitely-not-git"
        )
        with pytest.raises(ConfigurationError):
            PackageService.from_settings(settings)
