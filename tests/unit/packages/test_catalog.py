"""Tests for the package catalog."""

from pathlib import Path

import pytest

from lp_engine.core.exceptions import IndexMissing, RepoUnreachable
from lp_engine.packages.catalog import PackageCatalog
from lp_engine.storage.cache import StorageCache
from tests.upstream import UpstreamRepo


@pytest.mark.unit
class TestPackageCatalog:
    """Tests for PackageCatalog.list_packages."""

    def test_lists_index_entries(self, catalog: PackageCatalog, upstream: UpstreamRepo) -> None:
        packages = catalog.list_packages(upstream.url)
        assert [p.name for p in packages] == ["algebra-101", "geometry"]
        assert [p.branch for p in packages] == ["release/algebra-101", "release/geometry"]
        assert all(p.repo == upstream.url for p in packages)

    def test_has_data_md_from_release_branch(
        self, catalog: PackageCatalog, upstream: UpstreamRepo
    ) -> None:
        packages = {p.name: p for p in catalog.list_packages(upstream.url)}
        assert packages["algebra-101"].has_data_md is True
        assert packages["geometry"].has_data_md is False

    def test_description_sources(self, catalog: PackageCatalog, upstream: UpstreamRepo) -> None:
        packages = {p.name: p for p in catalog.list_packages(upstream.url)}
        # index.json wins, desc.json is the fallback
        assert packages["geometry"].description == "Shapes and angles"
        assert packages["algebra-101"].description == "First steps in algebra"

    def test_packages_mirrored_into_cache(
        self, catalog: PackageCatalog, upstream: UpstreamRepo, cache: StorageCache
    ) -> None:
        catalog.list_packages(upstream.url)
        assert sorted(e.package_name for e in cache.entries()) == ["algebra-101", "geometry"]

    def test_listing_twice_is_stable(self, catalog: PackageCatalog, upstream: UpstreamRepo) -> None:
        first = catalog.list_packages(upstream.url)
        upstream.add_package("geometry", "Geometry", {"intro.md": "# Geometry\n", "data.md": "{}\n"})
        second = catalog.list_packages(upstream.url)
        assert [p.name for p in first] == [p.name for p in second]
        assert {p.name: p for p in second}["geometry"].has_data_md is True

    def test_unreachable_repository(self, catalog: PackageCatalog, tmp_path: Path) -> None:
        with pytest.raises(RepoUnreachable):
            catalog.list_packages(str(tmp_path / "no-such-repo"))

    def test_missing_index(self, catalog: PackageCatalog, tmp_path: Path) -> None:
        repo = UpstreamRepo(tmp_path / "remote" / "bare-packages")
        repo.commit("main", {"README.md": "nothing here\n"})
        with pytest.raises(IndexMissing):
            catalog.list_packages(repo.url)

    def test_listed_branch_missing_upstream(
        self, catalog: PackageCatalog, tmp_path: Path
    ) -> None:
        repo = UpstreamRepo(tmp_path / "remote" / "dangling")
        repo.commit("main", {"index.json": [{"name": "ghost"}]})
        with pytest.raises(RepoUnreachable):
            catalog.list_packages(repo.url)

    def test_unreadable_package_manifest_still_listed(
        self, catalog: PackageCatalog, tmp_path: Path
    ) -> None:
        repo = UpstreamRepo(tmp_path / "remote" / "broken")
        repo.commit("main", {"index.json": [{"name": "broken"}]})
        repo.commit("release/broken", {"desc.json": "{not json", "data.md": "{}\n"})
        packages = catalog.list_packages(repo.url)
        assert len(packages) == 1
        assert packages[0].name == "broken"
        assert packages[0].has_data_md is False
        assert packages[0].description == ""
