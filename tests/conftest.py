"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from lp_engine.git.backend import GitCLIBackend
from lp_engine.manifest.reader import ManifestReader
from lp_engine.packages import PackageCatalog, PackageImporter, WorkspaceSyncer
from lp_engine.storage.cache import StorageCache
from tests.upstream import UpstreamRepo, build_learning_repo


@pytest.fixture
def upstream(tmp_path: Path) -> UpstreamRepo:
    """A remote repository offering ``algebra-101`` (with data.md) and ``geometry``."""
    return build_learning_repo(tmp_path / "remote" / "learning-packages")


@pytest.fixture
def backend() -> GitCLIBackend:
    return GitCLIBackend(author_name="Test", author_email="test@test.com")


@pytest.fixture
def cache(tmp_path: Path, backend: GitCLIBackend) -> StorageCache:
    return StorageCache(tmp_path / "cache", backend)


@pytest.fixture
def reader() -> ManifestReader:
    return ManifestReader()


@pytest.fixture
def importer(cache: StorageCache, reader: ManifestReader) -> PackageImporter:
    return PackageImporter(cache, reader)


@pytest.fixture
def syncer(cache: StorageCache, backend: GitCLIBackend, reader: ManifestReader) -> WorkspaceSyncer:
    return WorkspaceSyncer(cache, backend, reader)


@pytest.fixture
def catalog(cache: StorageCache, reader: ManifestReader) -> PackageCatalog:
    return PackageCatalog(cache, reader)


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    path = tmp_path / "vault"
    path.mkdir()
    return path
