"""Tests for core domain models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from lp_engine.core.exceptions import GitCommandError, LPEngineError, ManifestMissing, MergeConflict
from lp_engine.core.models.manifest import DescEntry, IndexEntry
from lp_engine.core.models.package import CacheEntry, PackageDescriptor, folder_name_for_branch
from lp_engine.core.models.sync import PackageSyncResult, SyncOutcome
from tests.factories import (
    CacheEntryFactory,
    DescEntryFactory,
    ImportResultFactory,
    IndexEntryFactory,
    PackageDescriptorFactory,
    PackageSyncResultFactory,
)


@pytest.mark.unit
class TestFolderName:
    """Tests for branch to folder name resolution."""

    def test_strips_release_prefix(self) -> None:
        assert folder_name_for_branch("release/algebra-101") == "algebra-101"

    def test_other_branch_uses_basename(self) -> None:
        assert folder_name_for_branch("feature/drafts/algebra-102") == "algebra-102"

    def test_plain_branch(self) -> None:
        assert folder_name_for_branch("main") == "main"


@pytest.mark.unit
class TestIndexEntry:
    """Tests for IndexEntry model."""

    def test_branch_defaults_to_release_branch(self) -> None:
        entry = IndexEntry(name="geometry")
        assert entry.branch == "release/geometry"

    def test_explicit_branch_kept(self) -> None:
        entry = IndexEntry(name="geometry", branch="release/geo")
        assert entry.branch == "release/geo"

    def test_extra_keys_ignored(self) -> None:
        entry = IndexEntry.model_validate({"name": "geometry", "author": "someone"})
        assert entry.name == "geometry"

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            IndexEntry.model_validate({"branch": "release/x"})

    def test_dump_validates_back(self) -> None:
        entry = IndexEntryFactory(name="geometry")
        assert IndexEntry.model_validate(entry.model_dump()) == entry


@pytest.mark.unit
class TestDescEntry:
    """Tests for DescEntry model."""

    def test_description_optional(self) -> None:
        entry = DescEntry(name="Algebra Basics")
        assert entry.description is None

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DescEntry(name="")

    def test_first_entry_shape(self) -> None:
        entry = DescEntryFactory(description=None)
        assert set(entry.model_dump()) == {"name", "description"}


@pytest.mark.unit
class TestCacheEntry:
    """Tests for CacheEntry model."""

    def test_branch_names(self) -> None:
        entry = CacheEntry(package_name="algebra-101", path=Path("/c/r/algebra-101"), repo_dir="r")
        assert entry.release_branch == "release/algebra-101"
        assert entry.user_branch == "user/algebra-101"
        assert entry.origin_release == "origin/release/algebra-101"

    def test_frozen(self) -> None:
        entry = CacheEntryFactory()
        with pytest.raises(ValidationError):
            entry.package_name = "other"


@pytest.mark.unit
class TestPackageDescriptor:
    """Tests for PackageDescriptor model."""

    def test_factory_defaults(self) -> None:
        descriptor = PackageDescriptorFactory(name="algebra-101")
        assert descriptor.branch == "release/algebra-101"
        assert descriptor.has_data_md is False

    def test_serialization(self) -> None:
        descriptor = PackageDescriptor(
            name="algebra-101", branch="release/algebra-101", repo="r", has_data_md=True
        )
        data = descriptor.model_dump()
        assert data == {
            "name": "algebra-101",
            "branch": "release/algebra-101",
            "repo": "r",
            "has_data_md": True,
            "description": "",
        }


@pytest.mark.unit
class TestImportResult:
    """Tests for ImportResult model."""

    def test_destination_serializes_as_string(self) -> None:
        result = ImportResultFactory(package_name="algebra-101", workspace_name="Algebra")
        data = result.model_dump(mode="json")
        assert data["destination"] == str(Path("/vault") / "Algebra" / "algebra-101")
        assert data["skipped"] == []


@pytest.mark.unit
class TestPackageSyncResult:
    """Tests for PackageSyncResult model."""

    def test_conflict_defaults_false(self) -> None:
        result = PackageSyncResultFactory()
        assert result.conflict is False
        assert result.conflicted_files == []

    def test_outcome_serializes_as_value(self) -> None:
        result = PackageSyncResult(
            package_name="p", message="m", conflict=True, outcome=SyncOutcome.CONFLICT
        )
        assert result.model_dump(mode="json")["outcome"] == "conflict"


@pytest.mark.unit
class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_details_default_empty(self) -> None:
        exc = ManifestMissing("filelist.json not found")
        assert isinstance(exc, LPEngineError)
        assert exc.details == {}
        assert str(exc) == "filelist.json not found"

    def test_git_command_error_details(self) -> None:
        exc = GitCommandError("git fetch failed", args=["fetch"], stderr="boom", returncode=128)
        assert exc.details["args"] == ["fetch"]
        assert exc.stderr == "boom"

    def test_merge_conflict_files(self) -> None:
        exc = MergeConflict("conflict", files=["lesson1.md"])
        assert exc.files == ["lesson1.md"]
