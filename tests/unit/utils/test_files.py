"""Tests for filesystem projection helpers."""

from pathlib import Path

import pytest

from lp_engine.utils.files import clear_directory, copy_listed_files, overlay_tree, project_tree


@pytest.fixture
def source(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    (src / ".git").mkdir(parents=True)
    (src / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (src / "lesson1.md").write_text("lesson\n")
    (src / "data.md").write_text("{}\n")
    (src / "figures").mkdir()
    (src / "figures" / "a.md").write_text("a\n")
    (src / "filelist.json").write_text("[]")
    return src


@pytest.mark.unit
class TestCopyListedFiles:
    """Tests for copy_listed_files."""

    def test_copies_preserving_structure(self, tmp_path: Path, source: Path) -> None:
        package = tmp_path / "ws" / "pkg"
        package.mkdir(parents=True)
        report = copy_listed_files(source, package, ["lesson1.md", "figures/a.md"])
        assert report.copied == ["lesson1.md", "figures/a.md"]
        assert (package / "figures" / "a.md").read_text() == "a\n"
        assert not (package / "filelist.json").exists()

    def test_data_md_goes_one_level_up(self, tmp_path: Path, source: Path) -> None:
        package = tmp_path / "ws" / "pkg"
        package.mkdir(parents=True)
        copy_listed_files(source, package, ["data.md"])
        assert (tmp_path / "ws" / "data.md").read_text() == "{}\n"
        assert not (package / "data.md").exists()

    def test_missing_files_skipped(self, tmp_path: Path, source: Path) -> None:
        package = tmp_path / "pkg"
        package.mkdir()
        report = copy_listed_files(source, package, ["lesson1.md", "ghost.md"])
        assert report.copied == ["lesson1.md"]
        assert report.skipped == ["ghost.md"]

    def test_listed_directory_copied_without_vcs(self, tmp_path: Path, source: Path) -> None:
        (source / "figures" / ".git").mkdir()
        package = tmp_path / "pkg"
        package.mkdir()
        copy_listed_files(source, package, ["figures"])
        assert (package / "figures" / "a.md").exists()
        assert not (package / "figures" / ".git").exists()


@pytest.mark.unit
class TestOverlayTree:
    """Tests for overlay_tree."""

    def test_overlay_keeps_destination_only_files(self, tmp_path: Path, source: Path) -> None:
        workspace = tmp_path / "workspace"
        workspace.mkdir()
        (workspace / "lesson1.md").write_text("edited\n")
        overlay_tree(workspace, source)
        assert (source / "lesson1.md").read_text() == "edited\n"
        assert (source / "filelist.json").exists()
        assert (source / ".git" / "HEAD").exists()

    def test_vcs_metadata_not_overlaid(self, tmp_path: Path, source: Path) -> None:
        workspace = tmp_path / "workspace"
        (workspace / ".git").mkdir(parents=True)
        (workspace / ".git" / "HEAD").write_text("other\n")
        overlay_tree(workspace, source)
        assert (source / ".git" / "HEAD").read_text() == "ref: refs/heads/main\n"


@pytest.mark.unit
class TestClearAndProject:
    """Tests for clear_directory and project_tree."""

    def test_clear_keeps_vcs(self, source: Path) -> None:
        clear_directory(source)
        assert [p.name for p in source.iterdir()] == [".git"]

    def test_project_tree_relocates_data_md(self, tmp_path: Path, source: Path) -> None:
        package = tmp_path / "ws" / "pkg"
        project_tree(source, package)
        assert sorted(p.name for p in package.iterdir()) == ["figures", "filelist.json", "lesson1.md"]
        assert (tmp_path / "ws" / "data.md").exists()
