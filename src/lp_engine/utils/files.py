"""Filesystem projection helpers for package payloads."""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

DATA_MD = "data.md"
VCS_DIRS = frozenset({".git"})


@dataclass
class CopyReport:
    """Which manifest paths were copied and which were absent at the source."""

    copied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _ignore_vcs(_directory: str, names: list[str]) -> set[str]:
    return {name for name in names if name in VCS_DIRS}


def copy_listed_files(source: Path, package_dir: Path, paths: list[str]) -> CopyReport:
    """Copy manifest-listed files from ``source`` into ``package_dir``.

    ``data.md`` is workspace-level metadata and lands one level above the
    package directory instead of inside it. Listed files missing from the
    source are skipped with a warning.
    """
    report = CopyReport()
    for rel_path in paths:
        src = source / rel_path
        if rel_path == DATA_MD:
            dest = package_dir.parent / DATA_MD
        else:
            dest = package_dir / rel_path

        if not src.exists():
            logger.warning("Listed file missing from package", path=rel_path, source=str(source))
            report.skipped.append(rel_path)
            continue

        dest.parent.mkdir(parents=True, exist_ok=True)
        if src.is_dir():
            shutil.copytree(src, dest, ignore=_ignore_vcs, dirs_exist_ok=True)
        else:
            shutil.copy2(src, dest)
        report.copied.append(rel_path)
    return report


def overlay_tree(source: Path, dest: Path) -> None:
    """Copy every file of ``source`` over ``dest`` without clearing ``dest`` first."""
    shutil.copytree(source, dest, ignore=_ignore_vcs, dirs_exist_ok=True)


def collect_data_md(package_dir: Path, dest: Path) -> bool:
    """Copy the workspace-level data.md of ``package_dir`` into ``dest``.

    Returns False when the workspace has no data.md.
    """
    source = package_dir.parent / DATA_MD
    if not source.is_file():
        return False
    shutil.copy2(source, dest / DATA_MD)
    return True


def clear_directory(directory: Path) -> None:
    """Remove everything inside ``directory`` except version-control metadata."""
    for child in directory.iterdir():
        if child.name in VCS_DIRS:
            continue
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def project_tree(source: Path, package_dir: Path) -> None:
    """Mirror a whole package tree into ``package_dir``, relocating data.md."""
    package_dir.mkdir(parents=True, exist_ok=True)
    for child in source.iterdir():
        if child.name in VCS_DIRS:
            continue
        if child.name == DATA_MD and child.is_file():
            shutil.copy2(child, package_dir.parent / DATA_MD)
        elif child.is_dir():
            shutil.copytree(child, package_dir / child.name, ignore=_ignore_vcs, dirs_exist_ok=True)
        else:
            shutil.copy2(child, package_dir / child.name)
