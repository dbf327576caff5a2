"""Utility functions for LP-Engine."""

from lp_engine.utils.files import (
    CopyReport,
    clear_directory,
    collect_data_md,
    copy_listed_files,
    overlay_tree,
    project_tree,
)

__all__ = [
    "CopyReport",
    "clear_directory",
    "collect_data_md",
    "copy_listed_files",
    "overlay_tree",
    "project_tree",
]
