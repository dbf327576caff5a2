"""Package metadata handling."""

from lp_engine.manifest.reader import DESC_FILE, FILELIST_FILE, INDEX_FILE, ManifestReader

__all__ = ["ManifestReader", "FILELIST_FILE", "DESC_FILE", "INDEX_FILE"]
