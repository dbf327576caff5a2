"""Storage cache for remote packages."""

from lp_engine.storage.cache import INDEX_FOLDER, StorageCache

__all__ = ["StorageCache", "INDEX_FOLDER"]
