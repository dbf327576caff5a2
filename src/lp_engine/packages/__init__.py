"""Package import, listing and workspace synchronization."""

from lp_engine.packages.catalog import PackageCatalog
from lp_engine.packages.importer import PackageImporter
from lp_engine.packages.syncer import WorkspaceSyncer

__all__ = ["PackageCatalog", "PackageImporter", "WorkspaceSyncer"]
