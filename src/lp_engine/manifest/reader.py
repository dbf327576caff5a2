"""Reading and validation of package metadata files."""

import json
from pathlib import Path, PurePosixPath
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from lp_engine.core.exceptions import IndexMissing, ManifestCorrupt, ManifestMissing
from lp_engine.core.models.manifest import DescEntry, IndexEntry

logger = structlog.get_logger(__name__)

FILELIST_FILE = "filelist.json"
DESC_FILE = "desc.json"
INDEX_FILE = "index.json"

_filelist_adapter = TypeAdapter(list[str])
_desc_adapter = TypeAdapter(list[DescEntry])
_index_adapter = TypeAdapter(list[IndexEntry])


def _safe_relative(path: str, source: Path) -> str:
    """Normalise a manifest path, rejecting absolute or escaping paths."""
    rel = PurePosixPath(path.replace("\\", "/"))
    if not path.strip() or rel.is_absolute() or ".." in rel.parts:
        raise ManifestCorrupt(
            f"Manifest path must be relative and stay inside the package: {path!r}",
            details={"file": str(source), "path": path},
        )
    return rel.as_posix()


class ManifestReader:
    """Parses index.json, desc.json and filelist.json from a package directory."""

    def _load(self, path: Path, missing_exc: type[ManifestMissing | IndexMissing]) -> Any:
        if not path.is_file():
            raise missing_exc(
                f"{path.name} not found in {path.parent}",
                details={"file": str(path)},
            )
        try:
            return json.loads(path.read_text(encoding="utf-8-sig"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ManifestCorrupt(
                f"{path.name} is not valid JSON: {exc}",
                details={"file": str(path)},
            ) from exc

    def read_filelist(self, directory: Path) -> list[str]:
        """Return the ordered relative paths that make up the package payload."""
        path = Path(directory) / FILELIST_FILE
        data = self._load(path, ManifestMissing)
        try:
            entries = _filelist_adapter.validate_python(data)
        except ValidationError as exc:
            raise ManifestCorrupt(
                f"{FILELIST_FILE} must be an array of paths",
                details={"file": str(path), "errors": exc.errors()},
            ) from exc
        return [_safe_relative(entry, path) for entry in entries]

    def read_desc(self, directory: Path) -> DescEntry:
        """Return the first desc.json entry, which names the workspace."""
        path = Path(directory) / DESC_FILE
        data = self._load(path, ManifestMissing)
        try:
            entries = _desc_adapter.validate_python(data)
        except ValidationError as exc:
            raise ManifestCorrupt(
                f"{DESC_FILE} must be an array of objects with a name",
                details={"file": str(path), "errors": exc.errors()},
            ) from exc
        if not entries:
            raise ManifestCorrupt(f"{DESC_FILE} is empty", details={"file": str(path)})
        return entries[0]

    def read_index(self, directory: Path) -> list[IndexEntry]:
        """Return the packages listed on a repository's default branch."""
        path = Path(directory) / INDEX_FILE
        data = self._load(path, IndexMissing)
        try:
            entries = _index_adapter.validate_python(data)
        except ValidationError as exc:
            raise ManifestCorrupt(
                f"{INDEX_FILE} must be an array of package entries",
                details={"file": str(path), "errors": exc.errors()},
            ) from exc
        logger.debug("Index read", file=str(path), packages=len(entries))
        return entries

    def has_data_md(self, directory: Path) -> bool:
        """Whether the package ships a workspace-level data.md."""
        return "data.md" in self.read_filelist(directory)
