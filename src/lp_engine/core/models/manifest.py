"""Package metadata models (index.json / desc.json entries)."""

from pydantic import BaseModel, Field, model_validator


class IndexEntry(BaseModel):
    """A package listed in a repository's index.json."""

    name: str = Field(..., min_length=1)
    branch: str | None = None
    description: str | None = None

    @model_validator(mode="after")
    def _default_branch(self) -> "IndexEntry":
        if not self.branch:
            self.branch = f"release/{self.name}"
        return self


class DescEntry(BaseModel):
    """First entry of a package's desc.json."""

    name: str = Field(..., min_length=1)
    description: str | None = None
