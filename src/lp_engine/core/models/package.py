"""Package and cache models."""

from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field

RELEASE_PREFIX = "release/"
USER_PREFIX = "user/"


def folder_name_for_branch(branch: str) -> str:
    """Resolve the on-disk package folder name for a release branch.

    ``release/algebra-101`` -> ``algebra-101``; any other branch uses its basename.
    """
    if branch.startswith(RELEASE_PREFIX):
        name = branch[len(RELEASE_PREFIX):]
    else:
        name = PurePosixPath(branch).name
    return name.strip("/")


class PackageDescriptor(BaseModel):
    """A package offered by a remote repository."""

    name: str
    branch: str
    repo: str
    has_data_md: bool = False
    description: str = ""


class CacheEntry(BaseModel):
    """A local git mirror of one package of one repository."""

    package_name: str
    path: Path
    repo_dir: str

    class Config:
        frozen = True

    @property
    def release_branch(self) -> str:
        return f"{RELEASE_PREFIX}{self.package_name}"

    @property
    def user_branch(self) -> str:
        return f"{USER_PREFIX}{self.package_name}"

    @property
    def origin_release(self) -> str:
        return f"origin/{self.release_branch}"


class ImportResult(BaseModel):
    """Outcome of projecting a package into a workspace."""

    package_name: str
    workspace_name: str
    destination: Path
    copied: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    message: str = ""
