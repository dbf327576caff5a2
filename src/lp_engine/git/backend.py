"""Version-control backend used by the storage cache and the syncer."""

import os
import subprocess
from pathlib import Path
from typing import Protocol

import structlog

from lp_engine.core.exceptions import GitCommandError
from lp_engine.core.models.sync import CommitResult, MergeResult

logger = structlog.get_logger(__name__)


class GitBackend(Protocol):
    """The narrow set of repository primitives the engine relies on."""

    def is_repository(self, path: Path) -> bool: ...

    def default_branch(self, url: str) -> str: ...

    def clone(self, url: str, dest: Path, branch: str, depth: int | None = None) -> None: ...

    def fetch(
        self, repo: Path, remote: str = "origin", refspec: str | None = None, prune: bool = False
    ) -> None: ...

    def checkout(self, repo: Path, ref: str, force: bool = False) -> None: ...

    def create_branch(
        self, repo: Path, name: str, start_point: str, force: bool = False
    ) -> None: ...

    def branch_at(self, repo: Path, name: str, start_point: str) -> None: ...

    def branch_exists(self, repo: Path, ref: str) -> bool: ...

    def remote_branch_exists(self, repo: Path, remote: str, branch: str) -> bool: ...

    def current_branch(self, repo: Path) -> str: ...

    def rev_parse(self, repo: Path, ref: str) -> str: ...

    def merge_base(self, repo: Path, first: str, second: str) -> str | None: ...

    def commit_all(self, repo: Path, message: str) -> CommitResult: ...

    def merge(self, repo: Path, ref: str, message: str) -> MergeResult: ...

    def merge_abort(self, repo: Path) -> None: ...

    def unmerged_paths(self, repo: Path) -> list[str]: ...

    def reset_hard(self, repo: Path, ref: str) -> None: ...

    def clean(self, repo: Path) -> None: ...


class GitCLIBackend:
    """GitBackend implementation shelling out to the git CLI.

    Uses subprocess + git CLI directly (no gitpython dependency). Commits and
    merges carry an explicit author identity so the cache never depends on
    the user's global git configuration.
    """

    def __init__(
        self,
        executable: str = "git",
        author_name: str = "LP-Engine",
        author_email: str = "lp-engine@localhost",
    ) -> None:
        self._executable = executable
        self._author_name = author_name
        self._author_email = author_email

    def _command(self, *args: str) -> list[str]:
        return [
            self._executable,
            "-c", f"user.name={self._author_name}",
            "-c", f"user.email={self._author_email}",
            "-c", "commit.gpgsign=false",
            *args,
        ]

    def _run(self, cwd: Path | None, *args: str) -> subprocess.CompletedProcess:
        """Run a git command without raising on a non-zero exit."""
        command = self._command(*args)
        logger.debug("git", args=list(args), cwd=str(cwd) if cwd else None)
        try:
            return subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except FileNotFoundError as exc:
            raise GitCommandError(
                f"git executable not found: {self._executable}",
                args=list(args),
            ) from exc

    def _run_git(self, cwd: Path | None, *args: str) -> str:
        """Run a git command and return stdout, raising on failure."""
        result = self._run(cwd, *args)
        if result.returncode != 0:
            raise GitCommandError(
                f"git {args[0]} failed: {result.stderr.strip()}",
                args=list(args),
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result.stdout.strip()

    def is_repository(self, path: Path) -> bool:
        """Check if the path is the top level of a git working copy."""
        if not (path / ".git").exists():
            return False
        try:
            self._run_git(path, "rev-parse", "--git-dir")
            return True
        except GitCommandError:
            return False

    def default_branch(self, url: str) -> str:
        """Resolve the branch the remote's HEAD points at."""
        output = self._run_git(None, "ls-remote", "--symref", url, "HEAD")
        for line in output.splitlines():
            if line.startswith("ref:"):
                ref = line.split()[1]
                return ref.removeprefix("refs/heads/")
        raise GitCommandError(
            f"Remote has no symbolic HEAD: {url}",
            args=["ls-remote", "--symref", url, "HEAD"],
        )

    def clone(self, url: str, dest: Path, branch: str, depth: int | None = None) -> None:
        args = ["clone", "--single-branch", "--branch", branch]
        if depth:
            args += ["--depth", str(depth)]
        dest.parent.mkdir(parents=True, exist_ok=True)
        self._run_git(dest.parent, *args, url, str(dest))

    def fetch(
        self, repo: Path, remote: str = "origin", refspec: str | None = None, prune: bool = False
    ) -> None:
        args = ["fetch"]
        if prune:
            args.append("--prune")
        args.append(remote)
        if refspec:
            args.append(refspec)
        self._run_git(repo, *args)

    def checkout(self, repo: Path, ref: str, force: bool = False) -> None:
        args = ["checkout"]
        if force:
            args.append("--force")
        self._run_git(repo, *args, ref, "--")

    def create_branch(
        self, repo: Path, name: str, start_point: str, force: bool = False
    ) -> None:
        """Create ``name`` at ``start_point`` and check it out.

        With ``force`` an existing branch is reset and local drift discarded.
        """
        if force:
            self._run_git(repo, "checkout", "--force", "-B", name, start_point, "--")
        else:
            self._run_git(repo, "checkout", "-b", name, start_point, "--")

    def branch_at(self, repo: Path, name: str, start_point: str) -> None:
        """Create ``name`` at ``start_point`` without checking it out."""
        self._run_git(repo, "branch", name, start_point)

    def branch_exists(self, repo: Path, ref: str) -> bool:
        """Check a fully-qualified ref (``refs/heads/...``, ``refs/remotes/...``)."""
        result = self._run(repo, "show-ref", "--verify", "--quiet", ref)
        return result.returncode == 0

    def remote_branch_exists(self, repo: Path, remote: str, branch: str) -> bool:
        """Ask the remote itself whether a branch exists."""
        result = self._run(repo, "ls-remote", "--exit-code", "--heads", remote, f"refs/heads/{branch}")
        if result.returncode == 0:
            return True
        if result.returncode == 2:
            return False
        raise GitCommandError(
            f"git ls-remote failed: {result.stderr.strip()}",
            args=["ls-remote", remote, branch],
            stderr=result.stderr,
            returncode=result.returncode,
        )

    def current_branch(self, repo: Path) -> str:
        return self._run_git(repo, "rev-parse", "--abbrev-ref", "HEAD")

    def rev_parse(self, repo: Path, ref: str) -> str:
        return self._run_git(repo, "rev-parse", "--verify", f"{ref}^{{commit}}")

    def merge_base(self, repo: Path, first: str, second: str) -> str | None:
        """Return the best common ancestor, or None for unrelated histories."""
        result = self._run(repo, "merge-base", first, second)
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise GitCommandError(
                f"git merge-base failed: {result.stderr.strip()}",
                args=["merge-base", first, second],
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result.stdout.strip()

    def commit_all(self, repo: Path, message: str) -> CommitResult:
        """Stage every change in the working tree and commit it."""
        self._run_git(repo, "add", "--all")
        if not self._run_git(repo, "status", "--porcelain"):
            return CommitResult.NO_CHANGES
        self._run_git(repo, "commit", "--no-verify", "-m", message)
        return CommitResult.COMMITTED

    def merge(self, repo: Path, ref: str, message: str) -> MergeResult:
        result = self._run(repo, "merge", "--no-edit", "-m", message, ref)
        if result.returncode == 0:
            return MergeResult.MERGED
        if self.unmerged_paths(repo):
            return MergeResult.CONFLICT
        raise GitCommandError(
            f"git merge failed: {result.stderr.strip() or result.stdout.strip()}",
            args=["merge", ref],
            stderr=result.stderr,
            returncode=result.returncode,
        )

    def merge_abort(self, repo: Path) -> None:
        self._run_git(repo, "merge", "--abort")

    def unmerged_paths(self, repo: Path) -> list[str]:
        output = self._run_git(repo, "diff", "--name-only", "--diff-filter=U")
        return output.splitlines() if output else []

    def reset_hard(self, repo: Path, ref: str) -> None:
        self._run_git(repo, "reset", "--hard", ref)

    def clean(self, repo: Path) -> None:
        """Remove untracked files and directories."""
        self._run_git(repo, "clean", "-fd")
