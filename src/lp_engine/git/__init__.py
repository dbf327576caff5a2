"""Git integration module for LP-Engine."""

from lp_engine.git.backend import GitBackend, GitCLIBackend
from lp_engine.git.url_resolver import normalize_remote_url, repo_dir_name

__all__ = ["GitBackend", "GitCLIBackend", "normalize_remote_url", "repo_dir_name"]
