"""Repository URL to storage-cache directory name resolution."""

import re
from urllib.parse import urlparse

from lp_engine.core.exceptions import CacheUnavailable

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def normalize_remote_url(url: str) -> str:
    """Normalize a git remote URL to an HTTPS-style URL.

    Handles:
    - git@github.com:org/repo.git -> https://github.com/org/repo
    - https://github.com/org/repo.git -> https://github.com/org/repo
    """
    url = url.strip().rstrip("/")
    # Strip .git suffix
    url = re.sub(r"\.git$", "", url)
    # Convert SSH to HTTPS
    ssh_match = re.match(r"^[\w.-]+@([^:/]+):(.+)$", url)
    if ssh_match:
        host, path = ssh_match.groups()
        return f"https://{host}/{path}"
    return url


def repo_dir_name(url: str) -> str:
    """Derive the cache directory name of a repository from its URL path.

    The host is not part of the name: ``https://gitee.com/org/repo.git`` and
    ``git@gitee.com:org/repo.git`` both map to ``org_repo``. Local paths map
    the same way from their filesystem path.
    """
    normalized = normalize_remote_url(url)
    parsed = urlparse(normalized)
    path = parsed.path if parsed.scheme else normalized
    segments = [
        _UNSAFE.sub("-", segment)
        for segment in re.split(r"[\\/]+", path)
        if segment and segment not in (".", "..")
    ]
    name = "_".join(s.strip("-") for s in segments if s.strip("-"))
    if not name:
        raise CacheUnavailable(
            f"Cannot derive a cache directory from URL: {url!r}",
            details={"repo": url},
        )
    return name
