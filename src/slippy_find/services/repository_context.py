"""
Repository identity derivation.

Derives the head commit, branch and canonical owner/name of a checkout from
its HEAD and 'origin' remote configuration.
"""

import logging
import re
from typing import Optional

from ..exceptions import InvalidRemoteURLError, NoRemoteOriginError
from ..git.accessor import RepositoryAccessor
from ..models import RepositoryIdentity

logger = logging.getLogger(__name__)

ORIGIN_REMOTE = "origin"

# https://github.com/owner/repo.git, http://host/owner/repo
_HTTPS_URL_PATTERN = re.compile(
    r"^[A-Za-z][A-Za-z0-9+.-]*://[^/]+/([^/]+)/([^/]+?)(?:\.git)?$"
)
# git@github.com:owner/repo.git
_SCP_URL_PATTERN = re.compile(r"^[^@/\s]+@[^:/\s]+:([^/]+)/([^/]+?)(?:\.git)?$")


def parse_repository_name(url: str) -> str:
    """
    Extract owner/name from a git remote URL.

    Supports HTTPS style URLs (scheme://host/owner/name[.git]) and SCP-style
    SSH URLs (user@host:owner/name[.git]). Surrounding whitespace is ignored.

    Args:
        url: Remote URL as configured in git

    Returns:
        Repository name in owner/name form

    Raises:
        InvalidRemoteURLError: If the URL matches neither shape
    """
    candidate = url.strip()
    for pattern in (_HTTPS_URL_PATTERN, _SCP_URL_PATTERN):
        match = pattern.match(candidate)
        if match:
            return f"{match.group(1)}/{match.group(2)}"
    raise InvalidRemoteURLError(candidate)


class RepositoryContext:
    """Produces the RepositoryIdentity of a local checkout."""

    def __init__(self, repository: RepositoryAccessor, path: Optional[str] = None):
        self.repository = repository
        self.path = path

    def get_context(self) -> RepositoryIdentity:
        """
        Read HEAD and the origin remote.

        A detached HEAD is logged as a warning and reported with an empty
        branch name; it does not stop resolution.

        Raises:
            RepositoryNotFoundError: If HEAD cannot be resolved
            NoRemoteOriginError: If origin is missing or has no URL
            InvalidRemoteURLError: If the origin URL cannot be parsed
        """
        head_commit = self.repository.head_commit()

        branch = ""
        is_detached = not self.repository.is_on_branch()
        if is_detached:
            logger.warning(
                f"HEAD is detached; branch name will be empty "
                f"(head_sha={head_commit}, path={self.path})"
            )
        else:
            branch = self.repository.branch_name()

        if ORIGIN_REMOTE not in self.repository.remote_names():
            raise NoRemoteOriginError("failed to get origin remote")

        urls = self.repository.remote_urls(ORIGIN_REMOTE)
        if not urls:
            raise NoRemoteOriginError("origin remote has no URLs configured")

        identity = RepositoryIdentity(
            head_commit=head_commit,
            branch=branch,
            repository_name=parse_repository_name(urls[0]),
            is_detached=is_detached,
        )

        logger.debug(
            f"Extracted git context: repository={identity.repository_name} "
            f"branch={identity.branch!r} head_sha={identity.head_commit} "
            f"is_detached={identity.is_detached}"
        )
        return identity
