"""
Repository accessor interface.

Defines the minimal read-only view of a local checkout that the resolution
engine needs. GitRepository implements it on top of the git CLI; tests use
in-memory commit graphs.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class RepositoryAccessor(ABC):
    """Abstract interface for reading HEAD, remotes and parent links."""

    @abstractmethod
    def head_commit(self) -> str:
        """
        Get the full commit id HEAD points to.

        Raises:
            RepositoryNotFoundError: If HEAD cannot be resolved
        """
        pass

    @abstractmethod
    def is_on_branch(self) -> bool:
        """Return True when HEAD is a symbolic ref to a local branch."""
        pass

    @abstractmethod
    def branch_name(self) -> str:
        """Return the short branch name, or "" when HEAD is detached."""
        pass

    @abstractmethod
    def remote_names(self) -> List[str]:
        """Return the names of all configured remotes."""
        pass

    @abstractmethod
    def remote_urls(self, name: str) -> List[str]:
        """Return the configured URLs of a remote, in configuration order."""
        pass

    @abstractmethod
    def parent_of(self, commit: str) -> Optional[str]:
        """
        Get the first parent of a commit.

        Returns:
            First parent commit id, or None for a root commit
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release any resources held by the accessor."""
        pass
