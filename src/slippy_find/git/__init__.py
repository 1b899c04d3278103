"""Local git repository access."""

from .accessor import RepositoryAccessor
from .repository import GitRepository

__all__ = ["RepositoryAccessor", "GitRepository"]
