"""Abstract base class for slip stores.

Defines the lookup contract the resolver consumes. The store is opened once
at startup, queried once per resolve call and closed at shutdown.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..models import Slip


class SlipStore(ABC):
    """Abstract interface for routing slip lookups by commit."""

    @abstractmethod
    def find_by_commits(
        self, repository: str, commits: List[str]
    ) -> Tuple[Optional[Slip], str]:
        """Find the slip recorded for the nearest of the given commits.

        Args:
            repository: Repository name in owner/name form
            commits: Candidate commit ids, nearest first

        Returns:
            (slip, matched_commit) on a match, (None, "") when no commit matches

        Raises:
            StoreQueryError: If the query itself fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release connections held by the store."""
        pass
