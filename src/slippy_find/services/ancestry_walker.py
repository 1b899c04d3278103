"""
First-parent ancestry walking.

Merge commits interleave history from other branches. Following their
second parents could surface a slip recorded for an unrelated branch, so
the walk follows only the first parent of every commit: the chain that
represents the branch's own history.
"""

import logging
import threading
from typing import List, Optional

from ..exceptions import EmptyAncestryError, ResolutionCancelledError
from ..git.accessor import RepositoryAccessor
from ..models import normalize_depth

logger = logging.getLogger(__name__)


class AncestryWalker:
    """Collects a depth-bounded, head-first list of first-parent commits."""

    def __init__(self, repository: RepositoryAccessor):
        self.repository = repository

    def walk(
        self, depth: int, cancel_event: Optional[threading.Event] = None
    ) -> List[str]:
        """
        Walk first-parent ancestry starting at HEAD.

        Iteration is bounded by depth, so a corrupted repository reporting a
        commit as its own parent still terminates.

        Args:
            depth: Maximum number of commits to return (<= 0 uses the default)
            cancel_event: Checked before each commit is appended

        Returns:
            Commit ids ordered from HEAD to oldest

        Raises:
            ResolutionCancelledError: If cancel_event is set during the walk
            EmptyAncestryError: If no commit could be collected
        """
        depth = normalize_depth(depth)

        commits: List[str] = []
        candidate: Optional[str] = self.repository.head_commit() or None

        while candidate is not None and len(commits) < depth:
            if cancel_event is not None and cancel_event.is_set():
                raise ResolutionCancelledError(
                    "ancestry walk cancelled",
                    f"after {len(commits)} of up to {depth} commits",
                )
            commits.append(candidate)
            if len(commits) < depth:
                candidate = self.repository.parent_of(candidate)

        if not commits:
            raise EmptyAncestryError()

        logger.debug(
            f"Walked commit ancestry: depth_requested={depth} "
            f"commits_found={len(commits)} head_sha={commits[0]} "
            f"oldest_sha={commits[-1]}"
        )
        return commits
