"""
Slip resolution orchestration.

Combines the repository identity, the first-parent ancestry and a single
store lookup into one resolve call:

    Start -> ContextObtained -> AncestryObtained -> StoreQueried -> Success | NoMatch

Every failure is fatal to the call; nothing is retried.
"""

import logging
import threading
from typing import Optional

from ..exceptions import (
    NoAncestorSlipError,
    ResolutionCancelledError,
    SlipFindError,
    StoreQueryError,
)
from ..models import (
    RESOLVED_BY_ANCESTRY,
    ResolveInput,
    ResolveOutput,
    normalize_depth,
)
from ..store.base import SlipStore
from .ancestry_walker import AncestryWalker
from .repository_context import RepositoryContext

logger = logging.getLogger(__name__)


class SlipResolver:
    """Resolves the routing slip for the local repository's commit ancestry."""

    def __init__(
        self,
        context: RepositoryContext,
        walker: AncestryWalker,
        finder: SlipStore,
    ):
        self.context = context
        self.walker = walker
        self.finder = finder

    @staticmethod
    def _check_cancelled(
        cancel_event: Optional[threading.Event], stage: str
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ResolutionCancelledError(f"slip resolution cancelled before {stage}")

    def resolve(
        self,
        resolve_input: ResolveInput,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolveOutput:
        """
        Find the slip matching the nearest commit in HEAD's first-parent ancestry.

        Args:
            resolve_input: Resolution parameters (depth <= 0 uses the default)
            cancel_event: Optional cancellation signal checked between stages
                and on every step of the ancestry walk

        Returns:
            ResolveOutput for the matched slip

        Raises:
            NoAncestorSlipError: If no commit in the searched ancestry has a slip
            StoreQueryError: If the store lookup fails
            SlipFindError: Any repository context or ancestry failure, unchanged
        """
        depth = normalize_depth(resolve_input.depth)
        logger.info(f"Starting slip resolution (depth={depth})")

        self._check_cancelled(cancel_event, "reading repository context")
        identity = self.context.get_context()
        logger.info(
            f"Extracted git context: repository={identity.repository_name} "
            f"branch={identity.branch!r} head_sha={identity.head_commit} "
            f"is_detached={identity.is_detached}"
        )

        self._check_cancelled(cancel_event, "walking commit ancestry")
        commits = self.walker.walk(depth, cancel_event=cancel_event)
        logger.debug(
            f"Retrieved commit ancestry: repository={identity.repository_name} "
            f"commits_count={len(commits)} head={commits[0]}"
        )

        self._check_cancelled(cancel_event, "querying the slip store")
        try:
            slip, matched_commit = self.finder.find_by_commits(
                identity.repository_name, commits
            )
        except SlipFindError:
            raise
        except Exception as e:
            raise StoreQueryError("failed to find slip by commits", str(e)) from e

        self._check_cancelled(cancel_event, "returning the resolved slip")

        if slip is None:
            logger.warning(
                f"No slip found in commit ancestry: "
                f"repository={identity.repository_name} "
                f"commits_count={len(commits)} head_sha={identity.head_commit}"
            )
            raise NoAncestorSlipError(len(commits), identity.head_commit)

        logger.info(
            f"Slip resolved successfully: correlation_id={slip.correlation_id} "
            f"matched_commit={matched_commit} "
            f"repository={identity.repository_name} "
            f"resolved_by={RESOLVED_BY_ANCESTRY}"
        )

        return ResolveOutput(
            correlation_id=slip.correlation_id,
            matched_commit=matched_commit,
            repository_name=identity.repository_name,
            branch=identity.branch,
            resolved_by=RESOLVED_BY_ANCESTRY,
        )
