"""Value objects passed between the resolution components."""

from dataclasses import dataclass

DEFAULT_ANCESTRY_DEPTH = 25
RESOLVED_BY_ANCESTRY = "ancestry"


def normalize_depth(depth: int) -> int:
    """Map non-positive depths onto the default ancestry depth."""
    if depth <= 0:
        return DEFAULT_ANCESTRY_DEPTH
    return depth


@dataclass(frozen=True)
class RepositoryIdentity:
    """Identity of the local checkout, derived from HEAD and the origin remote."""

    head_commit: str
    branch: str  # "" when HEAD is detached
    repository_name: str  # owner/name
    is_detached: bool


@dataclass(frozen=True)
class Slip:
    """Domain view of a routing slip found in the store."""

    correlation_id: str


@dataclass(frozen=True)
class ResolveInput:
    """Parameters for a single resolve call."""

    depth: int = DEFAULT_ANCESTRY_DEPTH


@dataclass(frozen=True)
class ResolveOutput:
    """Result of a successful slip resolution."""

    correlation_id: str
    matched_commit: str
    repository_name: str
    branch: str
    resolved_by: str = RESOLVED_BY_ANCESTRY
