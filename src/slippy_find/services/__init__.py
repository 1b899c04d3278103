"""Slip resolution services."""

from .ancestry_walker import AncestryWalker
from .repository_context import RepositoryContext, parse_repository_name
from .slip_resolver import SlipResolver

__all__ = [
    "AncestryWalker",
    "RepositoryContext",
    "SlipResolver",
    "parse_repository_name",
]
