"""Correlation id output."""

import sys
from typing import Optional, TextIO


class OutputWriter:
    """Writes the resolved correlation id as a single bare line.

    Pipelines capture this stream directly, so nothing else is ever written
    to it.
    """

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout

    def write_correlation_id(self, correlation_id: str) -> None:
        self.out.write(f"{correlation_id}\n")
        self.out.flush()
