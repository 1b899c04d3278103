"""Tests for correlation id output."""

import io
import sys

from slippy_find.utils.output_writer import OutputWriter


def test_writes_bare_line():
    out = io.StringIO()

    OutputWriter(out).write_correlation_id("corr-123")

    assert out.getvalue() == "corr-123\n"


def test_defaults_to_stdout(monkeypatch):
    out = io.StringIO()
    monkeypatch.setattr(sys, "stdout", out)

    writer = OutputWriter()
    writer.write_correlation_id("corr-456")

    assert out.getvalue() == "corr-456\n"
