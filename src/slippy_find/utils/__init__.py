"""Utility helpers for slippy-find."""
