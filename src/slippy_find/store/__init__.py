"""Routing slip store backends."""

from .base import SlipStore
from .clickhouse import ClickHouseSlipStore

__all__ = ["SlipStore", "ClickHouseSlipStore"]
