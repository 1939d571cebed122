"""
Core domain models.

This package contains data types that are independent of any
specific pipeline stage.
"""

from .types import (
    Contributor,
    EnrichedItem,
    Snapshot,
    TrendingItem,
    format_timestamp,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "Contributor",
    "TrendingItem",
    "EnrichedItem",
    "Snapshot",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]
