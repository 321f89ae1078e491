"""Data models for xferfilter.

This module exports the core data structures used throughout the application.
"""

from xferfilter.models.item import (
    PATH_SEPARATOR,
    EnumeratedItem,
    PathSegments,
    ensure_aware,
    is_within,
    join_path,
    split_path,
)
from xferfilter.models.verdict import DecisionRecord, MatchReason, RejectReason, Verdict

__all__ = [
    "PATH_SEPARATOR",
    "DecisionRecord",
    "EnumeratedItem",
    "MatchReason",
    "PathSegments",
    "RejectReason",
    "Verdict",
    "ensure_aware",
    "is_within",
    "join_path",
    "split_path",
]
