"""Filter categories.

A category is a named predicate group holding zero or more parsed
patterns, OR-combined internally. Categories are a tagged variant over
FilterKind rather than a class hierarchy, so the decision function can
match exhaustively on the kind.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from xferfilter.matching.glob import GlobPattern
from xferfilter.matching.path import PathPattern
from xferfilter.models.item import EnumeratedItem, PathSegments, is_within, join_path


class OperationKind(str, Enum):
    """Kind of job the filter set is built for."""

    COPY = "copy"
    SYNC = "sync"
    REMOVE = "remove"


class FilterKind(str, Enum):
    """Kind of filter category.

    Attributes:
        INCLUDE_PATH: Root-anchored path prefixes to include.
        EXCLUDE_PATH: Root-anchored path prefixes to exclude.
        INCLUDE_PATTERN: Basename globs to include.
        EXCLUDE_PATTERN: Basename globs to exclude.
        INCLUDE_AFTER: Only items modified strictly after a threshold.
        INCLUDE_BEFORE: Only items modified strictly before a threshold.
        SCOPE_RESTRICTION: Restrict a remove job to one relative path.
    """

    INCLUDE_PATH = "include_path"
    EXCLUDE_PATH = "exclude_path"
    INCLUDE_PATTERN = "include_pattern"
    EXCLUDE_PATTERN = "exclude_pattern"
    INCLUDE_AFTER = "include_after"
    INCLUDE_BEFORE = "include_before"
    SCOPE_RESTRICTION = "scope_restriction"

    @property
    def is_exclude(self) -> bool:
        return self in (FilterKind.EXCLUDE_PATH, FilterKind.EXCLUDE_PATTERN)

    @property
    def is_include(self) -> bool:
        return self in (
            FilterKind.INCLUDE_PATH,
            FilterKind.INCLUDE_PATTERN,
            FilterKind.INCLUDE_AFTER,
            FilterKind.INCLUDE_BEFORE,
        )

    @property
    def is_time_based(self) -> bool:
        return self in (FilterKind.INCLUDE_AFTER, FilterKind.INCLUDE_BEFORE)


@dataclass(frozen=True, slots=True)
class FilterCategory:
    """A configured filter category.

    Only the field belonging to ``kind`` is populated: ``patterns`` for
    the path and pattern kinds, ``threshold`` for the time kinds and
    ``scope`` for the scope restriction.

    Attributes:
        kind: Category kind.
        patterns: Parsed path or glob patterns.
        threshold: Modification time threshold.
        scope: Scope path segments (empty tuple for the whole source).
    """

    kind: FilterKind
    patterns: frozenset[PathPattern] | frozenset[GlobPattern] = frozenset()
    threshold: datetime | None = None
    scope: PathSegments | None = None

    def __post_init__(self) -> None:
        """Validate that the populated fields fit the kind."""
        if self.kind.is_time_based:
            if self.threshold is None or self.patterns or self.scope is not None:
                msg = f"{self.kind.value} needs a threshold only"
                raise ValueError(msg)
        elif self.kind == FilterKind.SCOPE_RESTRICTION:
            if self.scope is None or self.patterns or self.threshold is not None:
                msg = f"{self.kind.value} needs a scope only"
                raise ValueError(msg)
        elif self.threshold is not None or self.scope is not None:
            msg = f"{self.kind.value} takes patterns only"
            raise ValueError(msg)

    @property
    def is_configured(self) -> bool:
        """Whether the category restricts anything at all."""
        if self.kind.is_time_based:
            return self.threshold is not None
        if self.kind == FilterKind.SCOPE_RESTRICTION:
            return self.scope is not None
        return bool(self.patterns)

    def matches_path(self, segments: PathSegments) -> bool:
        """Evaluate the path-only kinds against bare path segments.

        Time kinds need item metadata and are not answerable here.
        """
        match self.kind:
            case FilterKind.INCLUDE_PATH | FilterKind.EXCLUDE_PATH:
                return any(p.matches(segments) for p in self.patterns)  # type: ignore[union-attr]
            case FilterKind.INCLUDE_PATTERN | FilterKind.EXCLUDE_PATTERN:
                name = segments[-1] if segments else ""
                return any(p.matches(name) for p in self.patterns)  # type: ignore[union-attr]
            case FilterKind.SCOPE_RESTRICTION:
                return self.scope is not None and is_within(segments, self.scope)
            case FilterKind.INCLUDE_AFTER | FilterKind.INCLUDE_BEFORE:
                msg = f"{self.kind.value} cannot be evaluated without item metadata"
                raise TypeError(msg)

    def matches(self, item: EnumeratedItem) -> bool:
        """Evaluate the category against an item.

        An unconfigured category always matches.
        """
        if not self.is_configured:
            return True
        match self.kind:
            case FilterKind.INCLUDE_AFTER:
                return item.last_modified > self.threshold  # type: ignore[operator]
            case FilterKind.INCLUDE_BEFORE:
                return item.last_modified < self.threshold  # type: ignore[operator]
            case _:
                return self.matches_path(item.relative_path)

    def describe(self) -> str:
        """Human-readable summary of the configured values."""
        if self.kind.is_time_based:
            return self.threshold.isoformat() if self.threshold else ""
        if self.kind == FilterKind.SCOPE_RESTRICTION:
            return join_path(self.scope or ())
        return ";".join(sorted(str(p) for p in self.patterns))
