"""Filter set and decision function.

A FilterSet is built once per job from parsed configuration and is
read-only afterwards. Its decision function is pure: it consults only
the filter set and the item, so it can run on any number of worker
threads without locking.

Decision order:
1. Scope restriction and depth gate.
2. Exclude categories. Any match rejects, regardless of includes.
3. Include categories. Every configured one must match.
"""

import logging
from collections.abc import Iterable

from xferfilter.core.errors import FilterConfigError
from xferfilter.filters.categories import FilterCategory, FilterKind, OperationKind
from xferfilter.models.item import EnumeratedItem, PathSegments, is_within
from xferfilter.models.verdict import RejectReason, Verdict

logger = logging.getLogger(__name__)

# Evaluation order inside the exclude and include steps
_EXCLUDE_ORDER: tuple[FilterKind, ...] = (FilterKind.EXCLUDE_PATH, FilterKind.EXCLUDE_PATTERN)
_INCLUDE_ORDER: tuple[FilterKind, ...] = (
    FilterKind.INCLUDE_PATH,
    FilterKind.INCLUDE_PATTERN,
    FilterKind.INCLUDE_AFTER,
    FilterKind.INCLUDE_BEFORE,
)

_EXCLUDE_REASONS: dict[FilterKind, RejectReason] = {
    FilterKind.EXCLUDE_PATH: RejectReason.EXCLUDED_BY_PATH,
    FilterKind.EXCLUDE_PATTERN: RejectReason.EXCLUDED_BY_PATTERN,
}


class FilterSet:
    """Immutable collection of configured filter categories.

    Args:
        categories: Categories to apply. At most one per kind;
            unconfigured (empty) categories are dropped.
        recursive: Whether items below the top level are considered.
        operation: Kind of job the filters are built for.

    Raises:
        FilterConfigError: If a kind is given twice or a scope
            restriction is used outside a remove job.
    """

    __slots__ = ("_categories", "_operation", "_recursive")

    def __init__(
        self,
        categories: Iterable[FilterCategory] = (),
        *,
        recursive: bool = False,
        operation: OperationKind = OperationKind.COPY,
    ) -> None:
        by_kind: dict[FilterKind, FilterCategory] = {}
        seen: set[FilterKind] = set()
        for category in categories:
            if category.kind in seen:
                msg = f"Filter category configured more than once: {category.kind.value}"
                raise FilterConfigError(msg)
            seen.add(category.kind)
            if not category.is_configured:
                continue
            if category.kind == FilterKind.SCOPE_RESTRICTION and operation != OperationKind.REMOVE:
                msg = f"Scope restriction only applies to remove jobs, not {operation.value}"
                raise FilterConfigError(msg)
            if category.kind.is_time_based and operation != OperationKind.COPY:
                logger.warning(
                    "Ignoring %s for %s job (only copy jobs filter on modification time)",
                    category.kind.value,
                    operation.value,
                )
                continue
            by_kind[category.kind] = category

        self._categories = by_kind
        self._recursive = recursive
        self._operation = operation
        logger.debug(
            "Built filter set for %s job (recursive=%s): %s",
            operation.value,
            recursive,
            ", ".join(f"{k.value}={c.describe()}" for k, c in by_kind.items()) or "no filters",
        )

    @property
    def recursive(self) -> bool:
        return self._recursive

    @property
    def operation(self) -> OperationKind:
        return self._operation

    @property
    def categories(self) -> dict[FilterKind, FilterCategory]:
        """Configured categories keyed by kind (a copy)."""
        return dict(self._categories)

    @property
    def scope(self) -> PathSegments | None:
        """Scope path segments, or None when no scope restriction is configured."""
        category = self._categories.get(FilterKind.SCOPE_RESTRICTION)
        return category.scope if category else None

    def get(self, kind: FilterKind) -> FilterCategory | None:
        return self._categories.get(kind)

    def unconditional_rejection(self, segments: PathSegments) -> RejectReason | None:
        """Run the path-only steps (scope, depth, excludes) for a bare path.

        Args:
            segments: Relative path segments.

        Returns:
            The reject reason, or None if the path survives these steps.
        """
        scope = self.scope
        if scope is not None:
            if not is_within(segments, scope):
                return RejectReason.OUT_OF_SCOPE
            if scope and not self._recursive and len(segments) > len(scope):
                return RejectReason.TOO_DEEP
        if not self._recursive and not scope and len(segments) > 1:
            return RejectReason.TOO_DEEP

        for kind in _EXCLUDE_ORDER:
            category = self._categories.get(kind)
            if category is not None and category.matches_path(segments):
                return _EXCLUDE_REASONS[kind]
        return None

    def rejects_unconditionally(self, segments: PathSegments) -> bool:
        """Whether a path and everything beneath it is rejected."""
        rejection = self.unconditional_rejection(segments)
        return rejection is not None and rejection.is_unconditional

    def decide_path(self, segments: PathSegments) -> Verdict | None:
        """Decide a bare path without item metadata.

        Args:
            segments: Relative path segments.

        Returns:
            The verdict decide() would give any item at this path, or
            None when a time-based include makes it depend on the item.
        """
        if any(kind.is_time_based for kind in self._categories):
            return None

        rejection = self.unconditional_rejection(segments)
        if rejection is not None:
            return Verdict.reject(rejection)

        for kind in _INCLUDE_ORDER:
            category = self._categories.get(kind)
            if category is not None and not category.matches_path(segments):
                return Verdict.reject(RejectReason.NOT_INCLUDED)
        return Verdict.accept()

    def decide(self, item: EnumeratedItem) -> Verdict:
        """Decide whether an item is forwarded into the job.

        Args:
            item: Enumerated item to evaluate.

        Returns:
            Verdict for the item. Rejected folders may still be
            materialized later as ancestors of accepted items.
        """
        rejection = self.unconditional_rejection(item.relative_path)
        if rejection is not None:
            return Verdict.reject(rejection)

        for kind in _INCLUDE_ORDER:
            category = self._categories.get(kind)
            if category is not None and not category.matches(item):
                return Verdict.reject(RejectReason.NOT_INCLUDED)

        return Verdict.accept()

    def __repr__(self) -> str:
        kinds = ", ".join(k.value for k in self._categories)
        return (
            f"FilterSet(operation={self._operation.value}, "
            f"recursive={self._recursive}, categories=[{kinds}])"
        )
