"""Tests for filter categories."""

from datetime import UTC, datetime, timedelta

import pytest
from xferfilter.filters.categories import FilterCategory, FilterKind, OperationKind
from xferfilter.matching.glob import parse_glob_patterns
from xferfilter.matching.path import parse_path_patterns
from xferfilter.models.item import EnumeratedItem

THRESHOLD = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


def _file(path: str, last_modified: datetime = THRESHOLD) -> EnumeratedItem:
    return EnumeratedItem.from_path(path, last_modified=last_modified)


class TestFilterKind:
    """Tests for FilterKind enum."""

    def test_kind_values(self) -> None:
        assert FilterKind.INCLUDE_PATH == "include_path"
        assert FilterKind.SCOPE_RESTRICTION == "scope_restriction"
        assert len(FilterKind) == 7

    def test_kind_groups(self) -> None:
        excludes = {k for k in FilterKind if k.is_exclude}
        includes = {k for k in FilterKind if k.is_include}
        assert excludes == {FilterKind.EXCLUDE_PATH, FilterKind.EXCLUDE_PATTERN}
        assert FilterKind.SCOPE_RESTRICTION not in includes | excludes
        assert len(includes) == 4

    def test_operation_values(self) -> None:
        assert {o.value for o in OperationKind} == {"copy", "sync", "remove"}


class TestFilterCategoryValidation:
    """Tests for field/kind consistency."""

    def test_time_kind_requires_threshold(self) -> None:
        with pytest.raises(ValueError, match="threshold"):
            FilterCategory(FilterKind.INCLUDE_AFTER)

    def test_scope_requires_scope(self) -> None:
        with pytest.raises(ValueError, match="scope"):
            FilterCategory(FilterKind.SCOPE_RESTRICTION)

    def test_pattern_kind_rejects_threshold(self) -> None:
        with pytest.raises(ValueError, match="patterns only"):
            FilterCategory(FilterKind.INCLUDE_PATTERN, threshold=THRESHOLD)


class TestFilterCategoryMatching:
    """Tests for FilterCategory.matches."""

    def test_empty_category_always_matches(self) -> None:
        category = FilterCategory(FilterKind.EXCLUDE_PATH)
        assert not category.is_configured
        assert category.matches(_file("anything"))

    def test_path_category(self) -> None:
        category = FilterCategory(
            FilterKind.INCLUDE_PATH,
            patterns=parse_path_patterns("sub/subsub;wantedfile"),
        )
        assert category.matches(_file("sub/subsub/filea"))
        assert category.matches(_file("wantedfile"))
        assert not category.matches(_file("wantedfileabc"))
        assert not category.matches(_file("othersub/wantedfile"))

    def test_pattern_category_uses_basename_at_any_depth(self) -> None:
        category = FilterCategory(
            FilterKind.EXCLUDE_PATTERN,
            patterns=parse_glob_patterns("*.log"),
        )
        assert category.matches(_file("A2020.log"))
        assert category.matches(_file("subdir/deeper/A2020.log"))
        assert not category.matches(_file("logs.d/sample.txt"))

    def test_include_after_is_strict(self) -> None:
        category = FilterCategory(FilterKind.INCLUDE_AFTER, threshold=THRESHOLD)
        assert category.matches(_file("new", THRESHOLD + timedelta(seconds=1)))
        assert not category.matches(_file("same", THRESHOLD))
        assert not category.matches(_file("old", THRESHOLD - timedelta(days=1)))

    def test_include_before_is_strict(self) -> None:
        category = FilterCategory(FilterKind.INCLUDE_BEFORE, threshold=THRESHOLD)
        assert category.matches(_file("old", THRESHOLD - timedelta(seconds=1)))
        assert not category.matches(_file("same", THRESHOLD))

    def test_scope_category(self) -> None:
        category = FilterCategory(FilterKind.SCOPE_RESTRICTION, scope=("folder2",))
        assert category.matches(_file("folder2/file21.txt"))
        assert not category.matches(_file("folder1/file11.txt"))

    def test_time_kind_cannot_match_bare_path(self) -> None:
        category = FilterCategory(FilterKind.INCLUDE_AFTER, threshold=THRESHOLD)
        with pytest.raises(TypeError):
            category.matches_path(("a",))

    def test_describe(self) -> None:
        category = FilterCategory(
            FilterKind.INCLUDE_PATTERN,
            patterns=parse_glob_patterns("b*;a*"),
        )
        assert category.describe() == "a*;b*"
        assert FilterCategory(FilterKind.SCOPE_RESTRICTION, scope=()).describe() == ""
