"""Filter options: user-facing configuration and filter set construction.

Options arrive as free-form strings (semicolon-delimited pattern lists,
ISO-8601 timestamps) from the CLI or a TOML file. They are parsed
exactly once, in build_filter_set(), so malformed values are reported
before enumeration starts and never re-parsed per item.

TOML layout::

    [filters]
    operation = "copy"
    recursive = true
    include_pattern = "*.txt;2020*"
    exclude_path = "subL1/subL2"
    include_after = 2024-01-15T10:00:00Z
"""

import logging
import os
import tomllib
from datetime import datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from xferfilter.core.errors import (
    FilterConfigError,
    FilterOptionsNotFoundError,
    FilterOptionsParseError,
    TimestampParseError,
)
from xferfilter.core.paths import get_filter_options_path
from xferfilter.filters.categories import FilterCategory, FilterKind, OperationKind
from xferfilter.filters.filter_set import FilterSet
from xferfilter.matching.glob import parse_glob_patterns
from xferfilter.matching.path import PathPattern, parse_path_patterns
from xferfilter.models.item import ensure_aware, split_path

logger = logging.getLogger(__name__)

# Name of the TOML table holding the options
_TOML_TABLE = "filters"


class FilterOptions(BaseModel):
    """Raw filter configuration for one job.

    Attributes:
        operation: Kind of job (copy, sync or remove).
        recursive: Whether to descend below the top level.
        include_path: Semicolon-delimited root-anchored paths to include.
        exclude_path: Semicolon-delimited root-anchored paths to exclude.
        include_pattern: Semicolon-delimited basename globs to include.
        exclude_pattern: Semicolon-delimited basename globs to exclude.
        include_after: Only copy items modified strictly after this time.
        include_before: Only copy items modified strictly before this time.
        relative_source_path: Remove-only scope ("" for the whole source).
    """

    model_config = ConfigDict(extra="forbid")

    operation: Annotated[OperationKind, Field(description="Job kind")] = OperationKind.COPY
    recursive: Annotated[bool, Field(description="Descend into sub-folders")] = False
    include_path: Annotated[str | None, Field(description="Paths to include")] = None
    exclude_path: Annotated[str | None, Field(description="Paths to exclude")] = None
    include_pattern: Annotated[str | None, Field(description="Basename globs to include")] = None
    exclude_pattern: Annotated[str | None, Field(description="Basename globs to exclude")] = None
    include_after: Annotated[str | None, Field(description="ISO-8601 lower time bound")] = None
    include_before: Annotated[str | None, Field(description="ISO-8601 upper time bound")] = None
    relative_source_path: Annotated[
        str | None,
        Field(description="Remove scope relative to the source root"),
    ] = None

    @field_validator("include_after", "include_before", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: object) -> object:
        """Accept datetime values (e.g. native TOML datetimes) as ISO strings."""
        if isinstance(v, datetime):
            return ensure_aware(v).isoformat()
        return v


def parse_timestamp(value: str, *, option: str) -> datetime:
    """Parse an ISO-8601 / RFC-3339 timestamp.

    Naive timestamps are interpreted as UTC.

    Args:
        value: Timestamp text, e.g. ``"2024-01-15T10:00:00Z"``.
        option: Option name used in error messages.

    Returns:
        Timezone-aware datetime.

    Raises:
        TimestampParseError: If the value is not a valid timestamp.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as e:
        msg = f"{option}: invalid timestamp {value!r} (expected ISO-8601, e.g. 2024-01-15T10:00:00Z)"
        raise TimestampParseError(msg) from e
    return ensure_aware(parsed)


def _parse_scope(value: str) -> tuple[str, ...]:
    # "", "/", "." and "./" all name the source root
    if not split_path(value.strip()):
        return ()
    return PathPattern.parse(value, option="relative_source_path").segments


def build_filter_set(options: FilterOptions) -> FilterSet:
    """Parse filter options into a read-only FilterSet.

    Args:
        options: Raw options.

    Returns:
        FilterSet ready for evaluation.

    Raises:
        PatternSyntaxError: If any path or glob entry is malformed.
        TimestampParseError: If a time bound cannot be parsed.
        FilterConfigError: If options are inconsistent with the operation.
    """
    categories: list[FilterCategory] = [
        FilterCategory(
            FilterKind.INCLUDE_PATH,
            patterns=parse_path_patterns(options.include_path, option="include_path"),
        ),
        FilterCategory(
            FilterKind.EXCLUDE_PATH,
            patterns=parse_path_patterns(options.exclude_path, option="exclude_path"),
        ),
        FilterCategory(
            FilterKind.INCLUDE_PATTERN,
            patterns=parse_glob_patterns(options.include_pattern, option="include_pattern"),
        ),
        FilterCategory(
            FilterKind.EXCLUDE_PATTERN,
            patterns=parse_glob_patterns(options.exclude_pattern, option="exclude_pattern"),
        ),
    ]

    if options.include_after:
        categories.append(
            FilterCategory(
                FilterKind.INCLUDE_AFTER,
                threshold=parse_timestamp(options.include_after, option="include_after"),
            )
        )
    if options.include_before:
        categories.append(
            FilterCategory(
                FilterKind.INCLUDE_BEFORE,
                threshold=parse_timestamp(options.include_before, option="include_before"),
            )
        )
    if options.relative_source_path is not None:
        categories.append(
            FilterCategory(
                FilterKind.SCOPE_RESTRICTION,
                scope=_parse_scope(options.relative_source_path),
            )
        )

    return FilterSet(categories, recursive=options.recursive, operation=options.operation)


def load_filter_options(path: Path | None = None) -> FilterOptions:
    """Load and validate filter options from a TOML file.

    The options live in a ``[filters]`` table; a file without that
    table is read as a flat option set.

    Args:
        path: Path to the options file. If None, uses the default path.

    Returns:
        Validated FilterOptions object.

    Raises:
        FilterOptionsNotFoundError: If the file doesn't exist.
        FilterOptionsParseError: If the TOML syntax is invalid.
        FilterConfigError: If the content doesn't match the schema.
    """
    options_path = path or get_filter_options_path()

    if not options_path.exists():
        raise FilterOptionsNotFoundError(f"Filter options not found: {options_path}")

    try:
        with open(options_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise FilterOptionsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise FilterConfigError(f"Failed to read filter options: {e}") from e

    table: Any = data.get(_TOML_TABLE, data)
    if not isinstance(table, dict):
        raise FilterConfigError(f"'{_TOML_TABLE}' must be a table in {options_path}")

    try:
        options = FilterOptions.model_validate(table)
    except ValidationError as e:
        raise FilterConfigError(f"Invalid filter options: {e}") from e

    logger.debug("Loaded filter options from %s", options_path)
    return options


def save_filter_options(options: FilterOptions, path: Path | None = None) -> Path:
    """Save filter options to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        options: The FilterOptions to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the options were saved.

    Raises:
        FilterConfigError: If the file cannot be written.
    """
    options_path = path or get_filter_options_path()
    options_path.parent.mkdir(parents=True, exist_ok=True)

    data = {_TOML_TABLE: _options_to_dict(options)}

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=options_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(options_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise FilterConfigError(f"Failed to write filter options: {e}") from e

    return options_path


def _options_to_dict(options: FilterOptions) -> dict[str, Any]:
    """Convert FilterOptions to a TOML-ready dict, leaving out unset values."""
    result: dict[str, Any] = {
        "operation": options.operation.value,
        "recursive": options.recursive,
    }
    for name, value in options.model_dump(exclude={"operation", "recursive"}).items():
        if value is not None:
            result[name] = value
    return result
