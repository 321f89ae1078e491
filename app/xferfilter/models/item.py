"""Path model for items discovered during source enumeration.

This module defines the immutable representation of a single listed
item (file or folder) as an ordered sequence of path segments, together
with the helpers used to split and normalize relative path strings.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime

# Separator used when joining segments back into a display path
PATH_SEPARATOR = "/"

PathSegments = tuple[str, ...]


def split_path(path: str) -> PathSegments:
    """Split a relative path string into its segments.

    Both ``/`` and ``\\`` are accepted as separators. Empty segments
    (from leading, trailing, or repeated separators) and ``.`` segments
    are dropped, so ``"./a//b/"`` becomes ``("a", "b")``.

    Args:
        path: Relative path string (may be empty for the root).

    Returns:
        Tuple of path segments, empty for the root.
    """
    normalized = path.replace("\\", PATH_SEPARATOR)
    return tuple(seg for seg in normalized.split(PATH_SEPARATOR) if seg and seg != ".")


def join_path(segments: PathSegments) -> str:
    """Join path segments into a relative path string ("" for the root)."""
    return PATH_SEPARATOR.join(segments)


def is_within(path: PathSegments, base: PathSegments) -> bool:
    """Check whether ``path`` equals ``base`` or lies beneath it."""
    return len(path) >= len(base) and path[: len(base)] == base


def ensure_aware(value: datetime) -> datetime:
    """Return ``value`` as a timezone-aware datetime, assuming UTC when naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass(frozen=True, slots=True)
class EnumeratedItem:
    """A single item produced by a source lister.

    Attributes:
        relative_path: Path segments relative to the source root
            (empty tuple for the root itself).
        is_folder: True for folders, False for files.
        last_modified: Last modification time (timezone-aware).
        size: Size in bytes. Carried through, not used for filtering.
    """

    relative_path: PathSegments
    is_folder: bool
    last_modified: datetime
    size: int = 0

    def __post_init__(self) -> None:
        """Validate and normalize item data after initialization."""
        if not isinstance(self.relative_path, tuple):
            object.__setattr__(self, "relative_path", tuple(self.relative_path))
        if any(not seg or PATH_SEPARATOR in seg for seg in self.relative_path):
            msg = f"Invalid path segments: {self.relative_path!r}"
            raise ValueError(msg)
        if not self.relative_path and not self.is_folder:
            msg = "The root item must be a folder"
            raise ValueError(msg)
        if self.size < 0:
            msg = f"Size cannot be negative, got {self.size}"
            raise ValueError(msg)
        object.__setattr__(self, "last_modified", ensure_aware(self.last_modified))

    @classmethod
    def from_path(
        cls,
        path: str,
        *,
        is_folder: bool = False,
        last_modified: datetime | None = None,
        size: int = 0,
    ) -> "EnumeratedItem":
        """Build an item from a relative path string.

        Args:
            path: Relative path, e.g. ``"sub/subsub/filea"``.
            is_folder: Whether the item is a folder.
            last_modified: Modification time; defaults to now (UTC).
            size: Size in bytes.

        Returns:
            New EnumeratedItem.
        """
        return cls(
            relative_path=split_path(path),
            is_folder=is_folder,
            last_modified=last_modified or datetime.now(UTC),
            size=size,
        )

    @property
    def name(self) -> str:
        """Basename of the item ("" for the root)."""
        return self.relative_path[-1] if self.relative_path else ""

    @property
    def path(self) -> str:
        """Relative path joined with ``/``."""
        return join_path(self.relative_path)

    @property
    def depth(self) -> int:
        """Number of segments below the root (0 for the root)."""
        return len(self.relative_path)

    @property
    def is_root(self) -> bool:
        return not self.relative_path

    def ancestors(self) -> Iterator[PathSegments]:
        """Yield proper ancestor folder paths, top-down, excluding the root."""
        for end in range(1, len(self.relative_path)):
            yield self.relative_path[:end]
