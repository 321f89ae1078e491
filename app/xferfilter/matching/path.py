"""Whole-segment, root-anchored path matching.

A path pattern names an item relative to the source root. It matches
that item and everything nested beneath it, comparing whole segments
only: ``sub/subsub`` matches ``sub/subsub/filea`` but never
``sub/subsubsub``, ``othersub/sub/subsub/filey`` or
``sub/somethingelse/subsub/filey``.
"""

from dataclasses import dataclass

from xferfilter.core.errors import PatternSyntaxError
from xferfilter.models.item import PathSegments, join_path, split_path

# Delimiter between entries of a pattern list option
LIST_DELIMITER = ";"


def split_pattern_list(value: str | None) -> list[str]:
    """Split a semicolon-delimited option into stripped, non-empty entries."""
    if not value:
        return []
    return [entry.strip() for entry in value.split(LIST_DELIMITER) if entry.strip()]


def path_matches(pattern: PathSegments, candidate: PathSegments) -> bool:
    """Check whether a path pattern matches a candidate path.

    True iff ``pattern`` is a prefix of ``candidate`` compared segment
    by segment from index 0. An empty pattern (the root) matches
    everything.

    Args:
        pattern: Pattern segments.
        candidate: Candidate item segments.

    Returns:
        True if the candidate is the named item or nested beneath it.
    """
    if len(pattern) > len(candidate):
        return False
    return all(p == c for p, c in zip(pattern, candidate, strict=False))


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A parsed path pattern.

    Attributes:
        segments: Pattern segments relative to the source root.
    """

    segments: PathSegments

    @classmethod
    def parse(cls, raw: str, *, option: str | None = None) -> "PathPattern":
        """Parse a single path pattern entry.

        Args:
            raw: Pattern text, e.g. ``"sub/subsub"``.
            option: Option name used in error messages.

        Returns:
            Parsed PathPattern.

        Raises:
            PatternSyntaxError: If the entry is absolute, empty, or
                contains ``..`` segments.
        """
        text = raw.strip()
        if text.startswith(("/", "\\")):
            raise PatternSyntaxError("path must be relative", pattern=raw, option=option)
        if "\x00" in text:
            raise PatternSyntaxError("path contains a NUL character", pattern=raw, option=option)
        segments = split_path(text)
        if not segments:
            raise PatternSyntaxError("path is empty", pattern=raw, option=option)
        if ".." in segments:
            raise PatternSyntaxError("path cannot contain '..'", pattern=raw, option=option)
        return cls(segments=segments)

    def matches(self, candidate: PathSegments) -> bool:
        return path_matches(self.segments, candidate)

    def __str__(self) -> str:
        return join_path(self.segments)


def parse_path_patterns(value: str | None, *, option: str | None = None) -> frozenset[PathPattern]:
    """Parse a semicolon-delimited list of path patterns.

    Args:
        value: Raw option value (None or empty means not configured).
        option: Option name used in error messages.

    Returns:
        Frozen set of parsed patterns (empty if not configured).

    Raises:
        PatternSyntaxError: If any entry is malformed.
    """
    return frozenset(PathPattern.parse(entry, option=option) for entry in split_pattern_list(value))
