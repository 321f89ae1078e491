"""Wildcard basename matching.

Glob patterns are matched against the final segment of an item's path,
at any depth. ``*`` is the only wildcard and matches any run of
characters, including none. Every other character is literal and the
match is anchored at both ends, so ``file8`` matches only ``file8`` and
``2020*`` does not match ``A2020log``.
"""

import re
from dataclasses import dataclass, field

from xferfilter.core.errors import PatternSyntaxError
from xferfilter.matching.path import split_pattern_list

WILDCARD = "*"


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a ``*``-only glob into an anchored regular expression.

    Consecutive wildcards collapse into one.
    """
    parts = [re.escape(chunk) for chunk in re.split(r"\*+", pattern)]
    return re.compile(".*".join(parts), re.DOTALL)


def glob_matches(pattern: str, basename: str) -> bool:
    """Check whether a glob pattern matches a basename.

    Args:
        pattern: Glob pattern, e.g. ``"*.txt"``.
        basename: Final path segment of the candidate.

    Returns:
        True if the whole basename matches.
    """
    if WILDCARD not in pattern:
        return pattern == basename
    return compile_glob(pattern).fullmatch(basename) is not None


@dataclass(frozen=True, slots=True)
class GlobPattern:
    """A parsed basename glob.

    Attributes:
        text: Original pattern text.
    """

    text: str
    _regex: re.Pattern[str] | None = field(default=None, compare=False, hash=False, repr=False)

    @classmethod
    def parse(cls, raw: str, *, option: str | None = None) -> "GlobPattern":
        """Parse and compile a single glob entry.

        Raises:
            PatternSyntaxError: If the entry is empty or contains a
                path separator or NUL character.
        """
        text = raw.strip()
        if not text:
            raise PatternSyntaxError("pattern is empty", pattern=raw, option=option)
        if "/" in text or "\\" in text:
            raise PatternSyntaxError(
                "pattern matches basenames and cannot contain a path separator",
                pattern=raw,
                option=option,
            )
        if "\x00" in text:
            raise PatternSyntaxError("pattern contains a NUL character", pattern=raw, option=option)
        regex = compile_glob(text) if WILDCARD in text else None
        return cls(text=text, _regex=regex)

    @property
    def is_literal(self) -> bool:
        return self._regex is None

    def matches(self, basename: str) -> bool:
        if self._regex is None:
            return self.text == basename
        return self._regex.fullmatch(basename) is not None

    def __str__(self) -> str:
        return self.text


def parse_glob_patterns(value: str | None, *, option: str | None = None) -> frozenset[GlobPattern]:
    """Parse a semicolon-delimited list of glob patterns.

    Args:
        value: Raw option value (None or empty means not configured).
        option: Option name used in error messages.

    Returns:
        Frozen set of parsed patterns (empty if not configured).

    Raises:
        PatternSyntaxError: If any entry is malformed.
    """
    return frozenset(GlobPattern.parse(entry, option=option) for entry in split_pattern_list(value))
