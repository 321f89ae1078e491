"""Pattern matchers.

This module provides the two matcher families used by filter
categories: root-anchored whole-segment path matching and
depth-independent basename globbing.
"""

from xferfilter.matching.glob import GlobPattern, glob_matches, parse_glob_patterns
from xferfilter.matching.path import (
    LIST_DELIMITER,
    PathPattern,
    parse_path_patterns,
    path_matches,
    split_pattern_list,
)

__all__ = [
    "LIST_DELIMITER",
    "GlobPattern",
    "PathPattern",
    "glob_matches",
    "parse_glob_patterns",
    "parse_path_patterns",
    "path_matches",
    "split_pattern_list",
]
