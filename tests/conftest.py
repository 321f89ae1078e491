"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from xferfilter.models.item import EnumeratedItem

ItemFactory = Callable[..., list[EnumeratedItem]]

BASE_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


def build_items(*paths: str, last_modified: datetime = BASE_TIME) -> list[EnumeratedItem]:
    """Build items from path strings; a trailing "/" marks a folder, "" is the root."""
    items: list[EnumeratedItem] = []
    for path in paths:
        is_folder = path == "" or path.endswith("/")
        items.append(
            EnumeratedItem.from_path(
                path,
                is_folder=is_folder,
                last_modified=last_modified,
                size=0 if is_folder else 1024,
            )
        )
    return items


@pytest.fixture
def make_items() -> ItemFactory:
    """Factory building EnumeratedItem lists from path strings."""
    return build_items


@pytest.fixture
def include_path_tree() -> list[EnumeratedItem]:
    """Source tree used by the include-path scenarios."""
    return build_items(
        "",
        "filea",
        "fileb",
        "filec",
        "wantedfile",
        "wantedfileabc",
        "sub/",
        "sub/filea",
        "sub/fileb",
        "sub/filec",
        "sub/subsub/",
        "sub/subsub/filea",
        "sub/subsub/fileb",
        "sub/subsub/filec",
        "sub/subsubsub/",
        "sub/subsubsub/filez",
        "sub/somethingelse/",
        "sub/somethingelse/subsub/",
        "sub/somethingelse/subsub/filey",
        "othersub/",
        "othersub/wantedfile",
        "othersub/sub/",
        "othersub/sub/subsub/",
        "othersub/sub/subsub/filey",
    )
