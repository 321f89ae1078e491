"""JSON-lines listing reader.

Reads a listing exported by a storage backend, one JSON object per
line::

    {"path": "sub/subsub/filea", "is_folder": false,
     "last_modified": "2024-01-15T10:00:00Z", "size": 1024}

Folders may also be marked with a trailing ``/`` on the path.
"""

import json
import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from xferfilter.models.item import EnumeratedItem

logger = logging.getLogger(__name__)


class ListingError(Exception):
    """Raised when a listing file cannot be read or parsed."""


def _parse_entry(data: Any, line_no: int) -> EnumeratedItem:
    if not isinstance(data, dict) or "path" not in data:
        msg = f"line {line_no}: expected an object with a 'path' key"
        raise ListingError(msg)

    raw_path = str(data["path"])
    is_folder = bool(data.get("is_folder", raw_path.endswith("/")))
    raw_mtime = data.get("last_modified")
    try:
        last_modified = (
            datetime.fromisoformat(raw_mtime) if raw_mtime else datetime.fromtimestamp(0, tz=UTC)
        )
        return EnumeratedItem.from_path(
            raw_path,
            is_folder=is_folder,
            last_modified=last_modified,
            size=int(data.get("size", 0)),
        )
    except (TypeError, ValueError) as e:
        msg = f"line {line_no}: {e}"
        raise ListingError(msg) from e


def read_listing(path: Path) -> Iterator[EnumeratedItem]:
    """Yield items from a JSON-lines listing file.

    Blank lines are skipped.

    Args:
        path: Listing file.

    Yields:
        EnumeratedItem per line, in file order.

    Raises:
        ListingError: If the file cannot be read or a line is invalid.
    """
    try:
        with open(path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    msg = f"line {line_no}: invalid JSON: {e}"
                    raise ListingError(msg) from e
                yield _parse_entry(data, line_no)
    except OSError as e:
        raise ListingError(f"Failed to read listing {path}: {e}") from e
