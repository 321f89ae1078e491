"""Local-disk lister.

Walks a local directory and yields EnumeratedItem instances relative to
it, so the filter engine can be driven without a storage backend.
"""

import logging
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

from xferfilter.models.item import EnumeratedItem

logger = logging.getLogger(__name__)


class LocalLister:
    """Lists a local directory tree.

    Args:
        root: Source root directory.
        recursive: If False, only the root and its direct children are
            listed.
        include_root: Whether to yield the root folder item itself.
    """

    def __init__(self, root: Path, *, recursive: bool = True, include_root: bool = True) -> None:
        self._root = root
        self._recursive = recursive
        self._include_root = include_root

    def is_available(self) -> bool:
        """Check whether the source root exists and is a directory."""
        return self._root.is_dir()

    def list(self) -> Iterator[EnumeratedItem]:
        """Yield the root (optionally) and every entry below it.

        Non-existent roots yield nothing. Unreadable directories are
        skipped with a warning.

        Yields:
            EnumeratedItem for each listed entry, parents before children.
        """
        if not self.is_available():
            logger.warning("Source root is not a directory: %s", self._root)
            return

        if self._include_root:
            yield EnumeratedItem(
                relative_path=(),
                is_folder=True,
                last_modified=self._get_mtime(self._root),
            )
        yield from self._list_directory(self._root, ())

    def _list_directory(self, directory: Path, prefix: tuple[str, ...]) -> Iterator[EnumeratedItem]:
        try:
            entries = sorted(directory.iterdir())
        except PermissionError:
            logger.warning("Permission denied listing directory: %s", directory)
            return

        for entry in entries:
            try:
                is_folder = entry.is_dir() and not entry.is_symlink()
                size = 0 if is_folder else entry.lstat().st_size
            except OSError:
                logger.warning("Cannot stat: %s", entry)
                continue

            segments = (*prefix, entry.name)
            yield EnumeratedItem(
                relative_path=segments,
                is_folder=is_folder,
                last_modified=self._get_mtime(entry),
                size=size,
            )
            if is_folder and self._recursive:
                yield from self._list_directory(entry, segments)

    @staticmethod
    def _get_mtime(path: Path) -> datetime:
        """Get last modification time as an aware UTC datetime (epoch on error)."""
        try:
            return datetime.fromtimestamp(path.lstat().st_mtime, tz=UTC)
        except OSError:
            return datetime.fromtimestamp(0, tz=UTC)
