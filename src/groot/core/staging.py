"""Staging area management for Groot.

The staging area (index) tracks which files go into the next commit. It is
an ordered list, not a map: adding the same path twice stages two entries,
and the order of entries is carried verbatim into the commit.

Index format (JSON, see groot.storage.serialization):
{
    "version": 1,
    "entries": [
        {"path": "a.txt", "hash": "sha256..."},
        ...
    ]
}
"""

import logging
from pathlib import Path
from typing import List, Optional

from groot.constants import GROOT_DIR
from groot.errors import SerializationError, StagingError
from groot.models import StagingEntry
from groot.storage import BaseObjectStore, decode_index, encode_index
from groot.utils.fs import atomic_write, read_bytes

logger = logging.getLogger(__name__)


class StagingIndex:
    """Durable staging index backed by a single file.

    Every operation reloads the index from disk and every mutation persists
    it immediately, so ``add`` and ``commit`` can run as separate processes.
    Concurrent writers are not coordinated: the last write wins.

    Attributes:
        index_path: Path to the index file (.groot/index)
    """

    def __init__(self, index_path: Path) -> None:
        self.index_path = Path(index_path)

    def stage(self, path: str, content_id: str) -> StagingEntry:
        """Append an entry to the index. Duplicate paths are never rejected."""
        entries = self._load()
        entry = StagingEntry(path=path, content_id=content_id)
        entries.append(entry)
        self._save(entries)
        logger.debug("Staged %s -> %s", path, content_id[:8])
        return entry

    def current_entries(self) -> List[StagingEntry]:
        """Get all staged entries in the order they were staged."""
        return self._load()

    def clear(self) -> None:
        """Reset the index to empty."""
        self._save([])
        logger.debug("Cleared staging index")

    def is_empty(self) -> bool:
        """Check if staging area is empty."""
        return not self._load()

    def _load(self) -> List[StagingEntry]:
        """Load index from disk; a missing file reads as empty."""
        if not self.index_path.exists():
            return []

        data = read_bytes(self.index_path)
        if not data.strip():
            return []

        try:
            return decode_index(data)
        except SerializationError as e:
            raise StagingError(f"Corrupted index file: {e}") from e

    def _save(self, entries: List[StagingEntry]) -> None:
        atomic_write(self.index_path, encode_index(entries), prefix=".tmp_index_")


class MemoryStagingIndex(StagingIndex):
    """Staging index kept in process memory."""

    def __init__(self) -> None:
        self.index_path = None
        self._entries: List[StagingEntry] = []

    def _load(self) -> List[StagingEntry]:
        return list(self._entries)

    def _save(self, entries: List[StagingEntry]) -> None:
        self._entries = list(entries)


def stage_file(
    objects: BaseObjectStore,
    index: StagingIndex,
    workspace_root: Path,
    path: Path,
) -> StagingEntry:
    """Store a file's content and stage it.

    Args:
        objects: Object store receiving the file content
        index: Staging index to append to
        workspace_root: Root directory of the workspace
        path: File to add (absolute or relative to the current directory)

    Returns:
        The staged entry

    Raises:
        StagingError: If the path is missing, a directory, or inside .groot/
        RepositoryIOError: If the file cannot be read
    """
    path = Path(path)
    abs_path = path.resolve()

    if not abs_path.exists():
        raise StagingError(f"{path}: file not found")
    if abs_path.is_dir():
        raise StagingError(f"{path}: is a directory (only files can be added)")

    rel_path = _relative_to(abs_path, Path(workspace_root).resolve())
    if rel_path is not None and rel_path.parts[:1] == (GROOT_DIR,):
        raise StagingError(f"{path}: cannot add files inside {GROOT_DIR}/")

    staged_path = rel_path.as_posix() if rel_path is not None else path.as_posix()

    content = read_bytes(abs_path)
    content_id = objects.put(content)
    return index.stage(staged_path, content_id)


def _relative_to(path: Path, root: Path) -> Optional[Path]:
    try:
        return path.relative_to(root)
    except ValueError:
        return None
