"""Persisted pointer to the most recent commit."""

import logging
from pathlib import Path
from typing import Optional

from groot.utils.fs import atomic_write, read_bytes

logger = logging.getLogger(__name__)


class HeadPointer:
    """The HEAD file: the id of the current tip, or empty before any commit."""

    def __init__(self, head_path: Path) -> None:
        self.head_path = Path(head_path)

    def read(self) -> Optional[str]:
        """Return the current head id, or None for a fresh repository."""
        if not self.head_path.exists():
            return None
        content = read_bytes(self.head_path).decode("utf-8").strip()
        return content or None

    def write(self, commit_id: str) -> None:
        atomic_write(self.head_path, commit_id.encode("utf-8"), prefix=".tmp_head_")
        logger.debug("HEAD -> %s", commit_id[:8])


class MemoryHeadPointer(HeadPointer):
    """Head pointer kept in process memory."""

    def __init__(self, commit_id: Optional[str] = None) -> None:
        self.head_path = None
        self._commit_id = commit_id

    def read(self) -> Optional[str]:
        return self._commit_id

    def write(self, commit_id: str) -> None:
        self._commit_id = commit_id
