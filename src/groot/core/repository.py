"""Repository handle and bootstrap.

A Repository bundles the paths and component instances of one repository
and is passed explicitly to every operation; nothing in Groot reads
process-wide state.

Layout::

    <root>/.groot/
        objects/<id[:2]>/<id[2:]>   file content and commit records
        HEAD                        id of the current tip (empty at first)
        index                       staging index (JSON)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from groot.constants import GROOT_DIR, HEAD_FILE, INDEX_FILE, OBJECTS_DIR
from groot.core.commits import CommitChain
from groot.core.head import HeadPointer, MemoryHeadPointer
from groot.core.history import HistoryEngine
from groot.core.staging import MemoryStagingIndex, StagingIndex
from groot.errors import AlreadyInitializedError, NotARepositoryError, RepositoryIOError
from groot.storage import BaseObjectStore, MemoryObjectStore, ObjectStore
from groot.utils.fs import atomic_write

logger = logging.getLogger(__name__)


@dataclass
class Repository:
    """Handle on one repository.

    Attributes:
        root: Workspace root (the directory containing .groot/)
        groot_dir: Path to .groot/, or None for an in-memory repository
        objects: Object store
        index: Staging index
        head: Head pointer
    """

    root: Path
    groot_dir: Optional[Path]
    objects: BaseObjectStore
    index: StagingIndex
    head: HeadPointer

    @property
    def commits(self) -> CommitChain:
        return CommitChain(self.objects, self.index, self.head)

    @property
    def history(self) -> HistoryEngine:
        return HistoryEngine(self.commits)

    @classmethod
    def init(cls, root: Path) -> "Repository":
        """Create the repository layout under ``root``.

        Raises:
            AlreadyInitializedError: If the layout already exists
            RepositoryIOError: If the layout cannot be created
        """
        root = Path(root)
        groot_dir = root / GROOT_DIR

        if (groot_dir / HEAD_FILE).exists():
            raise AlreadyInitializedError(
                f"Groot repository already exists in {root}"
            )

        try:
            (groot_dir / OBJECTS_DIR).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RepositoryIOError(f"Failed to create {groot_dir}: {e}") from e

        repo = cls._from_dir(root, groot_dir)
        if not (groot_dir / INDEX_FILE).exists():
            repo.index.clear()
        atomic_write(groot_dir / HEAD_FILE, b"", prefix=".tmp_head_")

        logger.debug("Initialized repository at %s", groot_dir)
        return repo

    @classmethod
    def open(cls, root: Path) -> "Repository":
        """Open an existing repository.

        Raises:
            NotARepositoryError: If ``root`` has no .groot/ layout
        """
        root = Path(root)
        groot_dir = root / GROOT_DIR

        if not groot_dir.is_dir() or not (groot_dir / OBJECTS_DIR).is_dir():
            raise NotARepositoryError(
                f"Not a Groot repository (no {GROOT_DIR}/ found in {root})"
            )

        return cls._from_dir(root, groot_dir)

    @classmethod
    def in_memory(cls, root: Optional[Path] = None) -> "Repository":
        """Create a repository that keeps all state in process memory."""
        return cls(
            root=Path(root) if root is not None else Path.cwd(),
            groot_dir=None,
            objects=MemoryObjectStore(),
            index=MemoryStagingIndex(),
            head=MemoryHeadPointer(),
        )

    @classmethod
    def _from_dir(cls, root: Path, groot_dir: Path) -> "Repository":
        return cls(
            root=root,
            groot_dir=groot_dir,
            objects=ObjectStore(groot_dir),
            index=StagingIndex(groot_dir / INDEX_FILE),
            head=HeadPointer(groot_dir / HEAD_FILE),
        )
