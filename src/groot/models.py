"""Record types shared by the staging, commit and history layers."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class StagingEntry:
    """A staged file: the path as added and the id of its content."""

    path: str
    content_id: str


@dataclass(frozen=True)
class Commit:
    """An immutable snapshot of the staging index.

    Attributes:
        id: Object id of the commit's canonical serialized form
        timestamp: ISO-8601 UTC timestamp of creation
        message: Commit message
        files: Staged entries in the order they were added
        parent: Id of the previous commit, or None for the root commit
    """

    id: str
    timestamp: str
    message: str
    files: Tuple[StagingEntry, ...]
    parent: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def find_file(self, path: str) -> Optional[StagingEntry]:
        """Return the first entry staged under ``path``, if any."""
        for entry in self.files:
            if entry.path == path:
                return entry
        return None
