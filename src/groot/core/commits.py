"""Commit chain: sealing staged files into immutable commits.

A commit is stored as an object in the same store as file content; its id
is the object id of its canonical record, which makes commits tamper-evident.
Commits form a singly linked list through their ``parent`` ids.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from groot.constants import HEAD_REF, MIN_PREFIX_LENGTH
from groot.core.head import HeadPointer
from groot.core.staging import StagingIndex
from groot.errors import (
    CommitNotFoundError,
    ObjectCorruptedError,
    ObjectNotFoundError,
    SerializationError,
)
from groot.models import Commit
from groot.storage import BaseObjectStore, decode_commit, encode_commit

logger = logging.getLogger(__name__)


class CommitChain:
    """Creates, loads and resolves commits.

    Attributes:
        objects: Object store holding file content and commit records
        index: Staging index consumed by ``commit``
        head: Pointer to the current tip
    """

    def __init__(
        self,
        objects: BaseObjectStore,
        index: StagingIndex,
        head: HeadPointer,
    ) -> None:
        self.objects = objects
        self.index = index
        self.head = head

    def commit(self, message: str) -> Commit:
        """Seal the staging index into a new commit.

        Empty commits are allowed. The commit object is written before HEAD
        moves and before the index is cleared: an interruption can leave
        stale staging data but never damages an existing commit.

        Args:
            message: Commit message

        Returns:
            The new Commit
        """
        files = tuple(self.index.current_entries())
        parent = self.current_head()
        timestamp = datetime.now(timezone.utc).isoformat()

        record = encode_commit(timestamp, message, files, parent)
        commit_id = self.objects.put(record)

        self.head.write(commit_id)
        self.index.clear()

        logger.debug(
            "Created commit %s with %d file(s), parent %s",
            commit_id[:8],
            len(files),
            parent[:8] if parent else "(root)",
        )
        return Commit(
            id=commit_id,
            timestamp=timestamp,
            message=message,
            files=files,
            parent=parent,
        )

    def current_head(self) -> Optional[str]:
        """Return the id of the most recent commit, or None if there is none."""
        return self.head.read()

    def load(self, commit_id: str) -> Commit:
        """Load a commit by its full id.

        Raises:
            CommitNotFoundError: If the object is absent or is not a commit
        """
        try:
            data = self.objects.get(commit_id)
        except ObjectNotFoundError as e:
            raise CommitNotFoundError(f"Commit not found: {commit_id}") from e
        except ObjectCorruptedError as e:
            raise CommitNotFoundError(f"Commit object corrupted: {commit_id}") from e

        try:
            return decode_commit(commit_id, data)
        except SerializationError as e:
            raise CommitNotFoundError(f"Not a commit: {commit_id} ({e})") from e

    def resolve(self, ref: str) -> str:
        """Resolve ``HEAD``, a full id or a unique id prefix to a full id.

        Prefixes only match objects that decode as commits.

        Raises:
            CommitNotFoundError: If nothing or more than one object matches
        """
        ref = ref.strip()

        if ref == HEAD_REF:
            head = self.current_head()
            if head is None:
                raise CommitNotFoundError("No commits yet")
            return head

        ref = ref.lower()
        if self.objects.exists(ref):
            return ref

        if len(ref) < MIN_PREFIX_LENGTH:
            raise CommitNotFoundError(f"Commit not found: {ref}")

        matches = [m for m in self.objects.match_prefix(ref) if self._is_commit(m)]
        if not matches:
            raise CommitNotFoundError(f"Commit not found: {ref}")
        if len(matches) > 1:
            raise CommitNotFoundError(
                f"Ambiguous commit id {ref}: matches {len(matches)} commits"
            )
        return matches[0]

    def _is_commit(self, object_id: str) -> bool:
        try:
            self.load(object_id)
        except CommitNotFoundError:
            return False
        return True
