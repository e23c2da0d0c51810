"""Content-addressable object storage for Groot.

This module implements a Git-like object store using SHA-256 hashing for
content addressing. File contents and commit records share one address
space: both are stored as objects in .groot/objects/ and written exactly
once per unique content.
"""

import hashlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List

from groot.constants import HASH_ALGORITHM, HASH_LENGTH, OBJECTS_DIR
from groot.errors import (
    NotARepositoryError,
    ObjectCorruptedError,
    ObjectNotFoundError,
)
from groot.utils.fs import atomic_write, read_bytes

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdef")


def compute_hash(content: bytes) -> str:
    """Compute the object id of ``content``.

    The id depends only on the exact bytes, never on file names, paths or
    timestamps.

    Args:
        content: Binary data to hash

    Returns:
        Hex string of the digest (64 characters for SHA-256)
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(content)
    return hasher.hexdigest()


def is_valid_id(object_id: object) -> bool:
    """Check that ``object_id`` looks like a full lower-case hex digest."""
    return (
        isinstance(object_id, str)
        and len(object_id) == HASH_LENGTH
        and all(c in _HEX_DIGITS for c in object_id)
    )


def is_valid_prefix(prefix: object) -> bool:
    """Check that ``prefix`` is a non-empty lower-case hex string."""
    return (
        isinstance(prefix, str)
        and 0 < len(prefix) <= HASH_LENGTH
        and all(c in _HEX_DIGITS for c in prefix)
    )


class BaseObjectStore(ABC):
    """Contract shared by every object store implementation.

    ``put`` is idempotent: writing the same content twice returns the same
    id and stores a single object. Objects are never mutated or deleted.
    """

    def put(self, content: bytes) -> str:
        """Store ``content`` if absent and return its id."""
        object_id = compute_hash(content)
        if self.exists(object_id):
            logger.debug("Object %s already stored", object_id[:8])
            return object_id

        self._write(object_id, content)
        logger.debug("Stored object %s (%d bytes)", object_id[:8], len(content))
        return object_id

    def get(self, object_id: str, verify_hash: bool = True) -> bytes:
        """Return the content stored under ``object_id``.

        Args:
            object_id: Full object id
            verify_hash: Whether to recompute and verify the digest

        Raises:
            ObjectNotFoundError: If no object has that id
            ObjectCorruptedError: If hash verification fails
        """
        if not is_valid_id(object_id):
            raise ObjectNotFoundError(f"Object not found: {object_id!r}")

        content = self._read(object_id)

        if verify_hash:
            actual_hash = compute_hash(content)
            if actual_hash != object_id:
                logger.warning("Object %s fails hash verification", object_id)
                raise ObjectCorruptedError(
                    f"Object corrupted: expected {object_id}, got {actual_hash}"
                )

        return content

    @abstractmethod
    def exists(self, object_id: str) -> bool:
        """Check whether an object with ``object_id`` is stored."""

    @abstractmethod
    def match_prefix(self, prefix: str) -> List[str]:
        """Return the ids of all stored objects starting with ``prefix``."""

    @abstractmethod
    def _write(self, object_id: str, content: bytes) -> None:
        pass

    @abstractmethod
    def _read(self, object_id: str) -> bytes:
        """Read raw content, raising ObjectNotFoundError if absent."""


class ObjectStore(BaseObjectStore):
    """Filesystem-backed object store.

    Storage layout:
        .groot/objects/<id[:2]>/<id[2:]>

    Writes go through a temp file and an atomic rename, so an interrupted
    write never leaves a partial object under its final name.

    Example:
        >>> store = ObjectStore(Path(".groot"))
        >>> object_id = store.put(b"hello\\n")
        >>> assert store.get(object_id) == b"hello\\n"
    """

    def __init__(self, groot_dir: Path) -> None:
        """Initialize the object store.

        Args:
            groot_dir: Path to .groot directory

        Raises:
            NotARepositoryError: If groot_dir doesn't exist
        """
        self.groot_dir = Path(groot_dir)
        self.objects_dir = self.groot_dir / OBJECTS_DIR

        if not self.groot_dir.exists():
            raise NotARepositoryError(f"Groot directory not found: {groot_dir}")

    def exists(self, object_id: str) -> bool:
        if not is_valid_id(object_id):
            return False
        return self._get_object_path(object_id).is_file()

    def match_prefix(self, prefix: str) -> List[str]:
        if not is_valid_prefix(prefix):
            return []

        # A one-character prefix spans up to sixteen shard directories
        if len(prefix) < 2:
            shard_dirs = sorted(self.objects_dir.glob(f"{prefix}?"))
        else:
            shard_dirs = [self.objects_dir / prefix[:2]]

        matches = []
        for shard_dir in shard_dirs:
            if not shard_dir.is_dir():
                continue
            for entry in shard_dir.iterdir():
                object_id = shard_dir.name + entry.name
                if object_id.startswith(prefix) and is_valid_id(object_id):
                    matches.append(object_id)
        return sorted(matches)

    def _write(self, object_id: str, content: bytes) -> None:
        atomic_write(self._get_object_path(object_id), content, prefix=".tmp_obj_")

    def _read(self, object_id: str) -> bytes:
        object_path = self._get_object_path(object_id)
        if not object_path.is_file():
            raise ObjectNotFoundError(f"Object not found: {object_id}")
        return read_bytes(object_path)

    def _get_object_path(self, object_id: str) -> Path:
        """Get the filesystem path for an object.

        Uses Git-like sharding: objects/<id[:2]>/<id[2:]>
        """
        return self.objects_dir / object_id[:2] / object_id[2:]


class MemoryObjectStore(BaseObjectStore):
    """In-memory object store with the same contract as ObjectStore."""

    def __init__(self) -> None:
        self._objects: Dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._objects)

    def exists(self, object_id: str) -> bool:
        return object_id in self._objects

    def match_prefix(self, prefix: str) -> List[str]:
        if not is_valid_prefix(prefix):
            return []
        return sorted(oid for oid in self._objects if oid.startswith(prefix))

    def _write(self, object_id: str, content: bytes) -> None:
        self._objects[object_id] = bytes(content)

    def _read(self, object_id: str) -> bytes:
        try:
            return self._objects[object_id]
        except KeyError:
            raise ObjectNotFoundError(f"Object not found: {object_id}") from None
