"""Storage layer for Groot.

This module provides the content-addressable object store and the
serialization contract for records kept in it.
"""

from groot.storage.object_store import (
    BaseObjectStore,
    MemoryObjectStore,
    ObjectStore,
    compute_hash,
)
from groot.storage.serialization import (
    decode_commit,
    decode_index,
    encode_commit,
    encode_index,
)

__all__ = [
    "BaseObjectStore",
    "ObjectStore",
    "MemoryObjectStore",
    "compute_hash",
    "encode_commit",
    "decode_commit",
    "encode_index",
    "decode_index",
]
