"""Filesystem helpers shared by the storage and core layers."""

import os
import tempfile
from pathlib import Path

from groot.errors import RepositoryIOError


def atomic_write(path: Path, data: bytes, prefix: str = ".tmp_") -> None:
    """Write ``data`` to ``path`` via a temp file in the same directory.

    The temp file is fsynced and renamed over the target, so readers only
    ever see the old or the new content.

    Raises:
        RepositoryIOError: If the write or rename fails
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=prefix)
    except OSError as e:
        raise RepositoryIOError(f"Failed to write {path}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise RepositoryIOError(f"Failed to write {path}: {e}") from e


def read_bytes(path: Path) -> bytes:
    """Read a file, wrapping OS errors in RepositoryIOError."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise RepositoryIOError(f"Failed to read {path}: {e}") from e
