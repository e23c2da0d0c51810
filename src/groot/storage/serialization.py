"""Serialization contract for commit and index records.

Both record types are JSON objects with a fixed, versioned field set.
Commit records are encoded canonically (sorted keys, no whitespace) so
that the same commit always produces the same bytes and therefore the same
object id.

Commit record::

    {
        "version": 1,
        "timestamp": "2026-10-17T10:00:00+00:00",
        "message": "first",
        "files": [{"path": "a.txt", "hash": "sha256..."}],
        "parent": null
    }

Index record::

    {"version": 1, "entries": [{"path": "a.txt", "hash": "sha256..."}]}

Unknown keys in a record of a supported version are ignored on decode.
"""

import json
from typing import Any, Dict, Iterable, List, Optional

from groot.constants import FORMAT_VERSION
from groot.models import Commit, StagingEntry
from groot.errors import SerializationError


def _canonical_json(obj: Dict[str, Any]) -> bytes:
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def _load_record(data: bytes, kind: str) -> Dict[str, Any]:
    try:
        record = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SerializationError(f"Invalid {kind} record: {e}") from e

    if not isinstance(record, dict):
        raise SerializationError(f"Invalid {kind} record: expected a JSON object")

    version = record.get("version")
    # bool and float compare equal to 1, so the type is checked too
    if type(version) is not int or version != FORMAT_VERSION:
        raise SerializationError(f"Unsupported {kind} record version: {version!r}")

    return record


def _encode_entries(entries: Iterable[StagingEntry]) -> List[Dict[str, str]]:
    return [{"path": e.path, "hash": e.content_id} for e in entries]


def _decode_entries(raw: Any, kind: str) -> List[StagingEntry]:
    if not isinstance(raw, list):
        raise SerializationError(f"Invalid {kind} record: file list must be a list")

    entries = []
    for item in raw:
        if not isinstance(item, dict):
            raise SerializationError(f"Invalid {kind} record: malformed file entry")
        path = item.get("path")
        content_id = item.get("hash")
        if not isinstance(path, str) or not isinstance(content_id, str):
            raise SerializationError(f"Invalid {kind} record: malformed file entry")
        entries.append(StagingEntry(path=path, content_id=content_id))
    return entries


def encode_commit(
    timestamp: str,
    message: str,
    files: Iterable[StagingEntry],
    parent: Optional[str],
) -> bytes:
    """Encode the fields of a commit into its canonical bytes.

    The commit id is the object id of the returned bytes.
    """
    return _canonical_json({
        "version": FORMAT_VERSION,
        "timestamp": timestamp,
        "message": message,
        "files": _encode_entries(files),
        "parent": parent,
    })


def decode_commit(commit_id: str, data: bytes) -> Commit:
    """Decode a stored commit record.

    Args:
        commit_id: Object id the record was stored under
        data: Raw record bytes

    Returns:
        The decoded Commit

    Raises:
        SerializationError: If the bytes are not a valid commit record
    """
    record = _load_record(data, "commit")

    for field in ("timestamp", "message"):
        if not isinstance(record.get(field), str):
            raise SerializationError(f"Invalid commit record: missing {field!r}")

    if "files" not in record or "parent" not in record:
        raise SerializationError("Invalid commit record: missing 'files' or 'parent'")

    parent = record["parent"]
    if parent is not None and not isinstance(parent, str):
        raise SerializationError("Invalid commit record: parent must be a string or null")

    return Commit(
        id=commit_id,
        timestamp=record["timestamp"],
        message=record["message"],
        files=tuple(_decode_entries(record["files"], "commit")),
        parent=parent,
    )


def encode_commit_record(commit: Commit) -> bytes:
    """Re-encode a decoded Commit into its canonical bytes."""
    return encode_commit(commit.timestamp, commit.message, commit.files, commit.parent)


def encode_index(entries: Iterable[StagingEntry]) -> bytes:
    """Encode staging entries as an index record (indented for readability)."""
    record = {"version": FORMAT_VERSION, "entries": _encode_entries(entries)}
    return json.dumps(record, indent=2, ensure_ascii=False).encode("utf-8")


def decode_index(data: bytes) -> List[StagingEntry]:
    """Decode an index record into its ordered entries.

    Raises:
        SerializationError: If the bytes are not a valid index record
    """
    record = _load_record(data, "index")
    return _decode_entries(record.get("entries", []), "index")
