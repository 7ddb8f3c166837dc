from __future__ import annotations

import hashlib
import pickle
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .errors import CorruptSnapshotError, SnapshotIOError

MAGIC = b"TEMPSTORE\n"
FORMAT_VERSION = 1


class SnapshotHeader(BaseModel):
    """
    First line after the magic marker of every snapshot, stored as JSON:
      {"format_version": 1, "store_name": "...", "entry_count": 2,
       "sha256": "<hex digest of the payload>", "created_at": "..."}
    """

    format_version: int
    store_name: str
    entry_count: int = Field(ge=0)
    sha256: str = Field(min_length=64, max_length=64)
    created_at: datetime


def encode_table(table: dict[Any, Any], *, store_name: str) -> bytes:
    """
    Serialize a complete table into snapshot bytes.

    Raises SnapshotIOError if any key or value cannot be pickled.
    """
    try:
        payload = pickle.dumps(list(table.items()), protocol=pickle.HIGHEST_PROTOCOL)
    except (pickle.PicklingError, TypeError, AttributeError) as error:
        raise SnapshotIOError(f"table '{store_name}' holds a value that cannot be serialized: {error}") from error
    header = SnapshotHeader(
        format_version=FORMAT_VERSION,
        store_name=store_name,
        entry_count=len(table),
        sha256=hashlib.sha256(payload).hexdigest(),
        created_at=datetime.now(timezone.utc),
    )
    return MAGIC + header.model_dump_json().encode("utf-8") + b"\n" + payload


def decode_header(data: bytes) -> tuple[SnapshotHeader, bytes]:
    """
    Split snapshot bytes into the validated header and the raw payload.
    """
    if not data.startswith(MAGIC):
        raise CorruptSnapshotError("missing snapshot marker")
    header_line, sep, payload = data[len(MAGIC):].partition(b"\n")
    if not sep:
        raise CorruptSnapshotError("truncated snapshot header")
    try:
        header = SnapshotHeader.model_validate_json(header_line)
    except ValidationError as error:
        raise CorruptSnapshotError(f"invalid snapshot header: {error.error_count()} error(s)") from error
    if header.format_version != FORMAT_VERSION:
        raise CorruptSnapshotError(
            f"unsupported snapshot format version {header.format_version} (expected {FORMAT_VERSION})"
        )
    return header, payload


def decode_table(data: bytes) -> dict[Any, Any]:
    """
    Deserialize snapshot bytes into a brand-new table.

    Nothing is returned unless the whole payload decodes and checks out.
    """
    header, payload = decode_header(data)
    if hashlib.sha256(payload).hexdigest() != header.sha256:
        raise CorruptSnapshotError("snapshot payload does not match its checksum")
    try:
        entries = pickle.loads(payload)
    except Exception as error:
        raise CorruptSnapshotError(f"snapshot payload could not be unpickled: {error!r}") from error
    if not isinstance(entries, list):
        raise CorruptSnapshotError("snapshot payload is not a list of entries")

    table: dict[Any, Any] = {}
    for entry in entries:
        if not isinstance(entry, tuple) or len(entry) != 2:
            raise CorruptSnapshotError("snapshot entry is not a (key, value) pair")
        key, value = entry
        try:
            table[key] = value
        except TypeError as error:
            raise CorruptSnapshotError(f"snapshot key is not hashable: {error}") from error
    if len(table) != header.entry_count:
        raise CorruptSnapshotError(
            f"snapshot declares {header.entry_count} entries but holds {len(table)}"
        )
    return table
