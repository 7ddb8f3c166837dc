from __future__ import annotations

from pathlib import Path
from typing import Protocol


class SnapshotFile(Protocol):
    """
    Minimal file interface a store saves to and loads from: one opaque blob at a fixed path.
    """

    @property
    def path(self) -> Path:
        ...

    def read_bytes(self) -> bytes:
        """Return the full file contents. Raises SnapshotIOError when unreadable."""
        ...

    def write_bytes(self, data: bytes) -> None:
        """Replace the full file contents. Raises SnapshotIOError on failure."""
        ...
