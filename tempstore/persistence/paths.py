from __future__ import annotations

import os
from pathlib import Path

from ..errors import SnapshotIOError

SnapshotName = str | os.PathLike[str]


def resolve_snapshot_path(filename: SnapshotName, base_dir: Path | None = None) -> Path:
    if not isinstance(filename, (str, os.PathLike)):
        raise TypeError(f"snapshot filename must be a str or path, got {type(filename).__name__}")
    raw = os.fspath(filename)
    if not isinstance(raw, str) or not raw.strip():
        raise SnapshotIOError(f"invalid snapshot filename {filename!r}")
    path = Path(raw).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    if not path.name:
        raise SnapshotIOError(f"snapshot filename {raw!r} does not name a file")
    return path


def temp_path_for(path: Path) -> Path:
    # snapshot.bin -> snapshot.bin.tmp, written next to the target so replace() stays on one filesystem
    return path.with_name(path.name + ".tmp")
