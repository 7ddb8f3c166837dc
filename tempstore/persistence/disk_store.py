from __future__ import annotations

from pathlib import Path

from ..snapshot_codec import MAGIC, SnapshotHeader, decode_header
from ..errors import SnapshotIOError

from .interfaces import SnapshotFile
from .locks import SNAPSHOT_PATH_LOCKS, SnapshotPathLocks
from .paths import SnapshotName, resolve_snapshot_path, temp_path_for


class DiskSnapshotFile(SnapshotFile):
    """
    Stores one snapshot blob on disk at a fixed path.

    - Writes go to a sibling temp file that then replaces the target, so a reader
      never sees a half-written snapshot.
    - The parent directory must already exist.
    - OSErrors surface as SnapshotIOError.
    """

    def __init__(self, path: Path, *, locks: SnapshotPathLocks = SNAPSHOT_PATH_LOCKS):
        self._path = path
        self._locks = locks

    @property
    def path(self) -> Path:
        return self._path

    def read_bytes(self) -> bytes:
        with self._locks.holding(self._path):
            try:
                return self._path.read_bytes()
            except OSError as error:
                raise SnapshotIOError(f"cannot read snapshot {self._path}: {error.strerror or error}") from error

    def write_bytes(self, data: bytes) -> None:
        tmp_path = temp_path_for(self._path)
        with self._locks.holding(self._path):
            try:
                with tmp_path.open("wb") as f:
                    f.write(data)
                tmp_path.replace(self._path)
            except OSError as error:
                tmp_path.unlink(missing_ok=True)
                raise SnapshotIOError(f"cannot write snapshot {self._path}: {error.strerror or error}") from error

    def read_header(self) -> SnapshotHeader:
        """
        Read only the marker and header line, leaving the payload on disk.
        """
        with self._locks.holding(self._path):
            try:
                with self._path.open("rb") as f:
                    prefix = f.read(len(MAGIC)) + f.readline()
            except OSError as error:
                raise SnapshotIOError(f"cannot read snapshot {self._path}: {error.strerror or error}") from error
        header, _ = decode_header(prefix)
        return header


def inspect_snapshot(filename: SnapshotName, base_dir: Path | None = None) -> SnapshotHeader:
    return DiskSnapshotFile(resolve_snapshot_path(filename, base_dir)).read_header()
