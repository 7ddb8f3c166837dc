from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from tempstore.registry import DEFAULT_STORE_NAME


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_path(name: str) -> Path | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    # Instance addressing
    default_store_name: str

    # Snapshots: relative filenames resolve against this directory when set
    snapshot_dir: Path | None

    # Deep-copy values on the way in and out of a table
    copy_values: bool

    # Logging
    log_level: str


def get_settings() -> Settings:
    default_store_name = (os.getenv("TEMPSTORE_DEFAULT_NAME") or DEFAULT_STORE_NAME).strip()
    snapshot_dir = _env_path("TEMPSTORE_SNAPSHOT_DIR")
    copy_values = _env_bool("TEMPSTORE_COPY_VALUES", True)
    log_level = (os.getenv("TEMPSTORE_LOG_LEVEL") or "INFO").strip().upper()

    return Settings(
        default_store_name=default_store_name or DEFAULT_STORE_NAME,
        snapshot_dir=snapshot_dir,
        copy_values=copy_values,
        log_level=log_level,
    )
