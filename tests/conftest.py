from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for top-level modules like `app` and `settings` under
# pytest import modes that don't automatically prepend the rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

ENV_VARS = (
    "TEMPSTORE_DEFAULT_NAME",
    "TEMPSTORE_SNAPSHOT_DIR",
    "TEMPSTORE_COPY_VALUES",
    "TEMPSTORE_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """
    Strip TEMPSTORE_* variables and run from a temp cwd so a developer's local.env never leaks in.
    """
    for var in ENV_VARS:
        # setenv first so teardown also removes anything load_dotenv() writes.
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def registry(tmp_path: Path):
    from tempstore import StoreRegistry

    reg = StoreRegistry(snapshot_dir=tmp_path)
    yield reg
    reg.close(timeout=5)


@pytest.fixture
def store(registry):
    return registry.lookup()


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "table.snapshot"
