from __future__ import annotations

from pathlib import Path

import pytest

from tempstore import (
    ABSENT,
    DEFAULT_STORE_NAME,
    DuplicateNameError,
    InstanceNotFoundError,
    StoreRegistry,
)


def test_default_instance_exists_at_startup(registry):
    assert DEFAULT_STORE_NAME in registry
    assert registry.lookup().name == DEFAULT_STORE_NAME
    assert registry.names() == [DEFAULT_STORE_NAME]


def test_name_addressed_shortcuts_use_default_instance(registry):
    registry.set(123, 456)
    assert registry.get(123) == 456
    assert registry.lookup().get(123) == 456


def test_instances_are_isolated(registry):
    x = registry.create("x")
    y = registry.create("y")
    x.set("k", "from x")
    assert y.get("k") is ABSENT
    assert registry.get("k", name="x") == "from x"
    assert registry.get("k") is ABSENT


def test_duplicate_create_fails_and_keeps_first_instance(registry):
    first = registry.create("x")
    first.set("k", 1)
    with pytest.raises(DuplicateNameError):
        registry.create("x")
    assert registry.lookup("x") is first
    assert first.get("k") == 1


def test_unknown_name_raises_for_every_operation(registry, tmp_path: Path):
    with pytest.raises(InstanceNotFoundError):
        registry.lookup("nope")
    with pytest.raises(InstanceNotFoundError):
        registry.set("k", "v", name="nope")
    with pytest.raises(InstanceNotFoundError):
        registry.get("k", name="nope")
    with pytest.raises(InstanceNotFoundError):
        registry.save(tmp_path / "x.snapshot", name="nope")
    with pytest.raises(InstanceNotFoundError):
        registry.load(tmp_path / "x.snapshot", name="nope")


def test_terminate_unregisters_and_frees_the_name(registry):
    old = registry.create("worker")
    old.set("k", "old")
    registry.terminate("worker", timeout=5)

    assert "worker" not in registry
    assert not old.is_running
    with pytest.raises(InstanceNotFoundError):
        old.get("k")
    with pytest.raises(InstanceNotFoundError):
        registry.terminate("worker")

    new = registry.create("worker")
    assert new.get("k") is ABSENT


def test_save_and_load_by_name(registry):
    registry.create("source").set("k", {"nested": [1, 2]})
    registry.save("by-name.snapshot", name="source")

    registry.load("by-name.snapshot")
    assert registry.get("k") == {"nested": [1, 2]}


def test_close_terminates_everything():
    registry = StoreRegistry()
    a = registry.lookup()
    b = registry.create("b")
    registry.close(timeout=5)

    assert registry.names() == []
    assert not a.is_running
    assert not b.is_running
    with pytest.raises(InstanceNotFoundError):
        registry.get("k")


def test_context_manager_closes_registry():
    with StoreRegistry(default_name="ctx") as registry:
        store = registry.lookup()
        assert store.name == "ctx"
    assert not store.is_running


def test_registry_without_default_instance():
    with StoreRegistry(default_name=None) as registry:
        assert registry.names() == []
        with pytest.raises(InstanceNotFoundError):
            registry.lookup()


@pytest.mark.parametrize("bad_name, error", [(42, TypeError), ("", ValueError), ("   ", ValueError)])
def test_invalid_names_are_rejected(registry, bad_name, error):
    with pytest.raises(error):
        registry.create(bad_name)
