"""Tests for LocalRegistry.

Critical Invariants:
- Every registered identifier resolves to exactly one node
- Re-keying moves the entry; it never leaves the old identifier behind
- Releasing a subtree unregisters every node it owns
"""

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from treesync import Collection, LocalRegistry, Model, SequentialIdSource
from treesync.registry import RegisteredNode, Registry


@pytest.fixture
def local():
    return LocalRegistry(id_source=SequentialIdSource(prefix="r"))


def test_authoritative_register_assigns_identifier(local):
    model = Model(registry=local)

    assert model.id == "r1"
    assert local.lookup("r1") is model
    assert "r1" in local


def test_collections_receive_identifiers_too(local):
    collection = Collection(registry=local)

    assert collection.id == "r1"
    assert local.lookup("r1") is collection


def test_explicit_identifier_is_kept(local):
    model = Model({"id": "mine"}, registry=local)

    assert model.id == "mine"
    assert local.lookup("mine") is model
    assert len(local) == 1


def test_observer_registers_lazily():
    observer = LocalRegistry(authoritative=False)
    model = Model(registry=observer)

    assert model.id is None
    assert len(observer) == 0

    model.id = "from-snapshot"

    assert observer.lookup("from-snapshot") is model


def test_identifier_change_rekeys_entry(local):
    model = Model(registry=local)

    model.set(id="renamed")

    assert local.lookup("r1") is None
    assert local.lookup("renamed") is model
    assert list(local.ids()) == ["renamed"]


def test_first_claim_wins_and_conflict_is_logged(local, caplog):
    first = Model({"id": "dup"}, registry=local)

    with caplog.at_level(logging.WARNING, logger="treesync.registry.local"):
        Model({"id": "dup"}, registry=local)

    assert local.lookup("dup") is first
    assert "already registered" in caplog.text


def test_lookup_unknown_or_none(local):
    assert local.lookup("nope") is None
    assert local.lookup(None) is None


def test_unregister_only_removes_own_entry(local):
    first = Model({"id": "dup"}, registry=local)
    second = Model({"id": "dup"}, registry=local)

    assert not local.unregister(second)
    assert local.lookup("dup") is first
    assert local.unregister(first)
    assert local.lookup("dup") is None


def test_unregistered_node_no_longer_rekeys(local):
    model = Model(registry=local)
    local.unregister(model)

    model.id = "elsewhere"

    assert local.lookup("elsewhere") is None


def test_release_drops_whole_subtree(local):
    class Owner(Model):
        def __init__(self, attributes=None, /, **kwargs):
            super().__init__(attributes, **kwargs)
            self.add_child_collection("items", Collection)
            self.add_child_model("detail", Model)

    owner = Owner(registry=local)
    owner.items.add({"name": "a"})
    owner.items.add({"name": "b"})

    assert len(local) == 5
    assert local.release(owner) == 5
    assert len(local) == 0


def test_clear_forgets_everything(local):
    model = Model(registry=local)
    local.clear()

    assert len(local) == 0
    model.id = "after-clear"
    assert local.lookup("after-clear") is None


def test_generate_id_draws_from_source(local):
    assert local.generate_id() == "r1"
    assert local.generate_id() == "r2"


def test_local_registry_satisfies_protocol(local):
    assert isinstance(local, Registry)


def test_nodes_satisfy_registered_node_protocol(local):
    assert isinstance(Model(registry=local), RegisteredNode)
    assert isinstance(Collection(registry=local), RegisteredNode)


@given(
    shape=st.lists(st.integers(min_value=0, max_value=4), min_size=1, max_size=6),
    removals=st.lists(st.integers(min_value=0, max_value=20), max_size=5),
)
def test_identifiers_resolve_to_exactly_one_node(shape, removals):
    """PROPERTY: No two live nodes share an identifier; every entry resolves to its node."""
    local = LocalRegistry(id_source=SequentialIdSource())
    root = Model(registry=local)
    for label_index, size in enumerate(shape):
        collection = root.add_child_collection(f"group{label_index}", Collection)
        for _ in range(size):
            collection.add({})
    members = [m for c in root.collections.values() for m in c]
    for index in removals:
        if index < len(members):
            member = members.pop(index)
            member.collection.remove(member)

    live = list(root.walk())
    ids = [node.id for node in live]
    assert len(set(ids)) == len(ids)
    assert len(local) == len(live)
    assert all(local.lookup(node.id) is node for node in live)
