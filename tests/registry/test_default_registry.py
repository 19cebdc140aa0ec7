"""Tests for the process-wide default registry."""

from treesync import (
    Collection,
    LocalRegistry,
    Model,
    Registry,
    SequentialIdSource,
    SyncSettings,
    get_registry,
    registry_from_settings,
    set_registry,
    use_registry,
)


def test_nodes_use_the_installed_default(registry):
    model = Model()

    assert model.registry is registry
    assert registry.lookup(model.id) is model


def test_get_registry_builds_lazily_when_unset(monkeypatch):
    monkeypatch.setenv("TREESYNC_ID_SOURCE", "sequential")
    monkeypatch.setenv("TREESYNC_ID_PREFIX", "env")
    set_registry(None)

    built = get_registry()

    assert isinstance(built, LocalRegistry)
    assert get_registry() is built
    assert built.generate_id() == "env1"


def test_set_registry_returns_previous(registry):
    replacement = LocalRegistry()

    assert set_registry(replacement) is registry
    assert get_registry() is replacement


def test_use_registry_restores_previous(registry):
    scoped = LocalRegistry(authoritative=False)

    with use_registry(scoped) as installed:
        assert installed is scoped
        inner = Model()

    assert get_registry() is registry
    assert inner.registry is scoped
    assert inner.id is None


def test_registry_from_settings():
    built = registry_from_settings(
        SyncSettings(
            authoritative=False, evict_on_remove=False, id_source="sequential", id_prefix="p"
        )
    )

    assert not built.authoritative
    assert not built.evict_on_remove
    assert built.generate_id() == "p1"


class RecordingRegistry:
    """Registry backend that is not a LocalRegistry."""

    def __init__(self):
        self._inner = LocalRegistry(id_source=SequentialIdSource(prefix="r"))
        self.authoritative = True
        self.evict_on_remove = True
        self.registered = []

    def register(self, node):
        self.registered.append(node)
        return self._inner.register(node)

    def lookup(self, identifier):
        return self._inner.lookup(identifier)

    def unregister(self, node):
        return self._inner.unregister(node)

    def release(self, node):
        return self._inner.release(node)

    def generate_id(self):
        return self._inner.generate_id()

    def __contains__(self, identifier):
        return identifier in self._inner

    def __len__(self):
        return len(self._inner)


def test_any_registry_backend_can_be_installed():
    backend = RecordingRegistry()
    assert isinstance(backend, Registry)

    with use_registry(backend):
        options = Collection()
        member = options.add({"name": "a"})

    assert options.registry is backend
    assert member.registry is backend
    assert backend.lookup(member.id) is member
    options.remove(member)
    assert member.id not in backend
