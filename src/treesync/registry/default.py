"""Process-wide default registry.

Nodes resolve their registry when constructed. The default is built lazily
from ``SyncSettings`` and can be swapped for a scoped one:

    with use_registry(LocalRegistry(authoritative=False)):
        replica = App()
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from treesync.config import SyncSettings
from treesync.core.identity import IdSource, SequentialIdSource, UuidIdSource
from treesync.registry.local import LocalRegistry
from treesync.registry.protocol import Registry

_registry: Registry | None = None


def registry_from_settings(settings: SyncSettings | None = None) -> LocalRegistry:
    """Build a LocalRegistry configured by settings.

    Args:
        settings: Explicit settings; loaded from the environment if None.

    Returns:
        New, empty LocalRegistry.
    """
    settings = settings or SyncSettings()
    id_source: IdSource
    if settings.id_source == "sequential":
        id_source = SequentialIdSource(prefix=settings.id_prefix)
    else:
        id_source = UuidIdSource()
    return LocalRegistry(
        id_source=id_source,
        authoritative=settings.authoritative,
        evict_on_remove=settings.evict_on_remove,
    )


def get_registry() -> Registry:
    """Access the process-wide registry, creating it on first use.

    Returns:
        The current default registry.
    """
    global _registry
    if _registry is None:
        _registry = registry_from_settings()
    return _registry


def set_registry(registry: Registry | None) -> Registry | None:
    """Install a new default registry.

    Args:
        registry: Registry to install, or None to rebuild lazily from settings.

    Returns:
        The previously installed registry (may be None).
    """
    global _registry
    previous = _registry
    _registry = registry
    return previous


@contextmanager
def use_registry(registry: Registry) -> Iterator[Registry]:
    """Temporarily install ``registry`` as the default.

    Yields:
        The installed registry.
    """
    previous = set_registry(registry)
    try:
        yield registry
    finally:
        set_registry(previous)
