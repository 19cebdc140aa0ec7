"""Registry backends and the process-wide default."""

from treesync.registry.default import (
    get_registry,
    registry_from_settings,
    set_registry,
    use_registry,
)
from treesync.registry.local import LocalRegistry
from treesync.registry.protocol import RegisteredNode, Registry

__all__ = [
    "Registry",
    "RegisteredNode",
    "LocalRegistry",
    "get_registry",
    "set_registry",
    "use_registry",
    "registry_from_settings",
]
