"""Registry protocol for swappable identifier -> node maps.

The registry abstracts node lookup by identifier, enabling:
- Local in-process map (default)
- Scoped registries for the authoritative and observer side of a test

Usage:
    registry = LocalRegistry()
    with use_registry(registry):
        app = App()
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RegisteredNode(Protocol):
    """What the registry needs from a node."""

    @property
    def id(self) -> str | None:
        """Current identifier, or None if not assigned yet."""
        ...

    @id.setter
    def id(self, value: str | None) -> None: ...

    @property
    def id_changed(self) -> Any:
        """Channel emitting ``(node, old_id, new_id)`` on identifier change."""
        ...

    def walk(self) -> Iterator[Any]:
        """Iterate the node and every node it owns, depth-first."""
        ...


@runtime_checkable
class Registry(Protocol):
    """Abstract registry interface. Implementations hold the actual map."""

    authoritative: bool
    evict_on_remove: bool

    def register(self, node: RegisteredNode) -> str | None:
        """Assign an identifier when authoritative and enter the node."""
        ...

    def lookup(self, identifier: str | None) -> Any | None:
        """Resolve an identifier to a node."""
        ...

    def unregister(self, node: RegisteredNode) -> bool:
        """Drop the node's entry. Returns True if it existed."""
        ...

    def release(self, node: RegisteredNode) -> int:
        """Unregister a node and its whole subtree. Returns entries dropped."""
        ...

    def generate_id(self) -> str:
        """Draw a fresh identifier from the configured source."""
        ...

    def __contains__(self, identifier: object) -> bool: ...

    def __len__(self) -> int: ...
