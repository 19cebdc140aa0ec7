"""Local in-memory registry implementation.

Simple dict-based identifier map suitable for single-process use and
testing. Safe under the single-threaded apply loop the tree assumes.

Usage:
    registry = LocalRegistry(id_source=SequentialIdSource(prefix="n"))
    registry.register(node)
    registry.lookup(node.id) is node  # True
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterator
from typing import Any

from treesync.core.identity import IdSource, UuidIdSource
from treesync.registry.protocol import RegisteredNode

logger = logging.getLogger(__name__)


class LocalRegistry:
    """Process-scoped map from identifier to node.

    Structure:
        _nodes[identifier] = node

    The first node to claim an identifier keeps it; a later conflicting
    claim is logged and ignored so lookups never silently change target.

    Args:
        id_source: Generator used when authoritative (default UUID4).
        authoritative: Whether ``register`` assigns identifiers.
        evict_on_remove: Whether collections release removed subtrees.
    """

    def __init__(
        self,
        id_source: IdSource | None = None,
        authoritative: bool = True,
        evict_on_remove: bool = True,
    ):
        self._id_source = id_source or UuidIdSource()
        self.authoritative = authoritative
        self.evict_on_remove = evict_on_remove
        self._nodes: dict[str, Any] = {}
        self._watched: weakref.WeakSet[Any] = weakref.WeakSet()

    def generate_id(self) -> str:
        """Draw a fresh identifier from the configured source.

        Returns:
            New identifier string.
        """
        return self._id_source.next_id()

    def register(self, node: RegisteredNode) -> str | None:
        """Register a node, assigning an identifier if authoritative.

        Nodes created before their identifier is known (observer side) are
        entered lazily, the first time an identifier is assigned to them.

        Args:
            node: Node to register.

        Returns:
            The node's identifier, or None if it has none yet.
        """
        if node not in self._watched:
            node.id_changed.subscribe(self._rekey)
            self._watched.add(node)

        if node.id is None:
            if self.authoritative:
                # Fires id_changed, which claims the entry
                node.id = self.generate_id()
        else:
            self._claim(node, node.id)
        return node.id

    def lookup(self, identifier: str | None) -> Any | None:
        """Resolve an identifier to its node.

        Args:
            identifier: Identifier to resolve.

        Returns:
            The registered node, or None if unknown.
        """
        if identifier is None:
            return None
        return self._nodes.get(identifier)

    def unregister(self, node: RegisteredNode) -> bool:
        """Drop a node's entry and stop tracking its identifier.

        Only removes the entry if it maps to this exact node.

        Args:
            node: Node to unregister.

        Returns:
            True if an entry was removed, False otherwise.
        """
        if node in self._watched:
            node.id_changed.unsubscribe(self._rekey)
            self._watched.discard(node)

        identifier = node.id
        if identifier is not None and self._nodes.get(identifier) is node:
            del self._nodes[identifier]
            logger.debug(f"Unregistered {type(node).__name__} id={identifier}")
            return True
        return False

    def release(self, node: RegisteredNode) -> int:
        """Unregister a node and every node in its subtree.

        Args:
            node: Root of the subtree to drop.

        Returns:
            Number of registry entries removed.
        """
        return sum(1 for n in list(node.walk()) if self.unregister(n))

    def ids(self) -> Iterator[str]:
        """Iterate registered identifiers."""
        yield from self._nodes

    def clear(self) -> None:
        """Forget every node."""
        for node in list(self._watched):
            node.id_changed.unsubscribe(self._rekey)
        self._watched = weakref.WeakSet()
        self._nodes.clear()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def _claim(self, node: Any, identifier: str) -> None:
        existing = self._nodes.get(identifier)
        if existing is None:
            self._nodes[identifier] = node
            logger.debug(f"Registered {type(node).__name__} id={identifier}")
        elif existing is not node:
            logger.warning(
                f"Identifier {identifier} already registered to another "
                f"{type(existing).__name__}; keeping the existing entry"
            )

    def _rekey(self, node: Any, old: str | None, new: str | None) -> None:
        if old is not None and self._nodes.get(old) is node:
            del self._nodes[old]
            logger.debug(f"Re-keyed {type(node).__name__} {old} -> {new}")
        if new is not None:
            self._claim(node, new)
