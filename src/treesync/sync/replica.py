"""Replica: observer-side application of the authoritative publish stream.

Usage:
    with use_registry(LocalRegistry(authoritative=False)):
        mirror = App()
    replica = Replica(mirror)
    replica.load(initial_snapshot)
    for message in incoming:
        replica.apply(message)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from treesync.core.events import (
    AddEvent,
    ChangeEvent,
    MoveEvent,
    RemoveEvent,
    event_from_message,
)
from treesync.core.identity import ID_ATTRIBUTE
from treesync.registry import Registry
from treesync.tree import Collection, Model, import_snapshot

logger = logging.getLogger(__name__)


class Replica:
    """Keeps a local tree in step with messages published by the authoritative side.

    Args:
        root: Local root, structurally equivalent to the authoritative root.
        registry: Registry used to resolve identifiers (default: the root's).
        silent: Apply messages without raising local events.
    """

    def __init__(self, root: Model, registry: Registry | None = None, silent: bool = False):
        self._root = root
        self._registry = registry if registry is not None else root.registry
        self._silent = silent

    @property
    def root(self) -> Model:
        return self._root

    def load(self, snapshot: Mapping[str, Any]) -> Model:
        """Merge a full snapshot into the local root without raising events."""
        return self._root.import_snapshot(snapshot, silent=True)

    def apply(self, message: Mapping[str, Any]) -> bool:
        """Apply one outbound message from the authoritative side.

        Args:
            message: ``change``, ``add``, ``remove`` or ``move`` message.

        Returns:
            True if the local tree changed, False if the message was stale
            (unknown identifiers) or a no-op.

        Raises:
            ValueError: If the message is not a publish message.
        """
        event = event_from_message(message)

        if isinstance(event, ChangeEvent):
            model = self._lookup(event.node_id, Model)
            if model is None:
                return False
            attributes = model.parse_wire_attributes(event.attributes)
            changed = bool(model.set(attributes, silent=self._silent))
            for name in set(model.attributes) - set(event.attributes) - {ID_ATTRIBUTE}:
                changed = model.unset(name, silent=self._silent) or changed
            return changed

        if isinstance(event, AddEvent):
            collection = self._lookup(event.collection_id, Collection)
            if collection is None:
                return False
            existing = collection.get(event.snapshot.get("id"))
            if existing is not None:
                import_snapshot(existing, event.snapshot, silent=self._silent)
                return True
            model = collection.new_model()
            import_snapshot(model, event.snapshot, silent=True)
            collection.add(model, silent=self._silent)
            return True

        if isinstance(event, RemoveEvent):
            model = self._lookup(event.node_id, Model)
            if model is None or model.collection is None:
                return False
            return model.collection.remove(model, silent=self._silent) is not None

        if isinstance(event, MoveEvent):
            collection = self._lookup(event.collection_id, Collection)
            if collection is None:
                return False
            return collection.move_item(event.node_id, event.new_position)

        raise ValueError(f"Unsupported event {type(event).__name__}")

    def _lookup[NodeT: (Model, Collection)](
        self, identifier: str | None, kind: type[NodeT]
    ) -> NodeT | None:
        node = self._registry.lookup(identifier)
        if not isinstance(node, kind):
            logger.warning(f"Replica has no {kind.__name__} {identifier}; ignoring message")
            return None
        return node
