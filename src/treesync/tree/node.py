"""Node: identity, publish channel and registry wiring shared by models and collections."""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, ClassVar

from treesync.core.events import Channel
from treesync.core.identity import next_correlation_tag
from treesync.registry import Registry, get_registry


class Node(ABC):
    """Abstract tree node.

    Every node owns two channels:
        publish: uniform outbound messages bubbling toward the root.
        id_changed: ``(node, old_id, new_id)`` whenever the identifier is
            (re)assigned; the registry listens to re-key its entry.

    Back-references to the owning node are weak, so ownership only ever
    flows from parent to child.
    """

    type_name: ClassVar[str] = "node"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "type_name" not in cls.__dict__:
            cls.type_name = cls.__name__.lower()

    def __init__(self, *, registry: Registry | None = None):
        self._registry = registry if registry is not None else get_registry()
        self._parent_ref: weakref.ref[Node] | None = None
        self.cid = next_correlation_tag()
        self.publish = Channel()
        self.id_changed = Channel()

    @property
    @abstractmethod
    def id(self) -> str | None:
        """Globally unique identifier, or None until one is assigned."""
        ...

    @id.setter
    @abstractmethod
    def id(self, value: str | None) -> None: ...

    @property
    def registry(self) -> Registry:
        """Registry this node was registered with."""
        return self._registry

    @property
    def parent(self) -> Node | None:
        """Owning node, if this node was attached as a child."""
        return self._parent_ref() if self._parent_ref is not None else None

    def _set_parent(self, parent: Node | None) -> None:
        self._parent_ref = weakref.ref(parent) if parent is not None else None

    def register(self) -> str | None:
        """Enter this node in its registry, claiming an identifier if authoritative."""
        return self._registry.register(self)

    def lookup(self, identifier: str | None) -> Any | None:
        """Resolve any node in the same registry by identifier."""
        return self._registry.lookup(identifier)

    def walk(self) -> Iterator[Node]:
        """Iterate this node and every node it owns, depth-first."""
        yield self

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} cid={self.cid}>"
