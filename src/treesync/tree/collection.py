"""Collection: an ordered sequence of models with optional radio constraints.

Usage:
    class Comments(Collection):
        model_class = Comment
        radio_properties = ("selected",)

        def can_move(self, requester) -> bool:
            return self.parent.collection.parent.author is requester

    comments.add({"subject": "first"})
    comments.move_item(comment.id, 0)
"""

from __future__ import annotations

import logging
import warnings
import weakref
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, ClassVar, overload

from treesync.core.events import Channel
from treesync.core.types import Attributes, Requester
from treesync.registry import Registry, use_registry
from treesync.tree import gate
from treesync.tree.model import Model
from treesync.tree.node import Node

logger = logging.getLogger(__name__)


class Collection(Node):
    """Ordered, owned sequence of models. Order is position state.

    Class attributes configure a collection type:
        model_class: element type built for attribute dicts and ``safe_add``.
        radio_properties: boolean attributes true on at most one member.

    Channels (in addition to ``publish`` and ``id_changed``):
        added: ``(model, collection)`` after a non-silent add.
        removed: ``(model, collection)`` after a non-silent remove.
        moved: ``(collection, identifier, new_position)`` after a reorder.
        changed: ``(model, changes)`` proxied from every member.
    """

    type_name = "collection"
    model_class: ClassVar[type[Model]] = Model
    radio_properties: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        models: Iterable[Model | Mapping[str, Any]] | None = None,
        /,
        *,
        id: str | None = None,
        registry: Registry | None = None,
    ):
        super().__init__(registry=registry)
        self._id = id
        self._items: list[Model] = []
        self._unsubscribers: dict[int, list[Callable[[], None]]] = {}
        self._radio_groups: list[str] = []
        self.added = Channel()
        self.removed = Channel()
        self.moved = Channel()
        self.changed = Channel()

        for name in self.radio_properties:
            self.enforce_radio_group(name)
        self.register()
        for item in models or ():
            self.add(item, silent=True)

    @property
    def id(self) -> str | None:
        return self._id

    @id.setter
    def id(self, value: str | None) -> None:
        old = self._id
        if old == value:
            return
        self._id = value
        self.id_changed.emit(self, old, value)

    # Sequence access

    @property
    def models(self) -> list[Model]:
        """Members in order (a copy)."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Model]:
        return iter(list(self._items))

    @overload
    def __getitem__(self, index: int) -> Model: ...

    @overload
    def __getitem__(self, index: slice) -> list[Model]: ...

    def __getitem__(self, index: int | slice) -> Model | list[Model]:
        return self._items[index]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Model):
            return any(m is item for m in self._items)
        return self.get(item) is not None  # type: ignore[arg-type]

    def get(self, identifier: str | None) -> Model | None:
        """Member with this identifier, or None."""
        if identifier is None:
            return None
        for model in self._items:
            if model.id == identifier:
                return model
        return None

    def index(self, model: Model) -> int:
        """Position of a member (by identity).

        Raises:
            ValueError: If the model is not a member.
        """
        for position, member in enumerate(self._items):
            if member is model:
                return position
        raise ValueError(f"{model!r} is not in {self!r}")

    def first(self) -> Model | None:
        return self._items[0] if self._items else None

    def filter_by(self, name: str, value: Any) -> list[Model]:
        """Members whose attribute ``name`` equals ``value``."""
        return [m for m in self._items if m.get(name) == value]

    def find_by(self, name: str, value: Any) -> Model | None:
        """First member whose attribute ``name`` equals ``value``."""
        return next((m for m in self._items if m.get(name) == value), None)

    def set_all(self, attributes: Mapping[str, Any]) -> None:
        """Set the same attributes on every member."""
        for model in list(self._items):
            model.set(attributes)

    def walk(self) -> Iterator[Node]:
        yield self
        for model in list(self._items):
            yield from model.walk()

    # Mutation

    def new_model(self, attributes: Mapping[str, Any] | None = None) -> Model:
        """Build a detached element that already knows this collection.

        The model is not a member until passed to ``add``; capability
        predicates can nevertheless navigate ``model.collection``.
        """
        with use_registry(self._registry):
            model = self.model_class(attributes or {})
        model._collection_ref = weakref.ref(self)
        return model

    def add(self, item: Model | Mapping[str, Any], /, *, silent: bool = False) -> Model:
        """Append a model (or attributes for a new ``model_class``).

        Radio constraints are enforced before the model becomes visible: if a
        radio attribute is already true on a member, the incoming model's
        value is forced to False.

        Args:
            item: Model instance or attribute mapping.
            silent: Skip the ``added`` event.

        Returns:
            The member model.

        Raises:
            ValueError: If the model already belongs to another collection.
        """
        model = item if isinstance(item, Model) else self.new_model(item)
        if model in self:
            warnings.warn(f"{model!r} is already in {self!r}; ignoring add()", stacklevel=2)
            return model
        owner = model.collection
        if owner is not None and owner is not self and model in owner:
            raise ValueError(f"{model!r} already belongs to {owner!r}; remove it first")

        for name in self._radio_groups:
            if model.get(name) and any(m.get(name) for m in self._items):
                model.set({name: False}, silent=True)

        if model.id is not None and model.lookup(model.id) is None:
            # Re-adding a model evicted by an earlier remove
            for node in model.walk():
                node.register()

        self._items.append(model)
        model._collection_ref = weakref.ref(self)
        self._unsubscribers[id(model)] = [
            model.publish.subscribe(self.publish.emit),
            model.changed.subscribe(self.changed.emit),
        ]
        if not silent:
            self.added.emit(model, self)
        return model

    def remove(self, item: Model | str, /, *, silent: bool = False) -> Model | None:
        """Remove a member by identity or identifier.

        When the registry evicts on remove, the model's whole subtree is
        unregistered afterwards.

        Args:
            item: Member model or its identifier.
            silent: Skip the ``removed`` event.

        Returns:
            The removed model, or None if it was not a member.
        """
        model = item if isinstance(item, Model) else self.get(item)
        if model is None or model not in self:
            return None

        del self._items[self.index(model)]
        for unsubscribe in self._unsubscribers.pop(id(model), []):
            unsubscribe()
        model._collection_ref = None

        if not silent:
            self.removed.emit(model, self)
        if self._registry.evict_on_remove:
            self._registry.release(model)
        return model

    def move_item(self, identifier: str, new_position: int) -> bool:
        """Move a member so that it ends up at ``new_position``.

        The target position is clamped to the sequence bounds. Unknown
        identifiers and moves onto the current position are no-ops and emit
        nothing.

        Returns:
            True if the order changed.
        """
        model = self.get(identifier)
        if model is None:
            logger.debug(f"move_item: {identifier} not in collection {self.id}")
            return False

        current = self.index(model)
        new_position = max(0, min(new_position, len(self._items) - 1))
        if current == new_position:
            return False

        self._items.pop(current)
        self._items.insert(new_position, model)
        self.moved.emit(self, identifier, new_position)
        return True

    # Radio groups

    def enforce_radio_group(self, name: str) -> None:
        """Keep boolean attribute ``name`` true on at most one member.

        Whenever a member's ``name`` becomes true, every other member with it
        true is set to False. Installed automatically for ``radio_properties``.
        """
        if name in self._radio_groups:
            return
        self._radio_groups.append(name)

        def on_change(changed_model: Model, changes: Attributes) -> None:
            if not changes.get(name):
                return
            for model in list(self._items):
                if model is not changed_model and model.get(name):
                    model.set({name: False})

        self.changed.subscribe(on_change)

    @property
    def radio_groups(self) -> tuple[str, ...]:
        """Attributes constrained to be true on at most one member."""
        return tuple(self._radio_groups)

    def settle_radio_groups(
        self, holders: Mapping[str, Model] | None = None, *, silent: bool = False
    ) -> None:
        """Restore the radio constraint after changes that raised no events.

        Args:
            holders: Radio attribute -> member that must hold it. Groups not
                named here keep their first true member.
            silent: Clear the other members without change events.
        """
        holders = holders or {}
        for name in self._radio_groups:
            keep = holders.get(name)
            if keep is not None and not keep.get(name):
                keep.set({name: True}, silent=silent)
            owners = [m for m in self._items if m.get(name)]
            if keep is None and owners:
                keep = owners[0]
            for model in owners:
                if model is not keep:
                    model.set({name: False}, silent=silent)

    # Gate

    def can_add(self, requester: Requester) -> bool:
        """Capability predicate for ``safe_add``. Denies unless overridden."""
        return False

    def can_move(self, requester: Requester) -> bool:
        """Capability predicate for ``safe_move``. Denies unless overridden."""
        return False

    def safe_add(
        self,
        attributes: Mapping[str, Any],
        requester: Requester,
        on_denied: gate.DeniedHandler | None = None,
    ) -> Model | None:
        return gate.safe_add(self, attributes, requester, on_denied)

    def safe_move(
        self,
        identifier: str,
        new_position: int,
        requester: Requester,
        on_denied: gate.DeniedHandler | None = None,
    ) -> bool:
        return gate.safe_move(self, identifier, new_position, requester, on_denied)
