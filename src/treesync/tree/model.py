"""Model: a labeled attribute bag with optional owned child models and collections.

Usage:
    class Person(Model):
        required = {"name": "string"}
        exposed_methods = ("dance",)

        def dance(self) -> None:
            self.set(moving=True)

        def can_edit(self, requester) -> bool:
            return requester is self

    class App(Model):
        def __init__(self, attributes=None, /, **kwargs):
            super().__init__(attributes, **kwargs)
            self.add_child_collection("posts", Posts)
            self.add_child_model("author", Person)

    app = App()
    app.publish.subscribe(transport.send)
    app.author.set(name="henrik")  # -> {"event": "change", "id": ..., "data": {...}}
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Self

from treesync.core.events import AddEvent, Channel, ChangeEvent, MoveEvent, RemoveEvent
from treesync.core.identity import ID_ATTRIBUTE
from treesync.core.schema import (
    TypeTag,
    check_type,
    ensure_required,
    normalize_schema,
    parse_wire_attributes,
    validate_attributes,
)
from treesync.core.types import Attributes, Requester
from treesync.registry import Registry, use_registry
from treesync.tree import codec, gate
from treesync.tree.node import Node

if TYPE_CHECKING:
    from treesync.tree.codec import ModelSnapshot
    from treesync.tree.collection import Collection


class Model(Node):
    """Attribute bag with identity, validation, child nodes and gated mutation.

    Class attributes configure a model type:
        required: attribute name -> type tag, validated before every commit.
        client_editable: attributes an untrusted requester may set.
        exposed_methods: zero-argument methods an untrusted requester may call.

    Channels (in addition to ``publish`` and ``id_changed``):
        changed: ``(model, changes)`` after a non-silent set commits.
    """

    type_name = "model"
    required: ClassVar[Mapping[str, str | TypeTag]] = {}
    client_editable: ClassVar[frozenset[str]] = frozenset()
    exposed_methods: ClassVar[frozenset[str]] = frozenset()
    _schema: ClassVar[dict[str, TypeTag]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.client_editable = frozenset(cls.client_editable)
        cls.exposed_methods = frozenset(cls.exposed_methods)
        cls._schema = normalize_schema(cls.required)
        gate.check_capability_contract(cls, Model)

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        /,
        *,
        registry: Registry | None = None,
        **kwargs: Any,
    ):
        super().__init__(registry=registry)
        self._attributes: Attributes = {}
        self._collection_ref: Callable[[], Collection | None] | None = None
        self._collections: dict[str, Collection] = {}
        self._models: dict[str, Model] = {}
        self.changed = Channel()

        initial = {**(attributes or {}), **kwargs}
        if initial:
            self.set(initial, silent=True)
        self.changed.subscribe(self._publish_change)
        self.register()

    # Identity

    @property
    def id(self) -> str | None:
        return self._attributes.get(ID_ATTRIBUTE)

    @id.setter
    def id(self, value: str | None) -> None:
        self.set({ID_ATTRIBUTE: value}, silent=True)

    @property
    def collection(self) -> Collection | None:
        """Collection this model belongs to (non-owning)."""
        return self._collection_ref() if self._collection_ref is not None else None

    # Attributes

    @property
    def attributes(self) -> Attributes:
        """Shallow copy of all attributes."""
        return dict(self._attributes)

    def get(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def has(self, name: str) -> bool:
        return self._attributes.get(name) is not None

    def set(
        self,
        attributes: Mapping[str, Any] | None = None,
        /,
        *,
        silent: bool = False,
        **kwargs: Any,
    ) -> Attributes:
        """Validate and commit a batch of attributes.

        The whole batch is validated against ``required`` first; if any
        attribute fails, nothing is applied. Values equal to the current ones
        are not changes and raise no event.

        Args:
            attributes: Attribute batch.
            silent: Commit without emitting ``changed`` (and so without
                publishing). Identifier re-keying still happens.
            **kwargs: Additional attributes merged into the batch.

        Returns:
            The attributes that actually changed.

        Raises:
            AttributeTypeError: If a required attribute has the wrong type.
        """
        batch = {**(attributes or {}), **kwargs}
        if not batch:
            return {}
        self.validate(batch)

        changes = {
            key: value
            for key, value in batch.items()
            if key not in self._attributes or self._attributes[key] != value
        }
        if not changes:
            return {}

        old_id = self.id
        self._attributes.update(changes)
        if ID_ATTRIBUTE in changes:
            self.id_changed.emit(self, old_id, self.id)
        if not silent:
            self.changed.emit(self, dict(changes))
        return changes

    def unset(self, name: str, *, silent: bool = False) -> bool:
        """Remove an attribute.

        Raises:
            ValueError: If asked to remove the identifier.

        Returns:
            True if the attribute existed.
        """
        if name == ID_ATTRIBUTE:
            raise ValueError("The identifier attribute cannot be unset")
        if name not in self._attributes:
            return False
        del self._attributes[name]
        if not silent:
            self.changed.emit(self, {name: None})
        return True

    def toggle(self, name: str) -> Attributes:
        """Set a boolean attribute to the negation of its current value (unset is False)."""
        return self.set({name: not self.get(name)})

    # Validation

    def validate(self, attributes: Mapping[str, Any]) -> None:
        """Validate an attribute batch against ``required`` without committing it."""
        validate_attributes(self._schema, attributes, self.type_name)

    def check_type(self, tag: str | TypeTag, value: Any, name: str) -> None:
        """Check one value against a type tag, naming this model type in the error."""
        check_type(TypeTag.parse(tag), value, name, self.type_name)

    def ensure_required(self) -> None:
        """Check every ``required`` attribute is present with the right type."""
        ensure_required(self._schema, self._attributes, self.type_name)

    @classmethod
    def parse_wire_attributes(cls, attributes: Mapping[str, Any]) -> Attributes:
        """Parse date strings received over the wire for this type's ``date`` attributes."""
        return parse_wire_attributes(cls._schema, attributes)

    # Children

    @property
    def collections(self) -> dict[str, Collection]:
        """Owned child collections by label."""
        return dict(self._collections)

    @property
    def models(self) -> dict[str, Model]:
        """Owned child models by label."""
        return dict(self._models)

    def add_child_collection(self, label: str, factory: Callable[[], Collection]) -> Collection:
        """Create and own a child collection under ``label``.

        The collection's publish messages bubble through this model; its
        add/remove/move events are re-tagged here as publish messages.

        Args:
            label: Name of the child, also exposed as an attribute.
            factory: Zero-argument callable building the collection.

        Returns:
            The new collection.
        """
        self._check_label(label)
        with use_registry(self._registry):
            child = factory()
        child._set_parent(self)
        child.publish.subscribe(self._relay)
        child.added.subscribe(self._publish_add)
        child.removed.subscribe(self._publish_remove)
        child.moved.subscribe(self._publish_move)
        self._collections[label] = child
        setattr(self, label, child)
        return child

    def add_child_model(self, label: str, factory: Callable[[], Model]) -> Model:
        """Create and own a child model under ``label``; its publishes bubble through here."""
        self._check_label(label)
        with use_registry(self._registry):
            child = factory()
        child._set_parent(self)
        child.publish.subscribe(self._relay)
        self._models[label] = child
        setattr(self, label, child)
        return child

    def _check_label(self, label: str) -> None:
        if label in self._collections or label in self._models:
            raise ValueError(f"{type(self).__name__} already has a child named {label!r}")
        if hasattr(type(self), label) or label in self.__dict__:
            raise ValueError(f"Child label {label!r} would shadow an attribute of {self!r}")

    def walk(self) -> Iterator[Node]:
        yield self
        for collection in self._collections.values():
            yield from collection.walk()
        for model in self._models.values():
            yield from model.walk()

    # Bubbling

    def _relay(self, message: dict[str, Any]) -> None:
        self.publish.emit(message)

    def _publish_change(self, model: Model, changes: Attributes) -> None:
        self.publish.emit(ChangeEvent(node_id=self.id, attributes=self.attributes).to_message())

    def _publish_add(self, model: Model, collection: Collection) -> None:
        event = AddEvent(snapshot=dict(model.export_snapshot()), collection_id=collection.id)
        self.publish.emit(event.to_message())

    def _publish_remove(self, model: Model, collection: Collection) -> None:
        self.publish.emit(RemoveEvent(node_id=model.id).to_message())

    def _publish_move(self, collection: Collection, identifier: str, new_position: int) -> None:
        event = MoveEvent(
            collection_id=collection.id, node_id=identifier, new_position=new_position
        )
        self.publish.emit(event.to_message())

    # Snapshots

    def export_snapshot(self, recurse: bool = True) -> ModelSnapshot:
        """Export this subtree. See ``treesync.tree.codec.export_snapshot``."""
        return codec.export_snapshot(self, recurse=recurse)

    def import_snapshot(
        self, snapshot: Mapping[str, Any], silent: bool = False, strict: bool = False
    ) -> Self:
        """Merge a snapshot into this subtree. See ``treesync.tree.codec.import_snapshot``."""
        codec.import_snapshot(self, snapshot, silent=silent, strict=strict)
        return self

    # Gate

    def can_edit(self, requester: Requester) -> bool:
        """Capability predicate for set/delete/call. Denies unless overridden."""
        return False

    def safe_set(
        self,
        attributes: Mapping[str, Any],
        requester: Requester,
        on_denied: gate.DeniedHandler | None = None,
    ) -> Attributes:
        return gate.safe_set(self, attributes, requester, on_denied)

    def safe_delete(
        self, requester: Requester, on_denied: gate.DeniedHandler | None = None
    ) -> bool:
        return gate.safe_delete(self, requester, on_denied)

    def safe_call(
        self,
        method_name: str,
        requester: Requester,
        on_denied: gate.DeniedHandler | None = None,
    ) -> bool:
        return gate.safe_call(self, method_name, requester, on_denied)
