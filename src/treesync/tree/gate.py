"""Authorization gate for untrusted mutation commands.

Every mutation an observer can request goes through one of the ``safe_*``
functions below. The gate only asks capability predicates supplied by the
node type; it never looks at concrete classes.

Usage:
    class Post(Model):
        client_editable = ("title",)

        def can_edit(self, requester) -> bool:
            return self.collection.parent.author is requester

    post.safe_set({"title": "new"}, requester, on_denied=report)

Denied operations never raise. They are routed to ``on_denied(kind,
requester, *context)`` and otherwise skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from treesync.core.identity import ID_ATTRIBUTE
from treesync.core.types import Requester

logger = logging.getLogger(__name__)

type DeniedHandler = Callable[..., Any]
"""Sink called as ``on_denied(kind, requester, *context)`` for each denial."""


class CapabilityContractError(TypeError):
    """Raised when a node type exposes gated operations it cannot authorize."""

    pass


@runtime_checkable
class Editable(Protocol):
    """Capability to edit a node's attributes, delete it, or call its methods."""

    def can_edit(self, requester: Requester) -> bool: ...


@runtime_checkable
class Addable(Protocol):
    """Capability to add new members to a collection."""

    def can_add(self, requester: Requester) -> bool: ...


@runtime_checkable
class Movable(Protocol):
    """Capability to reorder members of a collection."""

    def can_move(self, requester: Requester) -> bool: ...


class GatedModel(Editable, Protocol):
    """What the gate needs from a model."""

    client_editable: frozenset[str]
    exposed_methods: frozenset[str]

    @property
    def id(self) -> str | None: ...

    @property
    def collection(self) -> Any | None: ...

    def set(self, attributes: Mapping[str, Any] | None = None, /, *, silent: bool = False) -> Any:
        ...


class GatedCollection(Addable, Movable, Protocol):
    """What the gate needs from a collection."""

    @property
    def id(self) -> str | None: ...

    @property
    def registry(self) -> Any: ...

    def new_model(self) -> Any: ...

    def add(self, item: Any, /, *, silent: bool = False) -> Any: ...

    def remove(self, item: Any, /, *, silent: bool = False) -> Any: ...

    def move_item(self, identifier: str, new_position: int) -> bool: ...

    def __contains__(self, item: object) -> bool: ...


def _deny(
    on_denied: DeniedHandler | None,
    kind: str,
    target: str | None,
    requester: Requester,
    *context: Any,
) -> None:
    logger.info(f"Denied {kind} on {target} for requester {type(requester).__name__}")
    if on_denied is None:
        logger.warning(f"Denied {kind} has no on_denied handler; dropping silently")
        return
    on_denied(kind, requester, *context)


def safe_set(
    model: GatedModel,
    attributes: Mapping[str, Any],
    requester: Requester,
    on_denied: DeniedHandler | None = None,
) -> dict[str, Any]:
    """Apply the permitted subset of an untrusted attribute batch.

    Each key is judged on its own: it is permitted iff it is not the
    identifier, it is listed in ``client_editable`` and ``can_edit``
    accepts the requester. Every rejected key reports
    ``on_denied("set", requester, attributes)``.

    Args:
        model: Target model.
        attributes: Untrusted attribute batch.
        requester: Who asked.
        on_denied: Denial sink.

    Returns:
        The attributes that were applied.

    Raises:
        AttributeTypeError: If a permitted attribute fails schema validation.
            Nothing in the batch is applied in that case.
    """
    editable: bool | None = None
    accepted: dict[str, Any] = {}
    for key, value in attributes.items():
        permitted = key != ID_ATTRIBUTE and key in model.client_editable
        if permitted:
            if editable is None:
                editable = bool(model.can_edit(requester))
            permitted = editable
        if permitted:
            accepted[key] = value
        else:
            _deny(on_denied, "set", model.id, requester, attributes)

    if accepted:
        model.set(accepted)
        logger.debug(f"safe_set applied {sorted(accepted)} on {model.id}")
    return accepted


def safe_delete(
    model: GatedModel,
    requester: Requester,
    on_denied: DeniedHandler | None = None,
) -> bool:
    """Remove a model from its owning collection if the requester may edit it.

    Reports ``on_denied("delete", requester, model)`` when the model is not a
    member of a collection (including one built by ``new_model`` but never
    added) or ``can_edit`` refuses.

    Returns:
        True if the model was removed.
    """
    collection = model.collection
    if collection is not None and model in collection and model.can_edit(requester):
        collection.remove(model)
        logger.debug(f"safe_delete removed {model.id}")
        return True
    _deny(on_denied, "delete", model.id, requester, model)
    return False


def safe_add(
    collection: GatedCollection,
    attributes: Mapping[str, Any],
    requester: Requester,
    on_denied: DeniedHandler | None = None,
) -> Any | None:
    """Create a member from untrusted attributes.

    When ``can_add`` accepts, a new empty element is built, the attributes
    are applied through ``safe_set`` (individual keys may still be denied)
    and the element is appended regardless. If a permitted attribute fails
    validation the new element is released from the registry and the error
    propagates. Otherwise reports
    ``on_denied("add", requester, attributes, collection)``.

    Returns:
        The added model, or None if denied.
    """
    if not collection.can_add(requester):
        _deny(on_denied, "add", collection.id, requester, attributes, collection)
        return None
    model = collection.new_model()
    try:
        safe_set(model, attributes, requester, on_denied)
    except Exception:
        # never added, so nothing may resolve it by identifier
        collection.registry.release(model)
        raise
    collection.add(model)
    logger.debug(f"safe_add appended {model.id} to {collection.id}")
    return model


def safe_move(
    collection: GatedCollection,
    identifier: str,
    new_position: int,
    requester: Requester,
    on_denied: DeniedHandler | None = None,
) -> bool:
    """Reposition a member if ``can_move`` accepts.

    Reports ``on_denied("move", requester, identifier, new_position)``
    otherwise.

    Returns:
        True if the order changed.
    """
    if not collection.can_move(requester):
        _deny(on_denied, "move", collection.id, requester, identifier, new_position)
        return False
    return collection.move_item(identifier, new_position)


def safe_call(
    model: GatedModel,
    method_name: str,
    requester: Requester,
    on_denied: DeniedHandler | None = None,
) -> bool:
    """Invoke an exposed zero-argument method.

    Permitted iff the name is in ``exposed_methods`` and ``can_edit``
    accepts. Reports ``on_denied("call", requester, method_name, model)``
    otherwise.

    Returns:
        True if the method ran.
    """
    if method_name in model.exposed_methods and model.can_edit(requester):
        getattr(model, method_name)()
        logger.debug(f"safe_call ran {method_name} on {model.id}")
        return True
    _deny(on_denied, "call", model.id, requester, method_name, model)
    return False


def check_capability_contract(cls: type, base: type) -> None:
    """Verify at class definition that gated operations can be authorized.

    A model type that whitelists client-editable attributes or exposed
    methods must implement ``can_edit``; every exposed method must be a
    callable attribute of the class.

    Args:
        cls: Newly defined node class.
        base: Base class whose default predicate denies everything.

    Raises:
        CapabilityContractError: If the contract is violated.
    """
    editable = getattr(cls, "client_editable", None) or ()
    exposed = getattr(cls, "exposed_methods", None) or ()
    exposes = bool(editable) or bool(exposed)
    if exposes and getattr(cls, "can_edit", None) is getattr(base, "can_edit", None):
        raise CapabilityContractError(
            f"{cls.__name__} declares client_editable/exposed_methods but does not "
            f"implement can_edit()"
        )
    for name in exposed:
        if not callable(getattr(cls, name, None)):
            raise CapabilityContractError(
                f"{cls.__name__} exposes {name!r}, which is not a method of the class"
            )
