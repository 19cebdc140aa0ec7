"""Change events and their outbound message shapes.

Every mutation that reaches the root is described by one of four events.
Each converts to the JSON-shaped message handed to the transport:

    ChangeEvent -> {"event": "change", "id": ..., "data": {...}}
    AddEvent    -> {"event": "add", "data": {snapshot}, "collection": ...}
    RemoveEvent -> {"event": "remove", "id": ...}
    MoveEvent   -> {"event": "move", "collection": ..., "id": ..., "newPosition": n}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from treesync.core.types import Message


class EventKind(Enum):
    """Tag carried in the ``event`` field of an outbound message."""

    CHANGE = "change"
    ADD = "add"
    REMOVE = "remove"
    MOVE = "move"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Attributes of a node changed."""

    node_id: str | None
    attributes: dict[str, Any] = field(default_factory=dict)

    kind = EventKind.CHANGE

    def to_message(self) -> Message:
        return {"event": self.kind.value, "id": self.node_id, "data": dict(self.attributes)}


@dataclass(frozen=True, slots=True)
class AddEvent:
    """A model was appended to a collection; carries the model's full snapshot."""

    snapshot: dict[str, Any]
    collection_id: str | None

    kind = EventKind.ADD

    def to_message(self) -> Message:
        return {"event": self.kind.value, "data": self.snapshot, "collection": self.collection_id}


@dataclass(frozen=True, slots=True)
class RemoveEvent:
    """A model was removed from its collection."""

    node_id: str | None

    kind = EventKind.REMOVE

    def to_message(self) -> Message:
        return {"event": self.kind.value, "id": self.node_id}


@dataclass(frozen=True, slots=True)
class MoveEvent:
    """A model changed position inside its collection."""

    collection_id: str | None
    node_id: str
    new_position: int

    kind = EventKind.MOVE

    def to_message(self) -> Message:
        return {
            "event": self.kind.value,
            "collection": self.collection_id,
            "id": self.node_id,
            "newPosition": self.new_position,
        }


type ChangeEventType = ChangeEvent | AddEvent | RemoveEvent | MoveEvent


def event_from_message(message: Mapping[str, Any]) -> ChangeEventType:
    """Rebuild a typed event from an outbound message.

    Args:
        message: Message produced by ``to_message()`` (possibly after a
            JSON round-trip).

    Returns:
        The matching event instance.

    Raises:
        ValueError: If the ``event`` tag is missing or unknown.
        KeyError: If a required field is absent.
    """
    try:
        kind = EventKind(message.get("event"))
    except ValueError as e:
        raise ValueError(f"Not a publish message: {message.get('event')!r}") from e

    if kind is EventKind.CHANGE:
        return ChangeEvent(node_id=message["id"], attributes=dict(message.get("data") or {}))
    if kind is EventKind.ADD:
        return AddEvent(snapshot=message["data"], collection_id=message.get("collection"))
    if kind is EventKind.REMOVE:
        return RemoveEvent(node_id=message["id"])
    return MoveEvent(
        collection_id=message.get("collection"),
        node_id=message["id"],
        new_position=int(message["newPosition"]),
    )
