"""Events: synchronous channels and the tagged change events they carry."""

from treesync.core.events.channel import Channel, Handler
from treesync.core.events.models import (
    AddEvent,
    ChangeEvent,
    ChangeEventType,
    EventKind,
    MoveEvent,
    RemoveEvent,
    event_from_message,
)

__all__ = [
    "Channel",
    "Handler",
    "EventKind",
    "ChangeEvent",
    "AddEvent",
    "RemoveEvent",
    "MoveEvent",
    "ChangeEventType",
    "event_from_message",
]
