"""Core functionalities: stateless protocols, primitives and message models.

Architecture Note:
    core/ contains pure building blocks with no runtime state of their own.
    For stateful services, see registry/, tree/ and sync/.
"""

from treesync.core.commands import (
    AddCommand,
    BaseCommand,
    Command,
    DeleteCommand,
    MethodCommand,
    MoveCommand,
    SetCommand,
    parse_command,
)
from treesync.core.events import (
    AddEvent,
    ChangeEvent,
    Channel,
    EventKind,
    MoveEvent,
    RemoveEvent,
    event_from_message,
)
from treesync.core.identity import (
    ID_ATTRIBUTE,
    IdSource,
    SequentialIdSource,
    UuidIdSource,
    next_correlation_tag,
)
from treesync.core.schema import (
    AttributeTypeError,
    TypeTag,
    UnknownTypeTagError,
    check_type,
    ensure_required,
    normalize_schema,
    validate_attributes,
)
from treesync.core.types import Attributes, Message, Requester

__all__ = [
    # Types
    "Attributes",
    "Message",
    "Requester",
    # Identity
    "ID_ATTRIBUTE",
    "IdSource",
    "UuidIdSource",
    "SequentialIdSource",
    "next_correlation_tag",
    # Schema
    "TypeTag",
    "AttributeTypeError",
    "UnknownTypeTagError",
    "check_type",
    "ensure_required",
    "normalize_schema",
    "validate_attributes",
    # Events
    "Channel",
    "EventKind",
    "ChangeEvent",
    "AddEvent",
    "RemoveEvent",
    "MoveEvent",
    "event_from_message",
    # Commands
    "BaseCommand",
    "Command",
    "SetCommand",
    "DeleteCommand",
    "AddCommand",
    "MoveCommand",
    "MethodCommand",
    "parse_command",
]
