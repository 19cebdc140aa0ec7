"""Inbound command models.

Commands arrive from an untrusted observer through the transport and are
parsed here before they ever touch the tree:

    {"event": "set", "id": ..., "change": {...}}
    {"event": "delete", "id": ...}
    {"event": "add", "id": <collection id>, "data": {...}}
    {"event": "move", "collection": ..., "id": ..., "newPosition": n}
    {"event": "method", "id": ..., "method": "name"}

Usage:
    command = parse_command({"event": "delete", "id": "n42"})
    isinstance(command, DeleteCommand)  # True
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from treesync.core.types import Message


class BaseCommand(BaseModel):
    """Common configuration and wire dump for inbound commands."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_message(self) -> Message:
        """Dump to the wire shape (camelCase aliases, no unset optionals)."""
        return self.model_dump(by_alias=True, mode="python")


class SetCommand(BaseCommand):
    """Set attributes on a model."""

    event: Literal["set"] = "set"
    id: str
    change: dict[str, Any] = Field(default_factory=dict)


class DeleteCommand(BaseCommand):
    """Remove a model from its owning collection."""

    event: Literal["delete"] = "delete"
    id: str


class AddCommand(BaseCommand):
    """Create a model in a collection from untrusted attributes."""

    event: Literal["add"] = "add"
    id: str  # collection id
    data: dict[str, Any] = Field(default_factory=dict)


class MoveCommand(BaseCommand):
    """Reposition a model inside a collection."""

    event: Literal["move"] = "move"
    collection: str
    id: str
    new_position: int = Field(alias="newPosition", ge=0)


class MethodCommand(BaseCommand):
    """Invoke an exposed zero-argument method on a model."""

    event: Literal["method"] = "method"
    id: str
    method: str


Command = Annotated[
    SetCommand | DeleteCommand | AddCommand | MoveCommand | MethodCommand,
    Field(discriminator="event"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(raw: Message | str | bytes) -> Command:
    """Validate an inbound command.

    Args:
        raw: Decoded message dict, or JSON text/bytes.

    Returns:
        The concrete command model selected by the ``event`` field.

    Raises:
        pydantic.ValidationError: If the message is malformed or its
            ``event`` tag is not a known command.
    """
    if isinstance(raw, (str, bytes)):
        return _command_adapter.validate_json(raw)
    return _command_adapter.validate_python(raw)
