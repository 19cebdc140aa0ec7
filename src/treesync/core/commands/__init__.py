"""Inbound command models validated with pydantic."""

from treesync.core.commands.models import (
    AddCommand,
    BaseCommand,
    Command,
    DeleteCommand,
    MethodCommand,
    MoveCommand,
    SetCommand,
    parse_command,
)

__all__ = [
    "BaseCommand",
    "Command",
    "SetCommand",
    "DeleteCommand",
    "AddCommand",
    "MoveCommand",
    "MethodCommand",
    "parse_command",
]
