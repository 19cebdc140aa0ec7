"""CommandSender: observer-side builders for inbound commands.

The observer never mutates its replica directly in response to user input;
it asks the authoritative side, whose publish stream then updates the
replica.

Usage:
    sender = CommandSender(transport)
    sender.set(post, {"title": "renamed"})
    sender.move(post.comments, comment.id, 0)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from treesync.core.commands import (
    AddCommand,
    BaseCommand,
    DeleteCommand,
    MethodCommand,
    MoveCommand,
    SetCommand,
)
from treesync.sync.protocol import Transport
from treesync.tree import Collection, Model


class CommandSender:
    """Sends validated command messages for local nodes over a transport.

    Args:
        transport: Connection to the authoritative side.
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    def _send(self, command: BaseCommand) -> BaseCommand:
        self._transport.send(command.to_message())
        return command

    @staticmethod
    def _require_id(node: Model | Collection) -> str:
        if node.id is None:
            raise ValueError(f"{node!r} has no identifier yet; load a snapshot first")
        return node.id

    def set(self, model: Model, attributes: Mapping[str, Any]) -> BaseCommand:
        return self._send(SetCommand(id=self._require_id(model), change=dict(attributes)))

    def toggle(self, model: Model, name: str) -> BaseCommand:
        """Request the negation of a boolean attribute as seen locally."""
        return self.set(model, {name: not model.get(name)})

    def delete(self, model: Model) -> BaseCommand:
        return self._send(DeleteCommand(id=self._require_id(model)))

    def call(self, model: Model, method: str) -> BaseCommand:
        return self._send(MethodCommand(id=self._require_id(model), method=method))

    def add(self, collection: Collection, attributes: Mapping[str, Any]) -> BaseCommand:
        return self._send(AddCommand(id=self._require_id(collection), data=dict(attributes)))

    def move(self, collection: Collection, identifier: str, new_position: int) -> BaseCommand:
        return self._send(
            MoveCommand(
                collection=self._require_id(collection), id=identifier, new_position=new_position
            )
        )
