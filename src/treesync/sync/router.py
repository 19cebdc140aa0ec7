"""CommandRouter: apply untrusted inbound commands through the gate.

Usage:
    router = CommandRouter()

    def on_message(raw: bytes, user) -> None:
        router.handle(raw, user, on_denied=audit_log.record)
"""

from __future__ import annotations

import logging

from treesync.core.commands import (
    AddCommand,
    BaseCommand,
    DeleteCommand,
    MethodCommand,
    MoveCommand,
    SetCommand,
    parse_command,
)
from treesync.core.types import Message, Requester
from treesync.registry import Registry, get_registry
from treesync.tree import Collection, DeniedHandler, Model

logger = logging.getLogger(__name__)


class CommandRouter:
    """Resolve the target of each inbound command and call its gate operation.

    Malformed commands raise ``pydantic.ValidationError``. Commands that
    address an unknown node, or a node of the wrong kind, are logged and
    dropped.

    Args:
        registry: Registry used to resolve identifiers (default: process-wide).
    """

    def __init__(self, registry: Registry | None = None):
        self._registry = registry

    @property
    def registry(self) -> Registry:
        return self._registry if self._registry is not None else get_registry()

    def handle(
        self,
        message: Message | str | bytes | BaseCommand,
        requester: Requester,
        on_denied: DeniedHandler | None = None,
    ) -> bool:
        """Parse and apply one inbound command.

        Args:
            message: Raw command (dict or JSON) or an already parsed command.
            requester: Identity of the sender, passed to capability predicates.
            on_denied: Denial sink forwarded to the gate.

        Returns:
            True if the command mutated the tree, False if it was denied,
            unresolvable, or a no-op.

        Raises:
            pydantic.ValidationError: If the message is not a valid command.
        """
        command = message if isinstance(message, BaseCommand) else parse_command(message)

        if isinstance(command, SetCommand):
            model = self._resolve(command.id, Model, command.event)
            if model is None:
                return False
            change = model.parse_wire_attributes(command.change)
            return bool(model.safe_set(change, requester, on_denied))

        if isinstance(command, DeleteCommand):
            model = self._resolve(command.id, Model, command.event)
            return model is not None and model.safe_delete(requester, on_denied)

        if isinstance(command, AddCommand):
            collection = self._resolve(command.id, Collection, command.event)
            if collection is None:
                return False
            data = collection.model_class.parse_wire_attributes(command.data)
            return collection.safe_add(data, requester, on_denied) is not None

        if isinstance(command, MoveCommand):
            collection = self._resolve(command.collection, Collection, command.event)
            return collection is not None and collection.safe_move(
                command.id, command.new_position, requester, on_denied
            )

        if isinstance(command, MethodCommand):
            model = self._resolve(command.id, Model, command.event)
            return model is not None and model.safe_call(command.method, requester, on_denied)

        raise TypeError(f"Unsupported command type {type(command).__name__}")

    def _resolve[NodeT: (Model, Collection)](
        self, identifier: str, kind: type[NodeT], event: str
    ) -> NodeT | None:
        node = self.registry.lookup(identifier)
        if node is None:
            logger.warning(f"Dropping {event!r} command for unknown node {identifier}")
            return None
        if not isinstance(node, kind):
            logger.warning(
                f"Dropping {event!r} command: {identifier} is a {type(node).__name__}, "
                f"not a {kind.__name__}"
            )
            return None
        return node
