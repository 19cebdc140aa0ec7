"""Transport protocol: the connection between authoritative and observer sides.

Delivery, ordering across connections, retries and framing are the
transport's job. The tree only hands it finished messages.

Usage:
    class WebSocketTransport:
        def send(self, message: Message) -> None:
            self._ws.send_bytes(wire.encode(message))
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from treesync.core.types import Message


@runtime_checkable
class Transport(Protocol):
    """Outbound half of a connection."""

    def send(self, message: Message) -> None:
        """Deliver one message to the other side."""
        ...
