"""SyncSession: hand every publish message reaching the root to a transport.

Usage:
    with SyncSession(app, transport) as session:
        transport.send({"event": "snapshot", "data": session.snapshot()})
        app.posts.add({"title": "hello"})  # -> transport.send({"event": "add", ...})
"""

from __future__ import annotations

import logging
from typing import Any, Self

from treesync.core.types import Message
from treesync.sync.protocol import Transport
from treesync.tree import Model, ModelSnapshot

logger = logging.getLogger(__name__)


class SyncSession:
    """Authoritative-side bridge from a root model to one transport.

    Args:
        root: Root of the document tree.
        transport: Destination of outbound messages.
    """

    def __init__(self, root: Model, transport: Transport):
        self._root = root
        self._transport = transport
        self._unsubscribe = root.publish.subscribe(self._forward)
        self.sent = 0

    @property
    def root(self) -> Model:
        return self._root

    def snapshot(self) -> ModelSnapshot:
        """Full export of the root for initial sync or reconciliation."""
        return self._root.export_snapshot()

    def _forward(self, message: Message) -> None:
        self._transport.send(message)
        self.sent += 1

    def close(self) -> None:
        """Stop forwarding. Safe to call more than once."""
        self._unsubscribe()
        logger.debug(f"Closed sync session for {self._root!r} after {self.sent} messages")

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
