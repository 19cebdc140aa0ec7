"""Explicit synchronous publish/subscribe channel.

Usage:
    changed = Channel()
    unsubscribe = changed.subscribe(lambda model, changes: ...)
    changed.emit(model, {"title": "new"})
    unsubscribe()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

type Handler = Callable[..., Any]


class Channel:
    """Ordered list of handlers invoked synchronously on emit.

    Handlers run in subscription order within the caller's stack. Exceptions
    raised by a handler propagate to the emitter.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """Register a handler.

        Args:
            handler: Callable receiving the emitted arguments.

        Returns:
            Zero-argument callable that removes this subscription.
        """
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, *args: Any) -> None:
        """Invoke every handler with ``args``.

        Iterates over a copy so handlers may (un)subscribe while running.
        """
        for handler in list(self._handlers):
            handler(*args)

    def __len__(self) -> int:
        return len(self._handlers)
