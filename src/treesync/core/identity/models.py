"""Identifier sources and correlation tags.

Usage:
    source = UuidIdSource()
    node_id = source.next_id()

    # Deterministic ids for tests and fixtures
    source = SequentialIdSource(prefix="n")
    source.next_id()  # "n1"
"""

from __future__ import annotations

import itertools
import uuid
from typing import Protocol, runtime_checkable

ID_ATTRIBUTE = "id"
"""Attribute under which a Model stores its identifier."""


@runtime_checkable
class IdSource(Protocol):
    """Pluggable generator of process-unique identifiers.

    Only the authoritative side draws from an IdSource. Implementations must
    never hand out the same identifier twice.
    """

    def next_id(self) -> str:
        """Return a fresh identifier."""
        ...


class UuidIdSource:
    """Random UUID4 identifiers, the default for authoritative processes."""

    def next_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIdSource:
    """Monotonic identifiers: ``f"{prefix}{n}"`` for n = start, start + 1, ...

    Args:
        prefix: String prepended to every identifier.
        start: First counter value.
    """

    def __init__(self, prefix: str = "", start: int = 1):
        self._prefix = prefix
        self._counter = itertools.count(start)

    def next_id(self) -> str:
        """Allocate the next identifier in sequence.

        Returns:
            Identifier string, unique for the lifetime of this source.
        """
        return f"{self._prefix}{next(self._counter)}"


_correlation_counter = itertools.count(1)


def next_correlation_tag() -> str:
    """Return a local-only tag that distinguishes node instances in this process.

    Correlation tags are exported in snapshots for debugging and client-side
    bookkeeping, but are never expected to match across processes.
    """
    return f"c{next(_correlation_counter)}"
