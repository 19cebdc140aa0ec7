"""JSON wire encoding for messages and snapshots.

Dates and datetimes are written as ISO 8601 strings and decode as strings.
Import and ``Replica`` parse them back for ``date``-tagged attributes via
``Model.parse_wire_attributes``.
"""

from __future__ import annotations

import datetime
import json
from typing import Any

from treesync.core.types import Message


def _to_json_compatible(value: Any) -> Any:
    if isinstance(value, datetime.date):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def encode(message: Message) -> bytes:
    """Serialize a message (or snapshot) to JSON bytes."""
    return json.dumps(message, default=_to_json_compatible).encode("utf-8")


def decode(data: str | bytes) -> Any:
    """Parse JSON text or bytes produced by ``encode``."""
    return json.loads(data)
