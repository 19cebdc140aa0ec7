"""Core type definitions for treesync."""

from typing import Any

type Attributes = dict[str, Any]
"""Mapping of attribute name to value held by a Model."""

type Message = dict[str, Any]
"""JSON-shaped message exchanged with a transport (outbound publish or inbound command)."""

type Requester = Any
"""Opaque identity of whoever issued an untrusted command.

The tree never inspects it; it is handed to capability predicates and
denial sinks unchanged.
"""
