"""Attribute schema: closed set of type tags validated before commit."""

from treesync.core.schema.models import AttributeTypeError, TypeTag, UnknownTypeTagError
from treesync.core.schema.operations import (
    Schema,
    check_type,
    ensure_required,
    normalize_schema,
    parse_wire_attributes,
    validate_attributes,
)

__all__ = [
    "TypeTag",
    "Schema",
    "AttributeTypeError",
    "UnknownTypeTagError",
    "check_type",
    "ensure_required",
    "normalize_schema",
    "parse_wire_attributes",
    "validate_attributes",
]
