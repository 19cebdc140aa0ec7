"""Schema operations: pure validation functions over attribute batches."""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter, ValidationError

from treesync.core.schema.models import AttributeTypeError, TypeTag

type Schema = Mapping[str, TypeTag]

_date_adapter: TypeAdapter[datetime.date] = TypeAdapter(datetime.date)
_datetime_adapter: TypeAdapter[datetime.datetime] = TypeAdapter(datetime.datetime)


def normalize_schema(raw: Mapping[str, str | TypeTag] | None) -> dict[str, TypeTag]:
    """Convert a user-declared ``required`` mapping into TypeTag members.

    Args:
        raw: Attribute name -> tag (enum member or name such as ``"string"``).

    Returns:
        Attribute name -> TypeTag.

    Raises:
        UnknownTypeTagError: If any tag is outside the supported set.
    """
    if not raw:
        return {}
    return {name: TypeTag.parse(tag) for name, tag in raw.items()}


def check_type(tag: TypeTag, value: Any, name: str, type_name: str = "model") -> None:
    """Check a single value against a tag.

    Raises:
        AttributeTypeError: If value's runtime type does not match tag.
    """
    if not tag.get_validator()(value):
        raise AttributeTypeError(name, tag, value, type_name)


def validate_attributes(
    schema: Schema, attributes: Mapping[str, Any], type_name: str = "model"
) -> None:
    """Validate every schema-covered attribute of a batch before it is committed.

    Attributes without a schema entry are accepted as-is. The first failure
    aborts validation, so callers must not apply any part of the batch when
    this raises.

    Raises:
        AttributeTypeError: On the first mismatching attribute.
    """
    for name, value in attributes.items():
        tag = schema.get(name)
        if tag is not None:
            check_type(tag, value, name, type_name)


def ensure_required(
    schema: Schema, attributes: Mapping[str, Any], type_name: str = "model"
) -> None:
    """Check that every schema attribute is present and well-typed.

    A missing attribute is reported as a mismatch against ``None``.

    Raises:
        AttributeTypeError: On the first missing or mismatching attribute.
    """
    for name, tag in schema.items():
        check_type(tag, attributes.get(name), name, type_name)


def parse_wire_attributes(schema: Schema, attributes: Mapping[str, Any]) -> dict[str, Any]:
    """Turn ISO 8601 strings back into dates for ``date``-tagged attributes.

    JSON has no date type, so dates arrive as the strings written by the wire
    encoder. Strings that do not parse are left alone for validation to
    reject with an ``AttributeTypeError``.

    Args:
        schema: Attribute name -> tag.
        attributes: Batch decoded from the wire.

    Returns:
        A copy of ``attributes`` with date strings parsed.
    """
    parsed = dict(attributes)
    for name, value in attributes.items():
        if schema.get(name) is not TypeTag.DATE or not isinstance(value, str):
            continue
        adapter = _datetime_adapter if "T" in value else _date_adapter
        try:
            parsed[name] = adapter.validate_python(value)
        except ValidationError:
            continue
    return parsed
