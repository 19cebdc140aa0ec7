"""Attribute schema models: the closed set of type tags and their errors."""

from __future__ import annotations

import datetime
from collections.abc import Callable
from enum import Enum
from typing import Any


def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def _is_date(value: Any) -> bool:
    # datetime.datetime is a subclass of datetime.date
    return isinstance(value, datetime.date)


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TypeTag(Enum):
    """Runtime type a required attribute must hold."""

    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    NUMBER = "number"

    @classmethod
    def parse(cls, tag: str | TypeTag) -> TypeTag:
        """Normalize a tag given as enum member or case-insensitive name.

        Raises:
            UnknownTypeTagError: If the tag is not in the closed set.
        """
        if isinstance(tag, TypeTag):
            return tag
        try:
            return cls(tag.lower())
        except ValueError as e:
            allowed = ", ".join(t.value for t in cls)
            raise UnknownTypeTagError(f"Unknown type tag {tag!r}; expected one of {allowed}") from e

    def get_validator(self) -> Callable[[Any], bool]:
        """Get the predicate that accepts values of this tag."""
        validators = {
            TypeTag.STRING: _is_string,
            TypeTag.BOOLEAN: _is_boolean,
            TypeTag.DATE: _is_date,
            TypeTag.ARRAY: _is_array,
            TypeTag.NUMBER: _is_number,
        }
        return validators[self]


class UnknownTypeTagError(ValueError):
    """Raised when a schema names a type tag outside the supported set."""

    pass


class AttributeTypeError(TypeError):
    """Raised when an attribute value does not match its required type tag.

    Attributes:
        name: Attribute that failed validation.
        expected: Tag the value should have matched.
        value: Offending value.
        type_name: Type name of the node being validated.
    """

    def __init__(self, name: str, expected: TypeTag, value: Any, type_name: str = "model"):
        self.name = name
        self.expected = expected
        self.value = value
        self.type_name = type_name
        super().__init__(
            f"The '{name}' attribute of a '{type_name}' must be a '{expected.value}'. "
            f"You gave me {value!r}."
        )
