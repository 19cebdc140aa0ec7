"""Identity functionality: pluggable identifier sources and correlation tags."""

from treesync.core.identity.models import (
    ID_ATTRIBUTE,
    IdSource,
    SequentialIdSource,
    UuidIdSource,
    next_correlation_tag,
)

__all__ = [
    "ID_ATTRIBUTE",
    "IdSource",
    "SequentialIdSource",
    "UuidIdSource",
    "next_correlation_tag",
]
