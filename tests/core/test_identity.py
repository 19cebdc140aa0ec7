"""Tests for identifier sources and correlation tags.

Critical Invariants:
- A source never hands out the same identifier twice
- Correlation tags are distinct per node instance
"""

import uuid

from hypothesis import given
from hypothesis import strategies as st

from treesync.core.identity import (
    IdSource,
    SequentialIdSource,
    UuidIdSource,
    next_correlation_tag,
)


def test_sequential_source_counts_from_start():
    source = SequentialIdSource(prefix="n", start=5)

    assert [source.next_id() for _ in range(3)] == ["n5", "n6", "n7"]


def test_sequential_source_without_prefix():
    source = SequentialIdSource()

    assert source.next_id() == "1"


@given(count=st.integers(min_value=1, max_value=200), prefix=st.text(max_size=3))
def test_sequential_ids_are_unique(count, prefix):
    """PROPERTY: No identifier repeats within one source."""
    source = SequentialIdSource(prefix=prefix)
    ids = [source.next_id() for _ in range(count)]

    assert len(set(ids)) == count


def test_uuid_source_returns_uuid4_strings():
    source = UuidIdSource()
    first, second = source.next_id(), source.next_id()

    assert uuid.UUID(first).version == 4
    assert first != second


def test_sources_satisfy_protocol():
    assert isinstance(UuidIdSource(), IdSource)
    assert isinstance(SequentialIdSource(), IdSource)


def test_correlation_tags_are_distinct():
    tags = {next_correlation_tag() for _ in range(50)}

    assert len(tags) == 50
    assert all(tag.startswith("c") for tag in tags)


def test_every_node_gets_its_own_correlation_tag(blog):
    first, second = blog.Person(), blog.Person()

    assert first.cid != second.cid
