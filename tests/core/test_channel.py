"""Tests for the synchronous publish/subscribe channel."""

import pytest

from treesync.core.events import Channel


def test_handlers_run_in_subscription_order():
    channel = Channel()
    calls = []
    channel.subscribe(lambda value: calls.append(("first", value)))
    channel.subscribe(lambda value: calls.append(("second", value)))

    channel.emit(1)

    assert calls == [("first", 1), ("second", 1)]


def test_unsubscribe_callable_removes_handler():
    channel = Channel()
    calls = []
    unsubscribe = channel.subscribe(calls.append)

    unsubscribe()
    unsubscribe()
    channel.emit("ignored")

    assert calls == []
    assert len(channel) == 0


def test_unsubscribe_unknown_handler_is_ignored():
    Channel().unsubscribe(print)


def test_handler_may_unsubscribe_itself_while_emitting():
    channel = Channel()
    calls = []

    def once(value):
        calls.append(value)
        channel.unsubscribe(once)

    channel.subscribe(once)
    channel.emit(1)
    channel.emit(2)

    assert calls == [1]


def test_handler_exceptions_propagate():
    channel = Channel()

    def broken(*args):
        raise RuntimeError("boom")

    channel.subscribe(broken)

    with pytest.raises(RuntimeError, match="boom"):
        channel.emit()
