"""Tests for inbound command parsing."""

import pytest
from pydantic import ValidationError

from treesync.core.commands import (
    AddCommand,
    DeleteCommand,
    MethodCommand,
    MoveCommand,
    SetCommand,
    parse_command,
)


@pytest.mark.parametrize(
    ("raw", "expected_type"),
    [
        ({"event": "set", "id": "n1", "change": {"title": "x"}}, SetCommand),
        ({"event": "delete", "id": "n1"}, DeleteCommand),
        ({"event": "add", "id": "n2", "data": {"title": "x"}}, AddCommand),
        ({"event": "move", "collection": "n2", "id": "n1", "newPosition": 0}, MoveCommand),
        ({"event": "method", "id": "n1", "method": "dance"}, MethodCommand),
    ],
)
def test_parse_command_selects_type_by_event(raw, expected_type):
    assert isinstance(parse_command(raw), expected_type)


def test_parse_command_accepts_json():
    command = parse_command(b'{"event": "move", "collection": "n2", "id": "n1", "newPosition": 3}')

    assert isinstance(command, MoveCommand)
    assert command.new_position == 3


def test_unknown_event_is_rejected():
    with pytest.raises(ValidationError):
        parse_command({"event": "drop_table", "id": "n1"})


def test_missing_field_is_rejected():
    with pytest.raises(ValidationError):
        parse_command({"event": "delete"})


def test_negative_position_is_rejected():
    with pytest.raises(ValidationError):
        parse_command({"event": "move", "collection": "n2", "id": "n1", "newPosition": -1})


def test_extra_fields_are_ignored():
    command = parse_command({"event": "delete", "id": "n1", "trace": "abc"})

    assert command == DeleteCommand(id="n1")


def test_to_message_uses_wire_aliases():
    message = MoveCommand(collection="n2", id="n1", new_position=2).to_message()

    assert message == {"event": "move", "collection": "n2", "id": "n1", "newPosition": 2}


def test_commands_are_frozen():
    command = SetCommand(id="n1", change={"title": "x"})

    with pytest.raises(ValidationError):
        command.id = "n2"
