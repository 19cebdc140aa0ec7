"""Tests for JSON wire encoding."""

import datetime

from treesync import decode, encode


def test_encode_produces_json_bytes():
    data = encode({"event": "remove", "id": "n1"})

    assert isinstance(data, bytes)
    assert decode(data) == {"event": "remove", "id": "n1"}


def test_dates_are_written_as_iso_strings():
    message = {"event": "change", "id": "n1", "data": {"due": datetime.date(2024, 1, 2)}}

    assert decode(encode(message))["data"]["due"] == "2024-01-02"


def test_decode_accepts_text():
    assert decode('{"event": "move", "newPosition": 0}') == {"event": "move", "newPosition": 0}


def test_snapshot_survives_the_wire(app):
    snapshot = app.export_snapshot()

    assert decode(encode(snapshot)) == snapshot
