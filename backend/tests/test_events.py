import pytest

from planpoker.game.errors import MalformedMessage
from planpoker.realtime import events


def test_parse_json_string_with_type():
    kind, msg = events.parse_message('{"type": "vote", "value": "5"}')
    assert kind == events.VOTE
    assert msg["value"] == "5"


def test_named_event_without_payload():
    assert events.parse_message(None, events.REVEAL) == (events.REVEAL, {})


@pytest.mark.parametrize(
    "raw,kind",
    [
        ("{not json", None),
        ("[1, 2]", None),
        ({"type": "explode"}, None),
        ({"type": ["vote"], "value": "5"}, None),
        ({"type": {"kind": "vote"}}, None),
        ({}, None),
        ({"type": "join_room", "name": "Bob"}, None),
        ({"name": "Bob"}, events.JOIN_ROOM),
        ({}, events.VOTE),
        ({"tasks": "a,b"}, events.UPLOAD_TASKS),
        ({}, events.GOTO_TASK),
        (None, None),
    ],
)
def test_malformed_messages(raw, kind):
    with pytest.raises(MalformedMessage):
        events.parse_message(raw, kind)
