from planpoker.game import service
from planpoker.game.snapshot import room_public_state


def setup_room():
    room, alice = service.create_room("Alice")
    service.upload_tasks(room, alice.id, [{"key": "A", "summary": "x"}, {"key": "B", "summary": "y"}])
    _, bob = service.join_room(room.code, "Bob")
    return room, alice, bob


def test_snapshot_shape():
    room, alice, bob = setup_room()
    state = room_public_state(room)

    assert state["roomId"] == room.code
    assert state["moderatorId"] == alice.id
    assert state["tasks"] == [{"key": "A", "summary": "x"}, {"key": "B", "summary": "y"}]
    assert state["currentTaskIndex"] == 0
    assert state["revealed"] is False
    assert state["done"] is False
    assert state["taskAverages"] == [None, None]
    assert [p["id"] for p in state["players"]] == [alice.id, bob.id]
    assert state["players"][0]["isModerator"] is True
    assert state["players"][1]["isModerator"] is False


def test_votes_hidden_until_reveal():
    room, alice, bob = setup_room()
    service.cast_vote(room, alice.id, "5")
    service.cast_vote(room, bob.id, "8")

    state = room_public_state(room)
    assert [p["voted"] for p in state["players"]] == [True, True]
    assert [p["voteValue"] for p in state["players"]] == [None, None]
    assert state["voteStats"] == {"voted": 2, "total": 2}

    service.reveal(room, alice.id)
    state = room_public_state(room)
    assert [p["voteValue"] for p in state["players"]] == ["5", "8"]
    assert state["taskAverages"] == [6.5, None]
    assert state["voteStats"] == {"voted": 2, "total": 2, "average": 6.5, "min": 5, "max": 8, "median": 8}
    assert state["estimated"] == 1


def test_revealed_without_numeric_votes_has_no_aggregates():
    room, alice, bob = setup_room()
    service.cast_vote(room, bob.id, "?")
    service.reveal(room, alice.id)

    state = room_public_state(room)
    assert state["voteStats"] == {"voted": 1, "total": 2}
    assert state["players"][1]["voteValue"] == "?"
    assert state["players"][0]["voteValue"] is None
    assert state["estimated"] == 0
