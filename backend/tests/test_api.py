from planpoker.game import service


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"ok": True, "rooms": 0}

    service.create_room("Alice")
    assert client.get("/api/health").get_json()["rooms"] == 1


def test_room_lookup_is_redacted(client):
    room, alice = service.create_room("Alice")
    service.upload_tasks(room, alice.id, [{"key": "A", "summary": "x"}])
    service.cast_vote(room, alice.id, "5")

    res = client.get(f"/api/rooms/{room.code.lower()}")
    assert res.status_code == 200
    data = res.get_json()
    assert data["roomId"] == room.code
    assert data["players"][0]["voted"] is True
    assert data["players"][0]["voteValue"] is None


def test_room_lookup_missing(client):
    res = client.get("/api/rooms/ABCDEF")
    assert res.status_code == 404
    assert res.get_json() == {"error": "room_not_found"}
