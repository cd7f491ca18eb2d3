from __future__ import annotations

from flask import Blueprint, jsonify

from ..game import service
from ..game.snapshot import room_public_state

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    # Lets the client check a code before opening a socket.
    room = service.get_room(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(room_public_state(room))
