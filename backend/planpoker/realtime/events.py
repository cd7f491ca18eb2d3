from __future__ import annotations

import json
from typing import Any

from ..game.errors import MalformedMessage

# Client -> server
CREATE_ROOM = "create_room"
JOIN_ROOM = "join_room"
UPLOAD_TASKS = "upload_tasks"
VOTE = "vote"
REVEAL = "reveal"
RESET_VOTES = "reset_votes"
NEXT_TASK = "next_task"
PREV_TASK = "prev_task"
GOTO_TASK = "goto_task"

# Server -> client
JOINED = "joined"
ROOM_STATE = "room_state"
ERROR = "error"

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    CREATE_ROOM: ("name",),
    JOIN_ROOM: ("name", "roomId"),
    UPLOAD_TASKS: ("tasks",),
    VOTE: ("value",),
    REVEAL: (),
    RESET_VOTES: (),
    NEXT_TASK: (),
    PREV_TASK: (),
    GOTO_TASK: ("index",),
}


def parse_message(raw: Any, kind: str | None = None) -> tuple[str, dict]:
    """Validate an inbound message and return ``(kind, payload)``.

    ``raw`` may be a JSON string or an already decoded object. When ``kind``
    is None the message type is read from its ``type`` field, which is how
    generic ``message`` events arrive; named events pass their event name.
    Raises MalformedMessage for anything that should be dropped.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise MalformedMessage("payload is not valid JSON") from exc

    if raw is None and kind is not None:
        raw = {}
    if not isinstance(raw, dict):
        raise MalformedMessage("payload is not an object")

    kind = kind or raw.get("type")
    if not isinstance(kind, str) or kind not in REQUIRED_FIELDS:
        raise MalformedMessage(f"unknown message type {kind!r}")

    missing = [f for f in REQUIRED_FIELDS[kind] if raw.get(f) is None]
    if missing:
        raise MalformedMessage(f"{kind} missing {', '.join(missing)}")

    if kind == UPLOAD_TASKS and not isinstance(raw["tasks"], list):
        raise MalformedMessage("upload_tasks.tasks is not a list")

    return kind, raw
