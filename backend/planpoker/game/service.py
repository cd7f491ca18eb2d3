from __future__ import annotations

import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from threading import RLock
from typing import Any

from ..config import Config
from .errors import RoomNotFound
from .identity import new_player_id, new_room_code, normalize_room_code
from .models import Player, Room, Task

logger = logging.getLogger(__name__)


# Registry lock is always taken before a room lock, never while holding one.
_lock = RLock()
_rooms: dict[str, Room] = {}


def clean_name(raw: Any) -> str:
    return _text(raw).strip()[: Config.MAX_NAME_LEN]


def clean_vote(raw: Any) -> str:
    return _text(raw)[: Config.MAX_VOTE_LEN]


def clean_tasks(raw: list) -> list[Task]:
    tasks: list[Task] = []
    for position, item in enumerate(raw[: Config.MAX_TASKS], start=1):
        if not isinstance(item, dict):
            continue
        key = _text(item.get("key")).strip()[: Config.MAX_TASK_KEY_LEN] or f"#{position}"
        summary = _text(item.get("summary")).strip()[: Config.MAX_TASK_SUMMARY_LEN]
        tasks.append(Task(key=key, summary=summary))
    return tasks


def _text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw)


def coerce_index(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_number(value: str | None) -> float | None:
    if value is None:
        return None
    text = value.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def numeric_votes(room: Room) -> list[float]:
    numbers = []
    for p in room.players.values():
        if not p.voted:
            continue
        n = parse_number(p.vote_value)
        if n is not None:
            numbers.append(n)
    return numbers


def average(numbers: list[float]) -> float | None:
    """Arithmetic mean rounded half-up to one decimal, or None when empty."""
    if not numbers:
        return None
    mean = Decimal(repr(sum(numbers) / len(numbers)))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ---- Registry ----

def create_room(creator_name: str) -> tuple[Room, Player]:
    with _lock:
        code = new_room_code()
        while code in _rooms:
            code = new_room_code()

        player = Player(id=new_player_id(), name=creator_name)
        room = Room(code=code, moderator_id=player.id)
        room.players[player.id] = player
        _rooms[code] = room

    logger.info("room %s created by %s (%s)", code, player.name, player.id)
    return room, player


def join_room(room_code: str, name: str) -> tuple[Room, Player]:
    code = normalize_room_code(room_code)
    with _lock:
        room = _rooms.get(code)
        if room is None:
            raise RoomNotFound(code)

        with room.lock:
            player = Player(id=new_player_id(), name=name)
            room.players[player.id] = player

    logger.info("%s (%s) joined room %s", player.name, player.id, code)
    return room, player


def get_room(room_code: str) -> Room | None:
    with _lock:
        return _rooms.get(normalize_room_code(room_code))


def list_rooms() -> list[Room]:
    with _lock:
        return list(_rooms.values())


def remove_player(room_code: str, player_id: str) -> Room | None:
    """Drop a player; deletes the room once nobody is left.

    Returns the room when it survives the removal, otherwise None.
    """
    code = normalize_room_code(room_code)
    with _lock:
        room = _rooms.get(code)
        if room is None:
            return None

        with room.lock:
            room.players.pop(player_id, None)
            if room.players:
                logger.info("player %s left room %s", player_id, code)
                return room

            room.closed = True
            del _rooms[code]

    logger.info("room %s deleted (last player %s left)", code, player_id)
    return None


def clear_rooms() -> None:
    with _lock:
        for room in _rooms.values():
            room.closed = True
        _rooms.clear()


# ---- State machine ----

def _is_moderator(room: Room, actor_id: str | None) -> bool:
    return actor_id is not None and actor_id == room.moderator_id and actor_id in room.players


def _reset_votes_locked(room: Room) -> None:
    room.revealed = False
    for p in room.players.values():
        p.clear_vote()


def upload_tasks(room: Room, actor_id: str | None, raw_tasks: Any) -> bool:
    if not isinstance(raw_tasks, list):
        return False

    with room.lock:
        if not _is_moderator(room, actor_id):
            return False

        room.tasks = clean_tasks(raw_tasks)
        room.current_task_index = 0
        room.task_averages = [None] * len(room.tasks)
        _reset_votes_locked(room)

    logger.info("room %s loaded %d tasks", room.code, len(room.tasks))
    return True


def cast_vote(room: Room, actor_id: str | None, value: Any) -> bool:
    with room.lock:
        player = room.players.get(actor_id) if actor_id else None
        if player is None or room.revealed or room.current_task is None:
            return False

        player.voted = True
        player.vote_value = clean_vote(value)
        return True


def reveal(room: Room, actor_id: str | None) -> bool:
    with room.lock:
        if not _is_moderator(room, actor_id) or room.current_task is None:
            return False

        room.revealed = True
        room.task_averages[room.current_task_index] = average(numeric_votes(room))
        return True


def reset_votes(room: Room, actor_id: str | None) -> bool:
    with room.lock:
        if not _is_moderator(room, actor_id):
            return False
        _reset_votes_locked(room)
        return True


def next_task(room: Room, actor_id: str | None) -> bool:
    with room.lock:
        if not _is_moderator(room, actor_id):
            return False
        if room.current_task_index < len(room.tasks):
            room.current_task_index += 1
        _reset_votes_locked(room)
        return True


def prev_task(room: Room, actor_id: str | None) -> bool:
    with room.lock:
        if not _is_moderator(room, actor_id):
            return False
        if room.current_task_index > 0:
            room.current_task_index -= 1
        _reset_votes_locked(room)
        return True


def goto_task(room: Room, actor_id: str | None, raw_index: Any) -> bool:
    index = coerce_index(raw_index)
    with room.lock:
        if not _is_moderator(room, actor_id):
            return False
        if index is None or not 0 <= index < len(room.tasks):
            return False
        if index == room.current_task_index:
            return False

        room.current_task_index = index
        _reset_votes_locked(room)
        return True
