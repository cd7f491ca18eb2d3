from __future__ import annotations

from dataclasses import asdict

from . import service
from .models import Room


def _as_number(n: float) -> int | float:
    return int(n) if n.is_integer() else n


def vote_stats(room: Room) -> dict:
    """Progress counters, plus numeric aggregates once votes are revealed."""
    stats: dict = {
        "voted": sum(1 for p in room.players.values() if p.voted),
        "total": len(room.players),
    }
    if not room.revealed:
        return stats

    numbers = sorted(service.numeric_votes(room))
    if numbers:
        stats["average"] = service.average(numbers)
        stats["min"] = _as_number(numbers[0])
        stats["max"] = _as_number(numbers[-1])
        stats["median"] = _as_number(numbers[len(numbers) // 2])
    return stats


def room_public_state(room: Room) -> dict:
    with room.lock:
        # Vote values stay hidden from everyone, moderator included, until reveal.
        players = [
            {
                "id": p.id,
                "name": p.name,
                "isModerator": p.id == room.moderator_id,
                "voted": p.voted,
                "voteValue": p.vote_value if room.revealed else None,
            }
            for p in room.players.values()
        ]

        return {
            "roomId": room.code,
            "moderatorId": room.moderator_id,
            "tasks": [asdict(t) for t in room.tasks],
            "currentTaskIndex": room.current_task_index,
            "revealed": room.revealed,
            "done": room.is_done,
            "taskAverages": list(room.task_averages),
            "players": players,
            "voteStats": vote_stats(room),
            "estimated": sum(1 for a in room.task_averages if a is not None),
        }
