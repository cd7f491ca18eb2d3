from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock


@dataclass(frozen=True)
class Task:
    key: str
    summary: str


@dataclass
class Player:
    id: str
    name: str
    voted: bool = False
    vote_value: str | None = None

    def clear_vote(self) -> None:
        self.voted = False
        self.vote_value = None


@dataclass
class Room:
    code: str
    moderator_id: str
    tasks: list[Task] = field(default_factory=list)
    current_task_index: int = 0
    revealed: bool = False
    task_averages: list[float | None] = field(default_factory=list)
    players: dict[str, Player] = field(default_factory=dict)
    closed: bool = False
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    @property
    def current_task(self) -> Task | None:
        if 0 <= self.current_task_index < len(self.tasks):
            return self.tasks[self.current_task_index]
        return None

    @property
    def is_done(self) -> bool:
        return bool(self.tasks) and self.current_task_index >= len(self.tasks)
