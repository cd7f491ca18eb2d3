from __future__ import annotations

from dataclasses import dataclass
from threading import Lock


@dataclass
class Session:
    """One Socket.IO connection; refers to its room and player by id only."""

    sid: str
    room_code: str | None = None
    player_id: str | None = None

    @property
    def bound(self) -> bool:
        return self.room_code is not None and self.player_id is not None


_lock = Lock()
_sessions: dict[str, Session] = {}


def open_session(sid: str) -> Session:
    with _lock:
        sess = _sessions.get(sid)
        if sess is None:
            sess = Session(sid=sid)
            _sessions[sid] = sess
        return sess


def get_session(sid: str) -> Session | None:
    with _lock:
        return _sessions.get(sid)


def bind(sess: Session, room_code: str, player_id: str) -> bool:
    """Attach a player to a live session; False once the session is closed."""
    with _lock:
        if _sessions.get(sess.sid) is not sess:
            return False
        sess.room_code = room_code
        sess.player_id = player_id
        return True


def close_session(sid: str) -> Session | None:
    with _lock:
        return _sessions.pop(sid, None)


def clear_sessions() -> None:
    with _lock:
        _sessions.clear()
