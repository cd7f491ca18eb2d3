from __future__ import annotations

import secrets

from ..config import Config


def new_room_code(nbytes: int | None = None) -> str:
    return secrets.token_hex(nbytes or Config.ROOM_CODE_BYTES).upper()


def new_player_id(nbytes: int | None = None) -> str:
    return secrets.token_hex(nbytes or Config.PLAYER_ID_BYTES)


def normalize_room_code(raw) -> str:
    return str(raw or "").strip().upper()
