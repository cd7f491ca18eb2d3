from __future__ import annotations

import logging
from typing import Any, Callable

from flask import request
from flask_socketio import SocketIO, emit, join_room

from ..game import service
from ..game.errors import MalformedMessage, RoomNotFound
from ..game.models import Player, Room
from ..game.snapshot import room_public_state
from . import events
from . import session as sessions
from .session import Session

logger = logging.getLogger(__name__)

ROOM_NOT_FOUND_MESSAGE = "Room not found. Check the code and try again."

MessageHandler = Callable[[Session, dict], None]


def register_socketio_handlers(socketio: SocketIO) -> None:
    def _broadcast_room_state(room: Room) -> None:
        # Caller holds room.lock so the snapshot matches the mutation it follows.
        payload = {"type": events.ROOM_STATE, **room_public_state(room)}
        socketio.emit(events.ROOM_STATE, payload, to=room.code)

    def _safe_broadcast_room_state(room: Room) -> None:
        try:
            _broadcast_room_state(room)
        except Exception:
            logger.exception("broadcast to room %s failed", room.code)

    def _session_room(sess: Session) -> Room | None:
        if not sess.bound:
            return None
        return service.get_room(sess.room_code)

    def _enter_room(sess: Session, room: Room, player: Player) -> None:
        if not sessions.bind(sess, room.code, player.id):
            # Connection closed while the room was being set up.
            logger.info("sid %s gone before entering room %s", sess.sid, room.code)
            survivor = service.remove_player(room.code, player.id)
            if survivor is not None:
                with survivor.lock:
                    if not survivor.closed:
                        _safe_broadcast_room_state(survivor)
            return

        join_room(room.code)
        emit(
            events.JOINED,
            {
                "type": events.JOINED,
                "playerId": player.id,
                "isModerator": player.id == room.moderator_id,
                "roomId": room.code,
            },
        )
        with room.lock:
            if not room.closed:
                _safe_broadcast_room_state(room)

    def on_create_room(sess: Session, msg: dict) -> None:
        if sess.bound:
            logger.debug("sid %s already in room %s, ignoring create", sess.sid, sess.room_code)
            return

        name = service.clean_name(msg.get("name"))
        if not name:
            return

        room, player = service.create_room(name)
        _enter_room(sess, room, player)

    def on_join_room(sess: Session, msg: dict) -> None:
        if sess.bound:
            logger.debug("sid %s already in room %s, ignoring join", sess.sid, sess.room_code)
            return

        name = service.clean_name(msg.get("name"))
        if not name:
            return

        try:
            room, player = service.join_room(msg.get("roomId"), name)
        except RoomNotFound as exc:
            logger.info("join rejected for sid %s: %s", sess.sid, exc)
            emit(events.ERROR, {"type": events.ERROR, "message": ROOM_NOT_FOUND_MESSAGE})
            return

        _enter_room(sess, room, player)

    def _room_action(action: Callable[..., bool], *fields: str) -> MessageHandler:
        def handler(sess: Session, msg: dict) -> None:
            room = _session_room(sess)
            if room is None:
                return

            args = [msg.get(f) for f in fields]
            with room.lock:
                if not action(room, sess.player_id, *args):
                    logger.debug("ignored %s from %s in room %s", action.__name__, sess.player_id, room.code)
                    return
                _safe_broadcast_room_state(room)

        return handler

    handlers: dict[str, MessageHandler] = {
        events.CREATE_ROOM: on_create_room,
        events.JOIN_ROOM: on_join_room,
        events.UPLOAD_TASKS: _room_action(service.upload_tasks, "tasks"),
        events.VOTE: _room_action(service.cast_vote, "value"),
        events.REVEAL: _room_action(service.reveal),
        events.RESET_VOTES: _room_action(service.reset_votes),
        events.NEXT_TASK: _room_action(service.next_task),
        events.PREV_TASK: _room_action(service.prev_task),
        events.GOTO_TASK: _room_action(service.goto_task, "index"),
    }

    def _dispatch(raw: Any, kind: str | None = None) -> None:
        try:
            kind, msg = events.parse_message(raw, kind)
        except MalformedMessage as exc:
            logger.debug("dropped message from %s: %s", request.sid, exc)
            return

        sess = sessions.get_session(request.sid)
        if sess is None:
            logger.debug("dropped %s from closed sid %s", kind, request.sid)
            return
        handlers[kind](sess, msg)

    def _named_event(kind: str) -> Callable[..., None]:
        def on_event(data=None):
            _dispatch(data, kind)

        on_event.__name__ = f"on_{kind}"
        return on_event

    for kind in handlers:
        socketio.on_event(kind, _named_event(kind))

    @socketio.on("message")
    def on_message(data=None):
        _dispatch(data)

    @socketio.on("json")
    def on_json(data=None):
        _dispatch(data)

    @socketio.on("connect")
    def on_connect(auth=None):
        sessions.open_session(request.sid)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        sess = sessions.close_session(request.sid)
        if sess is None or not sess.bound:
            return

        room = service.remove_player(sess.room_code, sess.player_id)
        if room is None:
            return

        with room.lock:
            if not room.closed:
                _safe_broadcast_room_state(room)

    @socketio.on_error_default
    def on_error(exc):
        logger.error("unhandled error in socket handler for %s", request.sid, exc_info=exc)
