from flask_socketio import join_room, leave_room, emit
from dropfour import socketio
from dropfour.models import normalize_room_code
from dropfour.services.games.errors import RoomNotFound
from dropfour.services.games.session import Session
from dropfour.services.games.store import get_store

NAMESPACE = '/ws'


def room_channel(room_code: str) -> str:
    return f"room:{normalize_room_code(room_code)}"


def broadcast_state(session: Session) -> None:
    """Push a session snapshot to every socket watching its room."""
    # socketio.emit works from HTTP handlers and background tasks alike
    socketio.emit('state_update', session.to_dict(), to=room_channel(session.room_code), namespace=NAMESPACE)


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def _room_code_from(data) -> str:
    # anything but {"room_code": "<str>"} yields '' and a bad_request error
    room_code = data.get('room_code') if isinstance(data, dict) else None
    return normalize_room_code(room_code) if isinstance(room_code, str) else ''


def handle_watch_room(data):
    room_code = _room_code_from(data)
    if not room_code:
        emit('error', {'message': 'room_code is required', 'reason': 'bad_request'})
        return
    try:
        session = get_store().get(room_code)
    except RoomNotFound as exc:
        emit('error', exc.to_dict())
        return
    channel = room_channel(room_code)
    join_room(channel)
    emit('joined', {'room': channel})
    # Send the current state right away so a (re)connecting client catches up
    emit('state_update', session.to_dict())


def handle_leave_room(data):
    room_code = _room_code_from(data)
    if not room_code:
        emit('error', {'message': 'room_code is required', 'reason': 'bad_request'})
        return
    channel = room_channel(room_code)
    leave_room(channel)
    emit('left', {'room': channel})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('watch_room', handle_watch_room, namespace=NAMESPACE)
    socketio.on_event('leave_room', handle_leave_room, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
