from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from geoquiz import socketio
from geoquiz.exceptions import ConfigError

NAMESPACE = '/ws'


def room_for(game_code: str) -> str:
    return f"game:{game_code.upper()}"


class SocketIOBroadcaster:
    """Fans session events out to the game room, or to one connection."""

    def __init__(self, sio, game_code: str, namespace: str = NAMESPACE):
        self.socketio = sio
        self.room = room_for(game_code)
        self.namespace = namespace

    def emit(self, event, payload, to=None):
        # Use socketio.emit since this may be called from a timer background task
        self.socketio.emit(event, payload, to=to or self.room, namespace=self.namespace)


def _manager():
    return current_app.extensions['geoquiz']

def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore

def _text(data, *keys):
    for key in keys:
        value = (data or {}).get(key)
        if isinstance(value, str):
            return value
    return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # A lost connection is an implicit leave
    session = _manager().leave(_get_sid())
    if session:
        current_app.logger.info(f"[disconnect] sid={_get_sid()} game={session.code} reason={reason}")


def handle_join_game(data):
    game_code = _text(data, 'game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    sid = _get_sid()
    manager = _manager()
    previous = manager.session_for(sid)
    if previous and previous.code != game_code.upper():
        leave_room(room_for(previous.code))
    room = room_for(game_code)
    # Join the room first so the joiner also receives the roster broadcast
    join_room(room)
    try:
        session, player = manager.join(
            game_code,
            sid,
            display_name=_text(data, 'player_name', 'name'),
            mode_key=_text(data, 'game_mode'),
        )
    except ConfigError as exc:
        leave_room(room)
        emit('error', {'message': str(exc), 'game_mode': exc.mode_key})
        return
    if player is None and manager.session_for(sid) is not session:
        leave_room(room)


def handle_leave_game(data=None):
    session = _manager().leave(_get_sid())
    if not session:
        return
    room = room_for(session.code)
    leave_room(room)
    emit('left', {'room': room})


def handle_ready(data=None):
    session = _manager().session_for(_get_sid())
    if session:
        session.set_ready(_get_sid())


def handle_guess(data):
    session = _manager().session_for(_get_sid())
    if session:
        session.guess(_get_sid(), _text(data, 'text', 'guess'))


def handle_skip(data=None):
    session = _manager().session_for(_get_sid())
    if session:
        session.skip(_get_sid())


def handle_restart(data=None):
    session = _manager().session_for(_get_sid())
    if session:
        session.restart(_get_sid())


def handle_chat(data):
    session = _manager().session_for(_get_sid())
    if session:
        session.chat(_get_sid(), _text(data, 'text', 'message'))


def handle_request_state(data=None):
    session = _manager().session_for(_get_sid())
    if not session:
        emit('error', {'message': 'Not in a game'})
        return
    emit('state_update', session.to_dict())


def handle_ping(data):
    emit('pong', data or {})


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'join_game': handle_join_game,
    'leave_game': handle_leave_game,
    'ready': handle_ready,
    'guess': handle_guess,
    'skip': handle_skip,
    'restart': handle_restart,
    'chat': handle_chat,
    'request_state': handle_request_state,
    'ping': handle_ping,
}


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace=NAMESPACE)

    if testing:
        # Test-only mirror on default namespace
        for event, handler in HANDLERS.items():
            socketio.on_event(event, handler, namespace='/')
