from flask import Blueprint, jsonify, request, current_app
from dropfour.services.games.errors import GameError, ValidationRejection
from dropfour.services.games.store import get_store


rooms = Blueprint('rooms', __name__)


class BadRequest(GameError):
    reason = 'bad_request'
    message = 'Bad request'


@rooms.errorhandler(GameError)
def handle_game_error(exc: GameError):
    if isinstance(exc, ValidationRejection):
        # Expected and caller-correctable: not an error on our side
        current_app.logger.info(f"[rejected] {request.method} {request.path} reason={exc.reason}")
    elif exc.status_code >= 500:
        current_app.logger.error(f"[failed] {request.method} {request.path} reason={exc.reason}")
    return jsonify(exc.to_dict()), exc.status_code


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _required_name(data: dict, key: str = 'username') -> str:
    name = data.get(key)
    if not isinstance(name, str) or not name.strip():
        raise BadRequest(f'{key} is required')
    name = name.strip()
    if len(name) > 64:
        raise BadRequest(f'{key} must be at most 64 characters')
    return name


def _int_field(data: dict, key: str, required: bool = True):
    value = data.get(key)
    if value is None:
        if required:
            raise BadRequest(f'{key} is required')
        return None
    # no coercion: 3.9 or "4" must not turn into a move the client never asked for
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequest(f'{key} must be an integer')
    return value


@rooms.route('/create', methods=['POST'])
def create_room():
    data = _json_body()
    username = _required_name(data)
    session = get_store().create(username)
    return jsonify({
        'room_code': session.room_code,
        'game': session.to_dict(),
    }), 201


@rooms.route('/join', methods=['POST'])
def join_room():
    data = _json_body()
    room_code = data.get('room_code')
    if not isinstance(room_code, str) or not room_code.strip():
        raise BadRequest('room_code is required')
    username = _required_name(data)
    session = get_store().join(room_code, username)
    return jsonify({'game': session.to_dict()})


@rooms.route('/<string:room_code>/state', methods=['GET'])
def get_room_state(room_code):
    return jsonify(get_store().get(room_code).to_dict())


@rooms.route('/<string:room_code>/moves', methods=['POST'])
def make_move(room_code):
    data = _json_body()
    seat = _int_field(data, 'player')
    column = _int_field(data, 'column')
    session = get_store().move(room_code, seat, column)
    return jsonify({'game': session.to_dict()})


@rooms.route('/<string:room_code>/reset', methods=['POST'])
def reset_room(room_code):
    data = _json_body()
    next_starter = _int_field(data, 'next_starter', required=False)
    session = get_store().reset(room_code, next_starter)
    return jsonify({'game': session.to_dict()})
