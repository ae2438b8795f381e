"""Rejections raised by the game services.

Every error carries a stable ``reason`` string for clients and the HTTP
status the API answers with. Validation rejections are expected and
caller-correctable; they never change stored state.
"""


class GameError(Exception):
    reason = 'game_error'
    status_code = 400
    message = 'Game error'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    def to_dict(self):
        return {'error': str(self), 'reason': self.reason}


class ValidationRejection(GameError):
    """The request is well formed but not allowed in the current state."""


class NotYourTurn(ValidationRejection):
    reason = 'not_your_turn'
    message = 'Not your turn'


class ColumnFull(ValidationRejection):
    reason = 'column_full'
    message = 'Column full'


class ColumnOutOfRange(ValidationRejection):
    reason = 'column_out_of_range'
    message = 'Column out of range'


class GameOver(ValidationRejection):
    reason = 'game_over'
    message = 'Game is over'


class RoomFull(ValidationRejection):
    reason = 'room_full'
    message = 'Room full'


class AwaitingOpponent(ValidationRejection):
    reason = 'awaiting_opponent'
    message = 'Waiting for a second player to join'


class RoomNotFound(GameError):
    reason = 'room_not_found'
    status_code = 404
    message = 'Room not found'

    def __init__(self, room_code=None):
        super().__init__(f'Room {room_code} not found' if room_code else None)
        self.room_code = room_code


class RoomCodeConflict(GameError):
    """A generated room code is already taken. Retried by the store."""
    reason = 'room_code_conflict'
    status_code = 503
    message = 'Could not allocate a room code'
