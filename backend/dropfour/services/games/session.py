"""Session values and the transitions between them.

A Session is an immutable snapshot of one room. ``join``, ``move`` and
``reset`` take a Session and return a new one, or raise a rejection from
``errors`` leaving the input untouched. Persistence and locking live in
the store.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from . import board as boards
from .errors import AwaitingOpponent, GameOver, NotYourTurn, RoomFull

AWAITING_SECOND_PLAYER = 'awaiting_second_player'
IN_PROGRESS = 'in_progress'
CONCLUDED = 'concluded'

SEAT_ONE = 1
SEAT_TWO = 2
SEATS = (SEAT_ONE, SEAT_TWO)

# winner value recorded for a drawn game
TIE = 0

# seat number doubles as the piece value on the board
_PIECE_FOR_SEAT = {SEAT_ONE: boards.PLAYER_ONE, SEAT_TWO: boards.PLAYER_TWO}


def other_seat(seat: int) -> int:
    return SEAT_TWO if seat == SEAT_ONE else SEAT_ONE


@dataclass(frozen=True)
class Session:
    room_code: str
    player1: str
    player2: Optional[str] = None
    board: boards.Board = field(default_factory=boards.empty_board)
    current_turn: int = SEAT_ONE
    # None while ongoing, TIE for a draw, otherwise the winning seat
    winner: Optional[int] = None

    @property
    def state(self) -> str:
        if self.winner is not None:
            return CONCLUDED
        if self.player2 is None:
            return AWAITING_SECOND_PLAYER
        return IN_PROGRESS

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'room_code': self.room_code,
            'board': boards.to_lists(self.board),
            'player1_username': self.player1,
            'player2_username': self.player2,
            'current_turn': self.current_turn,
            'winner': self.winner,
            'state': self.state,
        }


def create_session(room_code: str, host: str) -> Session:
    return Session(room_code=room_code, player1=host)


def join(session: Session, identity: str) -> Session:
    """Fill seat 2. The game then starts with seat 1 to move."""
    if session.player2 is not None:
        raise RoomFull()
    return replace(session, player2=identity, current_turn=SEAT_ONE)


def move(session: Session, seat: int, column: int) -> Session:
    """Drop ``seat``'s piece into ``column`` and settle the outcome.

    Rejections are checked in order: finished game, missing opponent,
    wrong seat, then the board's own column checks. A winning move is a
    win even when it also fills the board.
    """
    if session.state == CONCLUDED:
        raise GameOver()
    if session.state == AWAITING_SECOND_PLAYER:
        raise AwaitingOpponent()
    if seat != session.current_turn:
        raise NotYourTurn()

    piece = _PIECE_FOR_SEAT[seat]
    new_board = boards.drop(session.board, column, piece)

    if boards.has_line(new_board, piece):
        return replace(session, board=new_board, winner=seat)
    if boards.is_full(new_board):
        return replace(session, board=new_board, winner=TIE)
    return replace(session, board=new_board, current_turn=other_seat(seat))


def reset(session: Session, starting_seat: Optional[int] = None) -> Session:
    """Start a fresh game in the same room, keeping both seats.

    Any state is accepted, including an unfinished game. ``starting_seat``
    falls back to seat 1 when missing or not a seat number.
    """
    if isinstance(starting_seat, bool) or starting_seat not in SEATS:
        starting_seat = SEAT_ONE
    return replace(
        session,
        board=boards.empty_board(),
        current_turn=starting_seat,
        winner=None,
    )
