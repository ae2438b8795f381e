from dropfour import db
from dropfour.services.games import board as boards
from dropfour.services.games.session import Session
from datetime import datetime, timezone
import json
import random
import string


ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_code(length=6):
    """Generate a short, shareable room code. Uniqueness is enforced by the store."""
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))


def normalize_room_code(code):
    return (code or '').strip().upper()


def _utcnow():
    return datetime.now(timezone.utc)


class Room(db.Model):
    __tablename__ = 'room'
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(16), unique=True, nullable=False, index=True)
    player1_username = db.Column(db.String(64), nullable=False)
    player2_username = db.Column(db.String(64), nullable=True)
    board = db.Column(db.Text, nullable=False)  # JSON-encoded 6x7 grid of 0/1/2
    current_turn = db.Column(db.Integer, nullable=False, default=1)
    winner = db.Column(db.Integer, nullable=True)  # null ongoing, 0 tie, else seat
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    @classmethod
    def from_session(cls, session: Session) -> 'Room':
        room = cls(room_code=session.room_code)
        room.update_from(session)
        return room

    def update_from(self, session: Session) -> None:
        self.player1_username = session.player1
        self.player2_username = session.player2
        self.board = json.dumps(boards.to_lists(session.board))
        self.current_turn = session.current_turn
        self.winner = session.winner

    def to_session(self) -> Session:
        return Session(
            room_code=self.room_code,
            player1=self.player1_username,
            player2=self.player2_username,
            board=boards.from_rows(json.loads(self.board)),
            current_turn=self.current_turn,
            winner=self.winner,
        )
