import threading
import weakref
from typing import Callable, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from dropfour import db
from dropfour.models import Room, generate_room_code, normalize_room_code
from . import session as sessions
from .errors import RoomCodeConflict, RoomNotFound
from .notifier import ChangeNotifier
from .session import Session

Transition = Callable[[Session], Session]


class RoomStore:
    """Canonical home of every Session, keyed by room code.

    Transitions on one room are serialised by a per-room lock so each one
    sees the result of the previous. Rooms never share a lock. Accepted
    states are published to the notifier after the lock is released.
    """

    def __init__(self, notifier: Optional[ChangeNotifier] = None,
                 code_generator: Optional[Callable[[], str]] = None,
                 max_code_attempts: int = 10):
        self.notifier = notifier
        self._code_generator = code_generator
        self.max_code_attempts = max_code_attempts
        # idle rooms drop out of the registry once no caller holds their lock
        self._room_locks = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    def init_app(self, app) -> None:
        self.max_code_attempts = int(app.config.get('ROOM_CODE_MAX_ATTEMPTS', self.max_code_attempts))
        if self._code_generator is None:
            length = int(app.config.get('ROOM_CODE_LENGTH', 6))
            self._code_generator = lambda: generate_room_code(length)
        app.extensions['dropfour.rooms'] = self

    def room_lock(self, room_code: str):
        with self._registry_lock:
            lock = self._room_locks.get(room_code)
            if lock is None:
                lock = threading.Lock()
                self._room_locks[room_code] = lock
            return lock

    def get(self, room_code: str) -> Session:
        code = normalize_room_code(room_code)
        room = Room.query.filter_by(room_code=code).first()
        if room is None:
            raise RoomNotFound(code)
        return room.to_session()

    def create(self, host: str) -> Session:
        """Open a room hosted by ``host`` under a freshly generated code."""
        generator = self._code_generator or generate_room_code
        last_conflict = None
        for attempt in range(1, self.max_code_attempts + 1):
            code = normalize_room_code(generator())
            try:
                session = self._insert(sessions.create_session(code, host))
            except RoomCodeConflict as exc:
                last_conflict = exc
                current_app.logger.info(f"[room-code-conflict] code={code} attempt={attempt}")
                continue
            current_app.logger.info(f"[room-create] room={code} host={host!r}")
            return session
        current_app.logger.error(f"[room-create] gave up after {self.max_code_attempts} code collisions")
        raise last_conflict or RoomCodeConflict()

    def _insert(self, session: Session) -> Session:
        if Room.query.filter_by(room_code=session.room_code).first() is not None:
            raise RoomCodeConflict(f'Room code {session.room_code} already in use')
        db.session.add(Room.from_session(session))
        try:
            db.session.commit()
        except IntegrityError as exc:
            # lost a race against another insert of the same code
            db.session.rollback()
            raise RoomCodeConflict(f'Room code {session.room_code} already in use') from exc
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return session

    def apply_transition(self, room_code: str, transition: Transition) -> Session:
        """Apply ``transition`` to the stored session under the room's lock.

        Rejections raised by the transition propagate and nothing is written.
        """
        code = normalize_room_code(room_code)
        with self.room_lock(code):
            room = Room.query.filter_by(room_code=code).first()
            if room is None:
                raise RoomNotFound(code)
            updated = transition(room.to_session())
            room.update_from(updated)
            db.session.add(room)
            try:
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                raise
        if self.notifier is not None:
            self.notifier.publish(updated)
        return updated

    def join(self, room_code: str, identity: str) -> Session:
        session = self.apply_transition(room_code, lambda s: sessions.join(s, identity))
        current_app.logger.info(f"[room-join] room={session.room_code} player2={identity!r}")
        return session

    def move(self, room_code: str, seat: int, column: int) -> Session:
        session = self.apply_transition(room_code, lambda s: sessions.move(s, seat, column))
        current_app.logger.info(
            f"[move] room={session.room_code} seat={seat} column={column} "
            f"turn={session.current_turn} winner={session.winner}"
        )
        return session

    def reset(self, room_code: str, starting_seat: Optional[int] = None) -> Session:
        session = self.apply_transition(room_code, lambda s: sessions.reset(s, starting_seat))
        current_app.logger.info(f"[room-reset] room={session.room_code} starting_seat={session.current_turn}")
        return session


def get_store() -> RoomStore:
    return current_app.extensions['dropfour.rooms']
