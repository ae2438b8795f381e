import threading
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from flask import current_app

from .session import Session

Observer = Callable[[Session], None]


class ChangeNotifier:
    """Fan out accepted session states to observers of a room.

    Observers are plain callables keyed by room code. Optionally a delivery
    ``channel`` (the Socket.IO broadcaster in the app) receives every
    published session after the observers. Delivery is best effort: a
    failing observer is logged and skipped, clients recover by re-reading
    the room state.
    """

    def __init__(self, channel: Optional[Observer] = None):
        self._channel = channel
        self._observers: Dict[str, List[Observer]] = defaultdict(list)
        self._registry_lock = threading.Lock()

    def init_app(self, app, channel: Optional[Observer] = None) -> None:
        if channel is not None:
            self._channel = channel
        app.extensions['dropfour.notifier'] = self

    def subscribe(self, room_code: str, observer: Observer) -> None:
        with self._registry_lock:
            self._observers[room_code.upper()].append(observer)

    def unsubscribe(self, room_code: str, observer: Observer) -> None:
        code = room_code.upper()
        with self._registry_lock:
            observers = self._observers.get(code)
            if not observers:
                return
            try:
                observers.remove(observer)
            except ValueError:
                pass
            if not observers:
                del self._observers[code]

    def observers_for(self, room_code: str) -> List[Observer]:
        with self._registry_lock:
            return list(self._observers.get(room_code.upper(), ()))

    def publish(self, session: Session) -> int:
        """Deliver ``session`` to its room's observers. Returns successful deliveries."""
        delivered = 0
        targets = self.observers_for(session.room_code)
        if self._channel is not None:
            targets.append(self._channel)
        for observer in targets:
            try:
                observer(session)
                delivered += 1
            except Exception:
                current_app.logger.exception(f"[notify-fail] room={session.room_code} observer={observer!r}")
        return delivered


def get_notifier() -> ChangeNotifier:
    return current_app.extensions['dropfour.notifier']
