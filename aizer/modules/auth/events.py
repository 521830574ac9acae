"""
Session-changed event stream.

Listeners receive ``(event, user_id)``; ``user_id`` is None on sign-out.
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


Listener = Callable[[SessionEvent, Optional[str]], None]


class SessionEvents:
    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def emit(self, event: SessionEvent, user_id: Optional[str] = None) -> None:
        logger.info("Auth state changed: %s (user=%s)", event.value, user_id)
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, user_id)
            except Exception:
                logger.exception("Session listener failed for %s", event.value)


session_events = SessionEvents()
