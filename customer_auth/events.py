"""Session event notifications

Each CustomerAuthManager owns its own emitter, so listeners registered by
one application instance never see another instance's sessions.
"""

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List

from .models import AuthEvent

logger = logging.getLogger(__name__)

Listener = Callable[[AuthEvent], None]


class AuthEventEmitter:
    """Observable for login/logout/refresh events"""

    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, kind: str, listener: Listener) -> Callable[[], None]:
        """Register a listener for one event kind

        Returns:
            Callable that removes the listener again
        """
        self._listeners[kind].append(listener)

        def unsubscribe():
            if listener in self._listeners[kind]:
                self._listeners[kind].remove(listener)

        return unsubscribe

    def listener_count(self, kind: str) -> int:
        return len(self._listeners.get(kind, []))

    def emit(self, event: AuthEvent):
        """Deliver an event to every listener of its kind

        A failing listener is logged and skipped; it cannot break the
        request that produced the event.
        """
        for listener in list(self._listeners.get(event.kind, [])):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Auth event listener failed for '{event.kind}'")
