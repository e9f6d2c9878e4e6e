"""Session registry."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from decibel_relay.domain.sessions import Connection, Session

logger = logging.getLogger(__name__)


class SessionExistsError(Exception):
    """Raised when a session id is already registered."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} already exists")
        self.session_id = session_id


@dataclass
class TimestampSessionIdFactory:
    """Generate millisecond-timestamp session ids that never repeat."""

    clock: Callable[[], float] = time.time
    _last: int = 0

    def __call__(self) -> str:
        candidate = int(self.clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)


@dataclass
class SessionStore:
    """Owns every live session, keyed by session id."""

    _sessions: dict[str, Session] = field(default_factory=dict)

    def create(self, session_id: str, recorder: Connection) -> Session:
        """Register a new active session owned by ``recorder``."""
        if session_id in self._sessions:
            raise SessionExistsError(session_id)
        session = Session(id=session_id, recorder=recorder)
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> None:
        """Forget a session. Missing ids are ignored."""
        if self._sessions.pop(session_id, None) is not None:
            logger.info("Removed session %s", session_id)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
