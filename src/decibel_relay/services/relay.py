"""Fan-out routing of session events to recorders and viewers."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from decibel_relay.domain import messages
from decibel_relay.domain.sessions import Connection, Session
from decibel_relay.services.session_store import (
    SessionStore,
    TimestampSessionIdFactory,
)

logger = logging.getLogger(__name__)


@dataclass
class RelayService:
    """Applies inbound events to the session store and dispatches the results.

    Every method runs to completion without awaiting, so a handler is atomic
    with respect to every other event on the loop. Recipients are resolved
    from a snapshot of the viewer set taken at dispatch time.
    """

    store: SessionStore
    new_session_id: Callable[[], str] = field(
        default_factory=TimestampSessionIdFactory
    )

    def create_session(self, sender: Connection) -> Session:
        """Open a new session recorded by ``sender``."""
        session = self.store.create(self.new_session_id(), recorder=sender)
        logger.info("Created session %s", session.id)
        sender.send(messages.session_created(session.id))
        return session

    def join_session(
        self, sender: Connection, session_id: str | None
    ) -> Session | None:
        """Attach ``sender`` as a viewer and replay the session history."""
        session = self.store.get(session_id) if session_id is not None else None
        if session is None:
            logger.debug("Join for unknown session %s", session_id)
            sender.send(messages.error(messages.SESSION_NOT_FOUND))
            return None

        session.viewers.add(sender)
        logger.info(
            "Viewer joined session %s (%d viewers)", session_id, len(session.viewers)
        )
        sender.send(
            messages.session_joined(
                session.id, session.is_active, session.timer_data, session.session_log
            )
        )
        for reading in session.readings:
            sender.send(messages.decibel_update(reading))
        if not session.is_active:
            sender.send(messages.session_ended())
        return session

    def record_reading(
        self, sender: Connection, session_id: str, data: object
    ) -> None:
        """Store a reading and broadcast it to viewers, echoing it to the sender.

        Readings that arrive after the session ended are stored but not relayed.
        """
        session = self._lookup(session_id)
        if session is None:
            return
        session.readings.append(data)
        if not session.is_active:
            return
        update = messages.decibel_update(data)
        _broadcast(session.viewers, update)
        sender.send(update)

    def stop_session(self, session_id: str) -> None:
        """Deactivate a session, telling its viewers on the first stop only."""
        session = self._lookup(session_id)
        if session is None:
            return
        if session.deactivate():
            logger.info("Session %s stopped", session_id)
            _broadcast(session.viewers, messages.session_ended())

    def update_timer(self, session_id: str, timer_data: object) -> None:
        """Replace the timer snapshot and broadcast it to viewers."""
        session = self._lookup(session_id)
        if session is None:
            return
        session.timer_data = timer_data
        _broadcast(session.viewers, messages.timer_update(timer_data))

    def record_summary(self, session_id: str, summary: dict[str, object]) -> bool:
        """Append a recorded-session summary unless its id is already logged.

        Returns True when the summary was appended and broadcast.
        """
        session = self._lookup(session_id)
        if session is None:
            return False
        if session.has_logged(summary.get("id")):
            logger.debug(
                "Ignoring duplicate summary %s for session %s",
                summary.get("id"),
                session_id,
            )
            return False
        session.session_log.append(summary)
        _broadcast(session.viewers, messages.session_recorded(summary))
        return True

    def recorder_left(self, session_id: str) -> Session | None:
        """End a session whose recorder went away and notify its viewers."""
        session = self.store.get(session_id)
        if session is None:
            return None
        session.deactivate()
        logger.info("Recorder left session %s", session_id)
        _broadcast(session.viewers, messages.session_ended())
        return session

    def detach_viewer(self, session_id: str, viewer: Connection) -> None:
        """Remove a viewer from a session, if both still exist."""
        session = self.store.get(session_id)
        if session is None:
            return
        session.viewers.discard(viewer)

    def _lookup(self, session_id: str) -> Session | None:
        session = self.store.get(session_id)
        if session is None:
            logger.debug("Dropping event for unknown session %s", session_id)
        return session


def _broadcast(recipients: Iterable[Connection], message: dict[str, object]) -> None:
    for connection in list(recipients):
        connection.send(message)
