"""Per-connection lifecycle: role binding, message dispatch and cleanup."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from decibel_relay.domain import messages
from decibel_relay.domain.messages import InboundMessage
from decibel_relay.domain.sessions import Connection, ConnectionBinding, Role
from decibel_relay.services.relay import RelayService

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Runs a callback once after a delay."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        """Arm a timer. Armed timers are never cancelled."""


@dataclass
class ConnectionHandler:
    """Drives one client connection from its first message to its close.

    The connection is bound to a single (session, role) pair the first time
    it creates or joins a session; every later message runs in the context
    of that binding.
    """

    connection: Connection
    relay: RelayService
    scheduler: Scheduler
    retention_seconds: float
    binding: ConnectionBinding | None = None

    def handle_text(self, raw: str | bytes) -> None:
        """Parse and handle one inbound frame. Unparseable frames are dropped."""
        try:
            message = InboundMessage.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Dropping unparseable message: %s", exc.errors()[0]["msg"])
            return
        self.handle_message(message)

    def handle_message(self, message: InboundMessage) -> None:
        """Route a parsed message according to its type."""
        if message.type == messages.CREATE_SESSION:
            self._create()
            return
        if message.type == messages.JOIN_SESSION:
            self._join(_session_key(message.session_id))
            return

        handler = {
            messages.DECIBEL_DATA: self._decibel_data,
            messages.STOP_SESSION: self._stop,
            messages.TIMER_UPDATE: self._timer_update,
            messages.SESSION_RECORDED: self._session_recorded,
        }.get(message.type)
        if handler is None:
            logger.debug("Ignoring unknown message type %r", message.type)
            return
        if self.binding is None:
            logger.debug("Dropping %s from unbound connection", message.type)
            return
        handler(self.binding.session_id, message)

    def handle_close(self) -> None:
        """Release whatever this connection held in its session."""
        binding = self.binding
        if binding is None:
            return
        if binding.role is Role.VIEWER:
            self.relay.detach_viewer(binding.session_id, self.connection)
            return

        session = self.relay.recorder_left(binding.session_id)
        if session is None:
            return
        store = self.relay.store
        session_id = binding.session_id

        def remove_session() -> None:
            store.remove(session_id)

        self.scheduler.call_later(self.retention_seconds, remove_session)
        logger.info(
            "Session %s will be removed in %s seconds",
            session_id,
            self.retention_seconds,
        )

    def _create(self) -> None:
        if self._already_bound(messages.CREATE_SESSION):
            return
        session = self.relay.create_session(self.connection)
        self.binding = ConnectionBinding(session_id=session.id, role=Role.RECORDER)

    def _join(self, session_id: str | None) -> None:
        if self._already_bound(messages.JOIN_SESSION):
            return
        session = self.relay.join_session(self.connection, session_id)
        if session is not None:
            self.binding = ConnectionBinding(session_id=session.id, role=Role.VIEWER)

    def _decibel_data(self, session_id: str, message: InboundMessage) -> None:
        self.relay.record_reading(self.connection, session_id, message.data)

    def _stop(self, session_id: str, message: InboundMessage) -> None:
        self.relay.stop_session(session_id)

    def _timer_update(self, session_id: str, message: InboundMessage) -> None:
        self.relay.update_timer(session_id, message.timer_data)

    def _session_recorded(self, session_id: str, message: InboundMessage) -> None:
        summary = message.session
        if not isinstance(summary, dict) or "id" not in summary:
            logger.debug("Dropping session_recorded without a summary id")
            return
        self.relay.record_summary(session_id, summary)

    def _already_bound(self, message_type: str) -> bool:
        if self.binding is None:
            return False
        logger.warning(
            "Ignoring %s on connection already bound to session %s as %s",
            message_type,
            self.binding.session_id,
            self.binding.role,
        )
        return True


def _session_key(raw: object) -> str | None:
    """Normalise a client-supplied session id; anything unusable is None."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        return str(raw)
    return None
