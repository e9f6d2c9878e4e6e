"""Dependency container wiring for the application."""

from dataclasses import dataclass

from decibel_relay.adapters.asyncio_scheduler import AsyncioScheduler
from decibel_relay.config import Settings
from decibel_relay.domain.sessions import Connection
from decibel_relay.services.connections import ConnectionHandler, Scheduler
from decibel_relay.services.relay import RelayService
from decibel_relay.services.session_store import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    relay: RelayService
    scheduler: Scheduler

    def connection_handler(self, connection: Connection) -> ConnectionHandler:
        """Create the lifecycle handler for a newly accepted connection."""
        return ConnectionHandler(
            connection=connection,
            relay=self.relay,
            scheduler=self.scheduler,
            retention_seconds=self.settings.session_retention_seconds,
        )


def build_container(
    settings: Settings | None = None, scheduler: Scheduler | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_store = SessionStore()
    relay = RelayService(session_store)
    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        relay=relay,
        scheduler=scheduler or AsyncioScheduler(),
    )
