"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from decibel_relay.config import Settings
from decibel_relay.containers import AppContainer
from decibel_relay.services.connections import ConnectionHandler
from decibel_relay.services.relay import RelayService
from decibel_relay.services.session_store import SessionStore


@dataclass(eq=False)
class FakeConnection:
    """Connection that records every message sent to it."""

    name: str = "client"
    sent: list[dict[str, object]] = field(default_factory=list)

    def send(self, message: dict[str, object]) -> None:
        self.sent.append(message)

    def types(self) -> list[object]:
        return [message["type"] for message in self.sent]

    def clear(self) -> None:
        self.sent.clear()


@dataclass
class FakeScheduler:
    """Scheduler that holds timers until the test fires them."""

    timers: list[tuple[float, Callable[[], None]]] = field(default_factory=list)

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        self.timers.append((delay_seconds, callback))

    def run_all(self) -> None:
        timers, self.timers = self.timers, []
        for _, callback in timers:
            callback()


@dataclass
class SequentialSessionIds:
    """Deterministic session id factory."""

    prefix: str = "S"
    counter: int = 0

    def __call__(self) -> str:
        self.counter += 1
        return f"{self.prefix}{self.counter}"


@pytest.fixture
def settings() -> Settings:
    return Settings(port=3000, session_retention_seconds=3600)


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def relay(store: SessionStore) -> RelayService:
    return RelayService(store, new_session_id=SequentialSessionIds())


@pytest.fixture
def container(
    settings: Settings,
    store: SessionStore,
    relay: RelayService,
    scheduler: FakeScheduler,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        session_store=store,
        relay=relay,
        scheduler=scheduler,
    )


Connect = Callable[..., tuple[FakeConnection, ConnectionHandler]]


@pytest.fixture
def connect(container: AppContainer) -> Connect:
    def _connect(name: str = "client") -> tuple[FakeConnection, ConnectionHandler]:
        connection = FakeConnection(name)
        return connection, container.connection_handler(connection)

    return _connect
