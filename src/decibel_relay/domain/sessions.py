"""Domain models for relay sessions."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol


class Connection(Protocol):
    """Outbound side of a client connection."""

    def send(self, message: dict[str, object]) -> None:
        """Queue a message for delivery without waiting for it."""


class Role(StrEnum):
    """Role a connection plays inside a session."""

    RECORDER = "recorder"
    VIEWER = "viewer"


@dataclass(frozen=True)
class ConnectionBinding:
    """The one session a connection is attached to, and how."""

    session_id: str
    role: Role


@dataclass(eq=False)
class Session:
    """In-memory state for one recording session."""

    id: str
    recorder: Connection
    viewers: set[Connection] = field(default_factory=set)
    is_active: bool = True
    readings: list[object] = field(default_factory=list)
    timer_data: object | None = None
    session_log: list[dict[str, object]] = field(default_factory=list)

    def deactivate(self) -> bool:
        """Mark the session inactive. Returns True on the first transition."""
        if not self.is_active:
            return False
        self.is_active = False
        return True

    def has_logged(self, summary_id: object) -> bool:
        """Return True when a summary with this id is already in the log."""
        return any(
            _same_id(entry.get("id"), summary_id) for entry in self.session_log
        )


def _same_id(left: object, right: object) -> bool:
    # booleans never match numbers, and int 1 matches float 1.0 as JSON does
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right
