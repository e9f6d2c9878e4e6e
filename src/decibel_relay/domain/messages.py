"""Wire message types and outbound payload builders."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CREATE_SESSION = "create_session"
JOIN_SESSION = "join_session"
DECIBEL_DATA = "decibel_data"
STOP_SESSION = "stop_session"
TIMER_UPDATE = "timer_update"
SESSION_RECORDED = "session_recorded"

SESSION_CREATED = "session_created"
SESSION_JOINED = "session_joined"
DECIBEL_UPDATE = "decibel_update"
SESSION_ENDED = "session_ended"
ERROR = "error"

SESSION_NOT_FOUND = "Session not found"


def session_created(session_id: str) -> dict[str, object]:
    return {"type": SESSION_CREATED, "sessionId": session_id}


def session_joined(
    session_id: str,
    is_active: bool,
    timer_data: object | None,
    session_log: list[dict[str, object]],
) -> dict[str, object]:
    return {
        "type": SESSION_JOINED,
        "sessionId": session_id,
        "isActive": is_active,
        "timerData": timer_data,
        "sessionLog": list(session_log),
    }


def decibel_update(data: object) -> dict[str, object]:
    return {"type": DECIBEL_UPDATE, "data": data}


def session_ended() -> dict[str, object]:
    return {"type": SESSION_ENDED}


def timer_update(timer_data: object) -> dict[str, object]:
    return {"type": TIMER_UPDATE, "timerData": timer_data}


def session_recorded(summary: dict[str, object]) -> dict[str, object]:
    return {"type": SESSION_RECORDED, "session": summary}


def error(message: str) -> dict[str, object]:
    return {"type": ERROR, "message": message}


class InboundMessage(BaseModel):
    """Envelope of a client-to-server message.

    Only ``type`` is checked here; each handler inspects the fields it uses.
    """

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, coerce_numbers_to_str=True
    )

    type: str
    session_id: Any = Field(default=None, alias="sessionId")
    data: Any = None
    timer_data: Any = Field(default=None, alias="timerData")
    session: Any = None
