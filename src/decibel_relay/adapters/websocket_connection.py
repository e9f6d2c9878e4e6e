"""WebSocket-backed outbound connection."""

import asyncio
import json
import logging
from dataclasses import dataclass, field

from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class WebSocketConnection:
    """Delivers queued messages to one WebSocket client in order.

    ``send`` never blocks: messages go onto a queue drained by a writer
    task, so routing code never yields to the event loop mid-handler.
    """

    websocket: WebSocket
    _queue: asyncio.Queue[str | None] = field(
        default_factory=asyncio.Queue, init=False
    )
    _writer: asyncio.Task[None] | None = field(default=None, init=False)

    def start(self) -> None:
        """Start the writer task on the running loop."""
        if self._writer is None:
            self._writer = asyncio.get_running_loop().create_task(self._drain())

    def send(self, message: dict[str, object]) -> None:
        """Queue a message for delivery."""
        self._queue.put_nowait(json.dumps(message))

    async def close(self) -> None:
        """Flush what can still be sent and stop the writer."""
        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        self._queue.put_nowait(None)
        try:
            await writer
        finally:
            writer.cancel()

    async def _drain(self) -> None:
        while True:
            payload = await self._queue.get()
            if payload is None:
                return
            try:
                await self.websocket.send_text(payload)
            except Exception:  # noqa: BLE001
                logger.debug("Dropping message for closed connection", exc_info=True)
