"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket
from fastapi.staticfiles import StaticFiles

from decibel_relay.adapters.websocket_connection import WebSocketConnection
from decibel_relay.app_logging import configure_logging
from decibel_relay.config import parse_log_level
from decibel_relay.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(parse_log_level(container.settings.log_level))
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Relay ready (environment=%s)", app.state.container.settings.environment
        )
        yield
        logger.info(
            "Relay shutting down with %d sessions in memory",
            len(app.state.container.session_store),
        )

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    async def relay_socket(websocket: WebSocket) -> None:
        """Relay messages between one client and its session."""
        state_container: AppContainer = websocket.app.state.container
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        connection.start()
        handler = state_container.connection_handler(connection)
        try:
            while True:
                event = await websocket.receive()
                if event["type"] == "websocket.disconnect":
                    break
                raw = event.get("text")
                if raw is None:
                    raw = event.get("bytes")
                if raw is None:
                    continue
                handler.handle_text(raw)
        finally:
            handler.handle_close()
            await connection.close()

    app.add_api_websocket_route("/", relay_socket)
    app.add_api_websocket_route("/ws", relay_socket)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    static_dir = container.settings.static_dir
    if static_dir:
        if Path(static_dir).is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        else:
            logger.warning(
                "Static directory %s not found; not serving assets", static_dir
            )

    return app
