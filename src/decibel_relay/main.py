"""Command-line entrypoint that serves the relay with uvicorn."""

import logging

import uvicorn

from decibel_relay.api.app import create_app
from decibel_relay.config import Settings
from decibel_relay.containers import build_container


def main() -> None:
    """Run the relay server on the configured host and port."""
    settings = Settings()
    app = create_app(build_container(settings))
    logging.getLogger(__name__).info("Server running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
