"""ASGI entrypoint for the decibel relay."""

from decibel_relay.api.app import create_app
from decibel_relay.containers import build_container

app = create_app(build_container())
