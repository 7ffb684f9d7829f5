"""ASGI entrypoint for the home inventory API."""

from home_inventory.api.app import create_app
from home_inventory.containers import build_container

app = create_app(build_container())
