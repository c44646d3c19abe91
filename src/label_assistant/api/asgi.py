"""ASGI entrypoint for the label assistant API."""

from label_assistant.api.app import create_app
from label_assistant.containers import build_container

app = create_app(build_container())
