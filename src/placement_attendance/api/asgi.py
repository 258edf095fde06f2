"""ASGI entrypoint for the placement attendance API."""

from placement_attendance.api.app import create_app
from placement_attendance.containers import build_container

app = create_app(build_container())
