"""ASGI entrypoint for the hydration ledger API."""

from hydration_ledger.api.app import create_app
from hydration_ledger.containers import build_container

app = create_app(build_container())
