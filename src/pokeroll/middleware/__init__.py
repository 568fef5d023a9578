"""Middleware registration."""

from fastapi import FastAPI

from pokeroll.config import Settings
from pokeroll.middleware.cors import setup_cors
from pokeroll.middleware.error_handler import setup_error_handlers
from pokeroll.middleware.logging import setup_logging
from pokeroll.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    Starlette runs middleware in reverse-add order, so CORS goes last to end up outermost.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
