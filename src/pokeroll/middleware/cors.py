"""CORS for the game front end.

The HTTP surface is read-only (catalog and probes), so only GET and the
preflight OPTIONS are allowed. Origins come from ``POKEROLL_CORS_ORIGINS``.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pokeroll.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the configured front-end origins to read the catalog; expose the request id."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )
