"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from pokeroll.catalog.router import router as catalog_router
from pokeroll.catalog.seed import seed_catalog
from pokeroll.config import get_settings
from pokeroll.database import close_db, get_session, init_db
from pokeroll.health.router import router as health_router
from pokeroll.middleware import setup_middleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    if settings.seed_catalog_on_startup:
        try:
            async for db in get_session():
                await seed_catalog(db)
                break
        except Exception:
            logger.warning("catalog_seed_failed", exc_info=True)

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Pokeroll API",
        description="Catalog and health endpoints for the Pokemon roulette game",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(catalog_router)

    return app


app = create_app()
