"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from notehub.api import api_router
from notehub.core.config import Settings, get_settings
from notehub.core.database import Database
from notehub.core.errors import install_exception_handlers
from notehub.core.seed import seed_demo_data

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if not settings.jwt_secret_key:
            raise RuntimeError("JWT_SECRET_KEY is not configured; refusing to start")

        database = Database.from_settings(settings)
        try:
            if settings.auto_create_schema:
                await database.create_all()
            await database.verify_schema()
            if settings.seed_demo_data:
                async with database.session_factory() as session:
                    await seed_demo_data(session, settings.seed_password)
        except Exception:
            await database.dispose()
            raise

        app.state.database = database
        logger.info("Startup complete")
        yield
        await database.dispose()
        logger.info("Shutting down")

    app = FastAPI(
        title="NoteHub",
        version="0.1.0",
        description="Multi-tenant notes API",
        lifespan=lifespan,
    )
    app.state.settings = settings
    install_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict:
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``notehub.main:app`` with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "notehub.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
