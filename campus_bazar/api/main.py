"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_bazar.api.dependencies import get_session_registry
from campus_bazar.api.routes import auth, health, listings, wizard
from campus_bazar.config import settings

logger = structlog.get_logger(__name__)


def configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("campus_bazar_starting")
    yield
    # Release previews held by wizards that were never finished
    await get_session_registry().close_all()
    logger.info("campus_bazar_stopping")


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Campus Bazar",
        description="Listing wizard for a student-to-student campus marketplace.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(wizard.router)
    app.include_router(listings.router)

    return app


app = create_app()
