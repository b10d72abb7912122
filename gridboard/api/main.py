"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gridboard.api.config import Settings, get_settings
from gridboard.api.dependencies import BoardRegistry
from gridboard.api.middleware import LoggingMiddleware
from gridboard.api.routes import api_router
from gridboard.db.cache import LayoutStore, StoreConfig, get_store

logger = logging.getLogger("gridboard.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Debug mode: {settings.debug}")

    yield

    # Shutdown: let pending layout writes land before closing the store
    logger.info("Shutting down...")
    await app.state.boards.flush_all()
    await app.state.store.close()


def create_app(
    settings: Settings | None = None,
    store: LayoutStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    if store is None:
        store = get_store(StoreConfig(redis_url=settings.redis_url, prefix=settings.store_prefix))

    app = FastAPI(
        title=settings.app_name,
        description="Adaptive card grid layouts",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.boards = BoardRegistry(store, settings)

    # Logging middleware
    app.add_middleware(
        LoggingMiddleware,
        exclude_paths=["/health", "/ready"],
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "gridboard.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
