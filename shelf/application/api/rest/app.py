import logging
from contextlib import asynccontextmanager
from pathlib import Path

import logfire
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from shelf.application.api.v1.errors import GENERIC_MESSAGE, map_shelf_error
from shelf.application.api.v1.routes import health, records
from shelf.application.di import create_container
from shelf.config import Config, configure_logging
from shelf.domain.shared.error import InfrastructureError, ShelfError
from shelf.infrastructure.persistence.seed import initialize_store
from shelf.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    config = await container.get(Config)

    # Schema and seed data before the first request
    await initialize_store(container, config)

    yield

    await container.close()


def create_app(config: Config | None = None) -> FastAPI:
    """Create FastAPI application."""
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allowed_origins,
        allow_methods=config.cors.allowed_methods,
        allow_headers=config.cors.allowed_headers,
    )

    # Setup dependency injection
    container = create_container(config)
    setup_dishka(container, app_instance)

    collection = config.catalog.collection.strip("/")
    app_instance.include_router(health.router)
    app_instance.include_router(records.router, prefix=f"/{collection}")
    app_instance.include_router(records.router, prefix=f"/api/{collection}")

    # Uploaded images are served straight from disk
    if config.assets.backend == "disk":
        upload_dir = Path(config.assets.upload_dir)
        upload_dir.mkdir(parents=True, exist_ok=True)
        app_instance.mount(
            "/" + config.assets.url_prefix.strip("/"),
            StaticFiles(directory=upload_dir),
            name="uploads",
        )

    # Global Shelf error handler - maps domain and infrastructure errors to HTTP responses
    @app_instance.exception_handler(ShelfError)
    async def shelf_error_handler(request: Request, exc: ShelfError):
        if isinstance(exc, InfrastructureError):
            logger.error(
                "Infrastructure failure on %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
        http_exc = map_shelf_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"status": "error", "code": "internal_error", "message": GENERIC_MESSAGE},
        )

    return app_instance
