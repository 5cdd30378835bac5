import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from minerva import database
from minerva.bridge.registry import model_registry
from minerva.config import settings
from minerva.exception_handlers import register_exception_handlers
from minerva.libraries.loader import initialize_libraries, shutdown_libraries
from minerva.libraries.registry import library_registry
from minerva.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from minerva.models import register_core_models
from minerva.routes import blocks, pages, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, then register core models and library overrides."""
    logger.info("Starting up the application...")
    if settings.create_tables:
        async with database.engine.begin() as conn:
            await conn.run_sync(database.Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")

    register_core_models(model_registry)
    await initialize_libraries(model_registry, library_registry)

    yield

    logger.info("Shutting down the application...")
    await shutdown_libraries(model_registry, library_registry)
    await database.engine.dispose()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    setup_structured_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
        log_file=settings.log_file,
    )

    app = FastAPI(
        title=settings.app_name,
        description="Minerva CMS core controllers with library bridging",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(SessionMiddleware, secret_key=settings.secret_key)
    app.add_middleware(StructuredLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(blocks.router)
    app.include_router(users.router)

    @app.get("/", tags=["Root"])
    async def root():
        return {"message": f"Welcome to {settings.app_name}"}

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok", "libraries": sorted(model_registry.libraries())}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app


app = create_app()
