import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import health, rates, realtime, ui
from .services.history import load_initial_history
from .services.rates.base import SupportsFetch
from .services.runtime import build_runtime

STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_app(
    settings_override: Settings | None = None,
    provider_override: SupportsFetch | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp data dir). Falls back to cached get_settings().
    provider_override: replace the configured rate provider (tests, offline runs).
    """
    settings = settings_override or get_settings()
    if settings.history_path is None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)
    logger = logging.getLogger("kurswatch")

    runtime = build_runtime(settings, provider_override)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        runtime.state.replace(
            load_initial_history(runtime.store, settings.corrupt_store_policy)
        )
        logger.info(
            "loaded %d snapshots from %s",
            len(runtime.state.current),
            runtime.store.path,
        )
        if settings.scheduler_enabled:
            runtime.scheduler.start()
        try:
            yield
        finally:
            await runtime.scheduler.stop()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(ui.router)
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(realtime.router)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app
