import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import alerts, convert, health, history, rates
from .services.drift import rate_drift_loop
from .services.state import build_state

logger = logging.getLogger("currencypro")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.currency.settings
    task = None
    if settings.rate_drift_enabled:
        task = asyncio.create_task(rate_drift_loop(app))
    logger.info("%s %s started", settings.app_name, settings.version)
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate configuration. Falls back to cached get_settings(). Every call
    builds a fresh CurrencyState (rate table, history, alerts).
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug, service=settings.app_name, version=settings.version)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.currency = build_state(settings)

    # Middleware (request id / structured logging, browser client access)
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(errors.CurrencyProError, errors.domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    api_routers = [health.router, rates.router, convert.router, history.router, alerts.router]
    for router in api_routers:
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        endpoints = [
            f"{method} {route.path}"
            for router in api_routers
            for route in router.routes
            if isinstance(route, APIRoute)
            for method in sorted(route.methods)
        ]
        return {"message": settings.app_name, "version": settings.version, "endpoints": endpoints}

    return app


app = create_app()
