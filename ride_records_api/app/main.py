"""
Main entrypoint for the Ride Records API.

This module assembles the FastAPI application: logging, middleware,
error handlers and the versioned routers.  The ``create_app`` function
builds and configures the app, which is then instantiated at module
import time as ``app``, so it can be served with uvicorn::

    uvicorn ride_records_api.app.main:app --reload

The storage backend is built once when the application starts (or
passed in explicitly, which is what the tests do) and lives on
``app.state`` for the lifetime of the process.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.errors import RideError
from .core.logging_config import setup_logging
from .core.middleware import AccessLogMiddleware, SecurityHeadersMiddleware
from .services.ride_service import RideService
from .storage import RideStorage, create_storage

logger = logging.getLogger(__name__)


async def ride_error_handler(request: Request, exc: RideError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"error_code": "VALIDATION_ERROR", "message": message, "rule": "MALFORMED_REQUEST"},
    )


def create_app(app_settings: Optional[Settings] = None, storage: Optional[RideStorage] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use; defaults to the process-wide ``settings``.
    storage : Optional[RideStorage]
        A ready storage backend.  When omitted, one is built from the
        settings at startup and closed at shutdown.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    config = app_settings or default_settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(config.log_level, config.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.ride_service is None
        if owned:
            backend = create_storage(config)
            app.state.ride_service = RideService(
                backend, config.default_page_size, config.max_page_size
            )
            logger.info("Using %s ride storage", backend.name)
        try:
            yield
        finally:
            if owned:
                app.state.ride_service.storage.close()
                app.state.ride_service = None

    app = FastAPI(
        title=config.project_name,
        version=config.api_version,
        debug=config.debug,
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.ride_service = (
        RideService(storage, config.default_page_size, config.max_page_size)
        if storage is not None
        else None
    )

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RideError, ride_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(v1_router, prefix=config.api_prefix)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
