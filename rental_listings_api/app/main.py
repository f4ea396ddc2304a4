"""
Main entrypoint for the Rental Listings API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and includes the API router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app`` so it can be served
directly, e.g.::

    uvicorn rental_listings_api.app.main:app --reload

The document store and image storage clients are created by the
startup hook, not at import time.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import router as api_router
from .core.config import settings
from .core.db import close_store, init_store
from .core.exceptions import ListingsError
from .core.logging_config import setup_logging
from .core.storage import close_image_storage, init_image_storage

logger = logging.getLogger(__name__)


async def listings_error_handler(request: Request, exc: ListingsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
    )
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, details)
    return JSONResponse(status_code=400, content={"message": f"Invalid request: {details}"})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed with an unexpected error", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": f"Unknown server error: {exc}"})


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_exception_handler(ListingsError, listings_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def startup_event() -> None:
        # Both calls are idempotent; a missing configuration is logged and
        # reported per request instead of preventing startup.
        if init_store() is None:
            logger.error("Document store is not available; data routes will answer HTTP 500")
        init_image_storage()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        close_image_storage()
        close_store()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
