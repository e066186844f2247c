"""
FastAPI application for the free slot generator.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..adapters.usage_log import UsageLogStore
from ..config import AppConfig
from ..domain.exceptions import CalendarFetchError, FreeSlotsError
from ..services.factory import build_service, build_usage_store
from ..services.free_slot_finder import FreeSlotService
from .routes import router

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch the ICS link."
INTERNAL_ERROR_MESSAGE = "An internal server error occurred."


def _validation_error_body(exc: RequestValidationError) -> dict:
    """Report the first validation error with its dotted field path."""
    errors = exc.errors()
    if not errors:
        return {"message": "Invalid request"}

    error = errors[0]
    message = str(error.get("msg", "Invalid request"))
    # Messages of our own validators arrive prefixed by pydantic
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    body = {"message": message}
    path = [str(part) for part in error.get("loc", ()) if part != "body"]
    if path and error.get("type") != "json_invalid":
        body["field"] = ".".join(path)
    return body


def create_app(
    config: Optional[AppConfig] = None,
    service: Optional[FreeSlotService] = None,
    usage_store: Optional[UsageLogStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration; defaults are used when omitted
        service: Pre-built service, mainly for tests
        usage_store: Pre-built usage log, mainly for tests

    Returns:
        Configured FastAPI application.
    """
    config = config or AppConfig()
    usage_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="usage-log")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting freeslots API %s", __version__)
        yield
        usage_executor.shutdown(wait=True)
        logger.info("Shutting down freeslots API")

    app = FastAPI(
        title="freeslots",
        description="Free meeting slots from a public calendar feed, formatted by an LLM.",
        version=__version__,
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.service = service or build_service(config)
    app.state.usage_store = usage_store or build_usage_store(config)
    app.state.usage_executor = usage_executor

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log API requests with their status and duration."""
        start_time = time.time()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            process_time = (time.time() - start_time) * 1000
            logger.info(
                "%s %s %s in %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                process_time,
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_validation_error_body(exc),
        )

    @app.exception_handler(CalendarFetchError)
    async def calendar_fetch_exception_handler(request: Request, exc: CalendarFetchError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": FETCH_FAILED_MESSAGE},
        )

    @app.exception_handler(FreeSlotsError)
    async def domain_exception_handler(request: Request, exc: FreeSlotsError):
        logger.error("Request failed: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error("Unhandled exception: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )

    app.include_router(router)

    return app


def run_api_server(config: AppConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Run the API server.

    Args:
        config: Application configuration
        host: Host to bind to (defaults to the configured one)
        port: Port to bind to (defaults to the configured one)
    """
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level="debug" if config.server.debug else "info",
    )
