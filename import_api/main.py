# =============================================================================
# Import API - Main Application
# =============================================================================
"""
Import API

A bulk import gateway in front of the data engine. Each request passes
through a fixed pipeline before the engine is touched:

- Capability gate: the route must be enabled by the engine's capabilities
- Size limit: bodies above HTTP_MAX_IMPORT_BODY_SIZE never reach the handler
- Decoding: the body must be valid UTF-8
- Authorization: the session must be allowed to edit at its own level
- Negotiation: the result is encoded in the format named by Accept
"""

import logging

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import router
from .config import get_settings
from .errors import ImportApiError
from .middleware import BodySizeLimitMiddleware


# =============================================================================
# Logging Configuration
# =============================================================================

def configure_logging() -> None:
    """
    Configure structured logging with structlog.

    Sets up JSON-formatted logs on top of the standard library logger,
    filtered at the configured LOG_LEVEL.
    """
    settings = get_settings()

    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# =============================================================================
# Error Handlers
# =============================================================================

async def import_api_error_handler(request: Request, exc: ImportApiError) -> JSONResponse:
    """Render a pipeline error as its status code and JSON body."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global handler for unexpected errors.

    Logs the full traceback and returns the standard error body without
    exposing internals.
    """
    logger = structlog.get_logger(__name__)
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    error = ImportApiError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# =============================================================================
# Application Factory
# =============================================================================

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    # Configure logging first
    configure_logging()

    # Create FastAPI app
    app = FastAPI(
        title="Import API",
        description="""
## Overview

Bulk import gateway for the data engine.

## Usage

`POST /import` with the import text as the raw request body and an
`Accept` header naming the response format:

- `application/json`: simplified result as JSON
- `application/cbor`: simplified result as CBOR
- `application/pack`: simplified result as MessagePack
- `application/octet-stream`: empty body
- `application/vnd.import-api.native`: full engine result

## Authentication

The caller's session is established upstream. Imports require edit
rights at the session's own level.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Enforce the import body limit before any handler runs
    app.add_middleware(
        BodySizeLimitMiddleware,
        max_body_size=settings.http_max_import_body_size,
        paths=["/import"],
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(ImportApiError, import_api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include API routes
    app.include_router(router)

    # Log startup
    logger = structlog.get_logger(__name__)
    logger.info(
        "application_startup",
        service=settings.service_name,
        environment=settings.environment,
        max_import_body_size=settings.http_max_import_body_size,
        engine_factory=settings.engine_factory,
    )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# Startup & Shutdown Events
# =============================================================================

@app.on_event("startup")
async def startup_event() -> None:
    """
    Application startup handler.

    Logs readiness once the server starts accepting requests.
    """
    logger = structlog.get_logger(__name__)
    logger.info("startup_complete", message="Import API ready to accept requests")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Application shutdown handler."""
    logger = structlog.get_logger(__name__)
    logger.info("shutdown_initiated", message="Import API shutting down")
