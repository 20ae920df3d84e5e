"""FastAPI application entrypoint for Record Inspector."""

import logging
import os
from contextlib import asynccontextmanager

from src.logging_config import setup_logging

# Configure logging before anything else
setup_logging(log_level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from src.api.middleware.rate_limit import setup_rate_limiting
from src.api.routers import records
from src.config import Config, build_record_source
from src.events.handlers import RecordEventLogger
from src.exceptions import HostConnectionError, InspectorError
from src.models.errors import ErrorResponse
from src.projection.comparator import RecordComparator
from src.projection.service import RecordProjector

# Map HTTP status codes to machine-readable error codes for consistent API responses.
_STATUS_ERROR_CODES = {
    400: "bad_request",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    422: "validation_error",
    429: "rate_limited",
    500: "internal_error",
    502: "host_unavailable",
    503: "service_unavailable",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = Config.load()
    source = build_record_source(config)

    projector = RecordProjector(source, config.projection)
    comparator = RecordComparator(projector)
    logger.info(
        "Record Inspector ready (source=%s, max_sublist_lines=%d)",
        config.host.source,
        config.projection.max_sublist_lines,
    )

    app.state.config = config
    app.state.record_source = source
    app.state.projector = projector
    app.state.comparator = comparator
    app.state.viewer_base_url = config.viewer.base_url
    app.state.event_logger = RecordEventLogger.from_config(projector, config)

    yield

    close = getattr(source, "close", None)
    if close is not None:
        close()


app = FastAPI(title="Record Inspector", lifespan=lifespan)
setup_rate_limiting(app)

cors_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
if cors_origins:
    from fastapi.middleware.cors import CORSMiddleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    response = await call_next(request)
    if request.url.path.startswith("/api/"):
        response.headers["X-API-Version"] = "1"
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Enrich all HTTPException responses with a consistent error_code field."""
    error_code = _STATUS_ERROR_CODES.get(exc.status_code, "internal_error")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=str(exc.detail), error_code=error_code).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(HostConnectionError)
async def host_connection_handler(request: Request, exc: HostConnectionError):
    logger.error("Host connection error: %s", exc)
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(detail="Record host unavailable", error_code="host_unavailable").model_dump(),
    )


@app.exception_handler(InspectorError)
async def inspector_error_handler(request: Request, exc: InspectorError):
    logger.error("Application error: %s", exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error", error_code="internal_error").model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error", error_code="internal_error").model_dump(),
    )


app.include_router(records.router)


@app.get("/health")
async def health():
    return {"status": "healthy"}
