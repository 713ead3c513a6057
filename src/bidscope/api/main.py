import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bidscope.config import settings
from bidscope.exceptions import DataFormatError, DataSourceError, DivisionByZeroError
from bidscope.api.middleware import add_request_id, log_requests

# Routers
from bidscope.api.routers import analytics, system

# Configure logging
logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
logger = logging.getLogger("bidscope.api")


def _error(request: Request, status_code: int, error: str, detail: str) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    payload = {"error": error, "detail": detail}
    if rid:
        payload["request_id"] = rid
    return JSONResponse(status_code=status_code, content=payload)


def create_app(db_path: Optional[Path] = None) -> FastAPI:
    """
    Factory to build the FastAPI application.
    Passing db_path points the record store at another SQLite file (used in tests).
    """
    if db_path:
        settings.paths.db_path = db_path
        import bidscope.api.deps as deps
        deps._db_instance = None # reset global instance

    app = FastAPI(title="BidScope API", version=settings.app.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(add_request_id)
    if settings.logging.log_requests:
        app.middleware("http")(log_requests)

    app.include_router(system.router)
    app.include_router(analytics.router)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        logger.exception("Unhandled error", extra={"path": str(request.url), "request_id": rid})
        return _error(request, 500, "internal_error", "Unexpected server error")

    @app.exception_handler(DataFormatError)
    async def data_format_exception_handler(request: Request, exc: DataFormatError):
        logger.warning("malformed record", extra={"field": exc.field, "path": request.url.path})
        return _error(request, 422, "invalid_record", str(exc))

    @app.exception_handler(DivisionByZeroError)
    async def zero_budget_exception_handler(request: Request, exc: DivisionByZeroError):
        logger.warning("zero budget tender", extra={"tender_id": exc.tender_id, "path": request.url.path})
        return _error(request, 422, "zero_budget", str(exc))

    @app.exception_handler(DataSourceError)
    async def datasource_exception_handler(request: Request, exc: DataSourceError):
        return _error(request, 422, "invalid_source", str(exc))

    return app

# Module-level app for uvicorn entrypoint
app = create_app()
