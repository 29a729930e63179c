"""Translate storefront errors into JSON HTTP responses.

protean's handlers cover validation (400), missing records (404), invalid
state (409) and invalid operations (422). The handlers below add the
storefront's own failures and enrich the conflicts that carry more than a
message; Starlette picks the most specific handler along the exception's MRO.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers as register_protean_exception_handlers

from shared.exceptions import (
    Forbidden,
    InsufficientStock,
    InvalidStatus,
    PersistenceFailure,
    Unauthenticated,
)

logger = structlog.get_logger(__name__)

LOGIN_URL = "/login"


async def _unauthenticated(request: Request, exc: Unauthenticated) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": exc.message, "login_url": LOGIN_URL})


async def _forbidden(request: Request, exc: Forbidden) -> JSONResponse:
    logger.info("Access denied", path=request.url.path)
    return JSONResponse(status_code=403, content={"error": exc.message})


async def _insufficient_stock(request: Request, exc: InsufficientStock) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "error": exc.message,
            "product_id": exc.product_id,
            "available": exc.available,
            "requested": exc.requested,
        },
    )


async def _stale_version(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.info("Concurrent modification rejected", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=409,
        content={"error": "The record was changed by someone else. Reload it and try again."},
    )


async def _invalid_status(request: Request, exc: InvalidStatus) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": exc.message, "allowed": exc.allowed})


async def _persistence_failure(request: Request, exc: PersistenceFailure) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install protean's standard handlers plus the storefront's own on ``app``."""
    register_protean_exception_handlers(app)

    app.add_exception_handler(Unauthenticated, _unauthenticated)
    app.add_exception_handler(Forbidden, _forbidden)
    app.add_exception_handler(InsufficientStock, _insufficient_stock)
    app.add_exception_handler(ExpectedVersionError, _stale_version)
    app.add_exception_handler(InvalidStatus, _invalid_status)
    app.add_exception_handler(PersistenceFailure, _persistence_failure)
