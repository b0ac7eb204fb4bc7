"""
Storefront API — FastAPI entry point

Thin HTTP edge over the application handlers: parse the request, call a
handler, serialize the DTO.  Domain errors become ``{"error": message}``
responses with the matching status code.

Run with ``uvicorn storefront.infrastructure.api.app:app``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.config import configure_logging
from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
)
from storefront.infrastructure import bootstrap
from storefront.infrastructure.api import order_routes, review_routes

logger = logging.getLogger(__name__)

# Anything not listed is a client error (400).
_STATUS_BY_ERROR: list[tuple[type[DomainException], int]] = [
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (ConcurrencyConflictError, 409),
    (InternalError, 500),
]


def status_for(exc: DomainException) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


async def _domain_error(request: Request, exc: DomainException) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": str(exc)})


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def _malformed_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message},
    )


def create_app() -> FastAPI:
    configure_logging(bootstrap.settings().log_level)

    app = FastAPI(title="Storefront API")
    app.include_router(order_routes.router)
    app.include_router(review_routes.router)

    app.add_exception_handler(DomainException, _domain_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _malformed_request)

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "storefront"}

    return app


app = create_app()
