"""
Exception handlers mapping domain errors to response envelopes.

- PortfolioError -> its status code with ``{"success": false, "message", "error"?}``
- RequestValidationError -> 400 naming the first failing field
- HTTPException -> same envelope, status preserved
- anything else -> 500 without internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.api.responses import error_body
from portfolio.domain.errors import PortfolioError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(PortfolioError)
    async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
        if exc.status_code in (401, 403):
            logger.warning("%s on %s: %s", exc.status_code, request.url.path, exc.message)
        elif exc.status_code >= 500:
            logger.error("Error on %s: %s", request.url.path, exc.message)
        field = exc.field if isinstance(exc, ValidationError) else None
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, field))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or None
        msg = str(first.get("msg", "Invalid request data"))
        message = f"{field}: {msg}" if field else msg
        logger.info("Validation error on %s: %s", request.url.path, message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message, field)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error"),
        )
