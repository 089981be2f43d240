"""Error Handlers — global exception handlers for the Cresp API.

Invariants:
    - CrespError → structured JSON with error code, message, severity
    - RequestValidationError → 400 whose message is the first failing rule,
      plus field-level details for every error
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (CrespError), validation (Pydantic), catch-all (Exception)
    - Validators raise ValueError with the user-facing rule message; Pydantic prefixes
      it with "Value error, " which is stripped so forms can show it verbatim
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from cresp.core.errors import CrespError, ErrorSeverity

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_cresp_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_cresp_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CrespError)
    async def cresp_error_handler(request: Request, exc: CrespError):
        """Handle all Cresp domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"CrespError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _clean_message(msg: str) -> str:
    return msg[len(_VALUE_ERROR_PREFIX):] if msg.startswith(_VALUE_ERROR_PREFIX) else msg


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    errors = exc.errors()
    message = _clean_message(errors[0]["msg"]) if errors else "Invalid request data"
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": message,
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": _clean_message(e["msg"]),
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    }
