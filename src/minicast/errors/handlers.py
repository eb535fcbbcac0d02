"""FastAPI exception handlers producing the ErrorResponse envelope."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from minicast.errors.exceptions import (
    AuthorizationError,
    MinicastError,
    StorageUnavailableError,
    ValidationError,
)
from minicast.models.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def _render(request: Request, exc: MinicastError) -> JSONResponse:
    trace_id = getattr(request.state, "trace_id", "unknown")
    error_response = ErrorResponse(
        error=ErrorDetail(
            code=exc.code,
            message=exc.message,
            details=exc.details,
            trace_id=trace_id,
            timestamp=datetime.now(timezone.utc),
        ),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(MinicastError)
    async def minicast_error_handler(request: Request, exc: MinicastError):
        if isinstance(exc, AuthorizationError):
            logger.warning(
                "admin_access_denied",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "identity": getattr(request.state, "identity", None),
                    "reason": str(exc),
                },
            )
        return _render(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = ", ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())[1:])}: {err.get('msg')}"
            for err in errors
        )
        details = [
            {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
            for err in errors
        ]
        return _render(request, ValidationError(message or "Invalid request body", details))

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def storage_error_handler(request: Request, exc: Exception):
        logger.error("storage_unavailable: %s", exc)
        return _render(request, StorageUnavailableError())
