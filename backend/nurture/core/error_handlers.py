"""
Exception handlers mapping every failure to a single ``{"error", "code"}`` shape.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nurture.config import Settings
from nurture.core.errors import ErrorCode, ServiceError

logger = logging.getLogger("nurture.errors")


def error_body(message: str, code: ErrorCode | str, **extra) -> dict:
    """Build the JSON error body used by every handler."""
    code_value = code.value if isinstance(code, ErrorCode) else code
    return {"error": message, "code": code_value, **extra}


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach the error-to-status mapping to the application."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(
                f"{request.method} {request.url.path} failed: {exc.code.value} {exc.message}"
            )
        else:
            logger.info(
                f"{request.method} {request.url.path} rejected: {exc.code.value}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.code),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        fields = [
            ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(
                "Invalid request data",
                ErrorCode.VALIDATION_ERROR,
                fields=[f for f in fields if f],
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content=error_body(
                    "Endpoint not found", ErrorCode.NOT_FOUND, path=request.url.path
                ),
            )
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            code = ErrorCode.UNAUTHENTICATED
        elif exc.status_code == status.HTTP_403_FORBIDDEN:
            code = ErrorCode.FORBIDDEN
        elif exc.status_code < 500:
            code = ErrorCode.VALIDATION_ERROR
        else:
            code = ErrorCode.INTERNAL_ERROR
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        message = str(exc) if settings.is_development and str(exc) else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(message, ErrorCode.INTERNAL_ERROR),
        )
