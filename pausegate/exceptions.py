"""Custom exception classes and global exception handlers."""

import logging
import traceback

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import TemplateError
from markupsafe import escape
from starlette.templating import Jinja2Templates

logger = logging.getLogger(__name__)


class PauseGateException(Exception):
    """Base exception for all PauseGate-specific errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(PauseGateException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404)


class ForbiddenException(PauseGateException):
    """Access forbidden exception."""

    def __init__(self, message: str = "You don't have permission to perform this action"):
        super().__init__(message, 403)


class UnauthorizedException(PauseGateException):
    """Authentication required exception."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401)


class ValidationException(PauseGateException):
    """Validation error exception with field-level errors."""

    def __init__(self, errors: list[dict] | str):
        if isinstance(errors, str):
            errors = [{"field": "general", "message": errors}]
        super().__init__("Validation failed", 422)
        self.errors = errors


class SettingsWriteError(PauseGateException):
    """The settings record could not be persisted."""

    def __init__(self, message: str = "Failed to update settings."):
        super().__init__(message, 500)


class UserContextError(PauseGateException):
    """User context not set error."""

    def __init__(self, message: str = "User context is required"):
        super().__init__(message, 401)


def wants_json(request: Request) -> bool:
    """Check if request expects JSON (API) or HTML (web)."""
    return (
        request.url.path.startswith("/api/")
        or request.url.path.startswith("/cron/")
        or "application/json" in request.headers.get("accept", "")
        or request.headers.get("content-type", "").startswith("application/json")
    )


def create_exception_handlers(templates: Jinja2Templates):
    """Create exception handlers that use the provided templates."""

    def render_error_page(request: Request, message: str, status_code: int):
        try:
            return templates.TemplateResponse(
                request,
                "errors/generic.html",
                {"message": message, "status_code": status_code},
                status_code=status_code,
            )
        except TemplateError:
            return HTMLResponse(
                content=f"<h1>{status_code}</h1><p>{escape(message)}</p>",
                status_code=status_code,
            )

    async def pausegate_exception_handler(request: Request, exc: PauseGateException):
        """Handle PauseGate custom exceptions."""
        logger.warning(
            f"PauseGateException on {request.method} {request.url.path}: "
            f"{exc.message} (status={exc.status_code})"
        )

        if wants_json(request):
            content = {
                "status": "error",
                "message": exc.message,
            }
            if hasattr(exc, "errors"):
                content["errors"] = exc.errors
            return JSONResponse(status_code=exc.status_code, content=content)

        return render_error_page(request, exc.message, exc.status_code)

    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}")
        logger.error(f"Exception: {type(exc).__name__}: {exc}")
        tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        logger.error("".join(tb_lines))

        if wants_json(request):
            return JSONResponse(
                status_code=500,
                content={
                    "status": "error",
                    "message": "An unexpected error occurred",
                },
            )

        return render_error_page(request, "An unexpected error occurred", 500)

    return {
        PauseGateException: pausegate_exception_handler,
        Exception: generic_exception_handler,
    }
