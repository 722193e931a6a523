"""Authentication middleware for JWT token validation."""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pausegate.utils.request_context import (
    clear_user_context,
    set_current_user_id,
    set_current_user_role,
)
from pausegate.utils.security import decode_access_token


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that extracts and validates JWT tokens from requests.

    Supports both cookie-based auth (for web) and Authorization header (for API).
    """

    # Paths that never carry user context
    EXEMPT_PATHS = {
        "/health",
        "/api/docs",
        "/api/redoc",
        "/api/openapi.json",
    }

    EXEMPT_PREFIXES = {
        "/static/",
        "/favicon",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and extract authentication context."""
        clear_user_context()

        if self._is_exempt_path(request.url.path):
            return await call_next(request)

        token = self._extract_token(request)

        if token:
            payload = decode_access_token(token)
            if payload:
                try:
                    set_current_user_id(uuid.UUID(payload["sub"]))
                    if payload.get("role"):
                        set_current_user_role(payload["role"])
                except (KeyError, ValueError, TypeError):
                    # Malformed subject - context stays unset
                    pass

        response = await call_next(request)

        clear_user_context()

        return response

    def _is_exempt_path(self, path: str) -> bool:
        """Check if the path is exempt from authentication."""
        if path in self.EXEMPT_PATHS:
            return True
        return any(path.startswith(prefix) for prefix in self.EXEMPT_PREFIXES)

    def _extract_token(self, request: Request) -> str | None:
        """Extract JWT token from request.

        Priority:
        1. Authorization header (Bearer token)
        2. access_token cookie
        """
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header.removeprefix("Bearer ").strip()

        return request.cookies.get("access_token")
