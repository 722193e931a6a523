"""Maintenance mode middleware.

Runs the gate for every request before any route handler. Blocked requests
get the maintenance page and never reach the application.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from pausegate.services.gate import Gate, GateContext, GateDecision
from pausegate.services.maintenance_page import MaintenancePageRenderer

logger = logging.getLogger(__name__)


class MaintenanceMiddleware(BaseHTTPMiddleware):
    """Serves the maintenance page to visitors who cannot bypass it."""

    # Infrastructure endpoints that are never gated
    EXEMPT_PATHS = {"/health", "/favicon.ico"}
    EXEMPT_PREFIXES = {"/static/"}

    def __init__(self, app: ASGIApp, gate: Gate, renderer: MaintenancePageRenderer):
        super().__init__(app)
        self.gate = gate
        self.renderer = renderer

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in self.EXEMPT_PATHS or any(path.startswith(p) for p in self.EXEMPT_PREFIXES):
            return await call_next(request)

        outcome = await self.gate.should_intercept(GateContext.from_request(request))
        logger.debug(f"Gate {outcome.decision.value} for {request.method} {path}")

        if outcome.decision is not GateDecision.BLOCKED:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        logger.info(f"Maintenance page served for {request.method} {path} ({client})")
        return await self.renderer.render(request, outcome.settings)
