"""Middleware exports."""

from pausegate.middleware.auth import AuthMiddleware
from pausegate.middleware.language import LanguageMiddleware
from pausegate.middleware.maintenance import MaintenanceMiddleware

__all__ = ["AuthMiddleware", "LanguageMiddleware", "MaintenanceMiddleware"]
