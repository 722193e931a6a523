"""Web router aggregator for HTML pages."""

from fastapi import APIRouter

from pausegate.web import admin, auth

web_router = APIRouter(include_in_schema=False)

# Include all web routers
web_router.include_router(auth.router)
web_router.include_router(admin.router)
