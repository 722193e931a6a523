"""API v1 router aggregator."""

from fastapi import APIRouter

from pausegate.api.v1 import auth, maintenance

api_router = APIRouter(tags=["API v1"])

# Include all API routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(maintenance.router)
