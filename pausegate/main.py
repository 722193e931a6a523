"""FastAPI application factory and entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.templating import Jinja2Templates

from pausegate.config import settings
from pausegate.database import close_db, get_db_context
from pausegate.exceptions import create_exception_handlers
from pausegate.middleware import AuthMiddleware, LanguageMiddleware, MaintenanceMiddleware
from pausegate.services.access_service import IdentityProvider
from pausegate.services.auto_disable_service import AutoDisableScheduler, AutoDisableService
from pausegate.services.gate import Gate
from pausegate.services.maintenance_page import MaintenancePageRenderer
from pausegate.services.media_service import MediaResolver
from pausegate.services.settings_service import SessionFactory, SettingsStore
from pausegate.templates_config import templates as default_templates
from pausegate.utils.security import decode_access_token

log_level = logging.DEBUG if settings.is_development else getattr(logging, settings.app_log_level)
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,  # Override any existing configuration
)
# APScheduler logs every job run at INFO
logging.getLogger("apscheduler").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)
logger.info(f"Logging configured at level: {logging.getLevelName(log_level)}")


def create_app(
    session_factory: SessionFactory = get_db_context,
    templates: Jinja2Templates = default_templates,
    run_scheduler: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session_factory: Opens database sessions for the settings store
        templates: Template environment for the maintenance and admin pages
        run_scheduler: Start the in-process auto-disable scheduler
    """
    store = SettingsStore(session_factory)
    gate = Gate(store, IdentityProvider(session_factory))
    renderer = MaintenancePageRenderer(templates, MediaResolver(session_factory))
    auto_disable_service = AutoDisableService(store, settings.site_tzinfo)
    auto_disable_scheduler = AutoDisableScheduler(
        auto_disable_service, settings.auto_disable_check_minutes
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
        current = await store.install()
        if run_scheduler:
            auto_disable_scheduler.start()
            auto_disable_scheduler.schedule(current)
        if current.is_enabled:
            logger.info("Maintenance mode is enabled")
        yield
        logger.info(f"Shutting down {settings.app_name}")
        auto_disable_scheduler.stop()
        await close_db()

    app = FastAPI(
        title=settings.app_name,
        description="Maintenance mode gate with a customizable 503 page",
        version="1.0.0",
        docs_url="/api/docs" if settings.app_debug else None,
        redoc_url="/api/redoc" if settings.app_debug else None,
        openapi_url="/api/openapi.json" if settings.app_debug else None,
        lifespan=lifespan,
    )

    app.state.settings_store = store
    app.state.gate = gate
    app.state.maintenance_renderer = renderer
    app.state.auto_disable_service = auto_disable_service
    app.state.auto_disable_scheduler = auto_disable_scheduler

    # Middleware added last runs first: CORS, language, auth, then the gate
    app.add_middleware(MaintenanceMiddleware, gate=gate, renderer=renderer)
    app.add_middleware(AuthMiddleware)
    app.add_middleware(LanguageMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [settings.app_base_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    exception_handlers = create_exception_handlers(templates)
    for exc_class, handler in exception_handlers.items():
        app.add_exception_handler(exc_class, handler)

    # Register routers
    register_routers(app)

    return app


def register_routers(app: FastAPI):
    """Register all API and web routers."""
    from pausegate.api.cron import router as cron_router
    from pausegate.api.v1 import api_router
    from pausegate.web import web_router

    # API routes (versioned)
    app.include_router(api_router, prefix="/api/v1")

    # External scheduler hooks
    app.include_router(cron_router)

    # Web routes (HTML pages)
    app.include_router(web_router)

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "healthy", "app": settings.app_name, "env": settings.app_env}

    # Root redirect
    @app.get("/", include_in_schema=False)
    async def root(request: Request):
        """Redirect root to login or the settings page based on auth status."""
        token = request.cookies.get("access_token")
        if token:
            if decode_access_token(token):
                return RedirectResponse(url="/admin/maintenance", status_code=302)
            # Invalid token - clear it and go to login
            response = RedirectResponse(url="/login", status_code=302)
            response.delete_cookie("access_token")
            return response
        return RedirectResponse(url="/login", status_code=302)


# Create the app instance
app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "pausegate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.app_log_level.lower(),
    )


if __name__ == "__main__":
    main()
