"""Maintenance page rendering.

Builds the 503 response shown to blocked visitors. The page is a single
self-contained HTML document; if the template cannot be rendered a minimal
inline page is returned instead, with the same status and headers.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from fastapi.responses import HTMLResponse
from markupsafe import Markup, escape
from starlette.templating import Jinja2Templates

from pausegate.config import settings as app_settings
from pausegate.schemas.maintenance import MaintenanceSettings
from pausegate.services.i18n_service import get_i18n_service
from pausegate.services.media_service import MediaResolver
from pausegate.utils.request_context import get_current_language
from pausegate.utils.sanitize import sanitize_html, sanitize_url

logger = logging.getLogger(__name__)

MAINTENANCE_TEMPLATE = "maintenance.html"

# Keep proxies and browsers from caching the maintenance page
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, must-revalidate, max-age=0, no-store, private",
    "Expires": "Wed, 11 Jan 1984 05:00:00 GMT",
    "Pragma": "no-cache",
}

RELOAD_FLAG = "pausegate_reloaded"


class MaintenancePageRenderer:
    """Renders the maintenance page for blocked requests."""

    status_code = 503

    def __init__(
        self,
        templates: Jinja2Templates,
        media_resolver: MediaResolver,
        template_name: str = MAINTENANCE_TEMPLATE,
    ):
        self.templates = templates
        self.media_resolver = media_resolver
        self.template_name = template_name

    def response_headers(self) -> dict[str, str]:
        """Headers sent with every maintenance response."""
        headers = dict(NO_CACHE_HEADERS)
        headers["Retry-After"] = str(app_settings.retry_after_seconds)
        return headers

    async def build_context(
        self,
        settings: MaintenanceSettings,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Prepare template variables, escaping each field for where it is used."""
        now = now or datetime.now(timezone.utc)
        tz = app_settings.site_tzinfo

        target = settings.countdown_target(tz)
        timestamp_ms = settings.countdown_timestamp_ms(tz)
        is_future = target is not None and target > now

        logo_url = await self.media_resolver.resolve(settings.logo_id)

        buttons = []
        for button in settings.cta_buttons:
            url = sanitize_url(button.url)
            if button.label and url:
                buttons.append({"label": button.label, "url": url})

        return {
            "lang": get_current_language(),
            "site_name": app_settings.site_name,
            "heading": settings.heading,
            "subheading": Markup(sanitize_html(settings.subheading)),
            "seo_title": settings.seo_title,
            "meta_description": settings.meta_description,
            "logo_url": logo_url,
            "logo_alt": settings.logo_alt or app_settings.site_name,
            "cta_buttons": buttons,
            "show_countdown": settings.countdown_enabled and timestamp_ms > 0,
            "countdown_expired": settings.countdown_enabled and target is not None and not is_future,
            "silent_reload": not settings.countdown_enabled and is_future,
            "countdown_target_ms": timestamp_ms,
            "reload_flag": RELOAD_FLAG,
        }

    async def render(
        self,
        request: Request,
        settings: MaintenanceSettings,
        now: datetime | None = None,
    ) -> Response:
        """Build the 503 response for a blocked request."""
        headers = self.response_headers()
        context = await self.build_context(settings, now)

        try:
            return self.templates.TemplateResponse(
                request,
                self.template_name,
                context,
                status_code=self.status_code,
                headers=headers,
            )
        except Exception:
            logger.exception("Maintenance template failed to render, using fallback page")
            return self.render_fallback(context["lang"], headers)

    def render_fallback(self, lang: str, headers: dict[str, str]) -> HTMLResponse:
        """Minimal inline page used when the template cannot be rendered."""
        i18n = get_i18n_service()
        title = escape(i18n.t("maintenance.fallback_title", lang))
        message = escape(i18n.t("maintenance.fallback_message", lang))

        content = (
            "<!DOCTYPE html>"
            f'<html lang="{escape(lang)}"><head><meta charset="utf-8">'
            '<meta name="robots" content="noindex, nofollow">'
            f"<title>{title}</title></head>"
            f"<body><h1>{title}</h1><p>{message}</p></body></html>"
        )
        return HTMLResponse(content=content, status_code=self.status_code, headers=headers)
