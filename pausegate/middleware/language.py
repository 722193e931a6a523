"""Language detection middleware."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pausegate.config import settings
from pausegate.utils.request_context import set_current_language


def parse_accept_language(header: str) -> list[str]:
    """Parse an Accept-Language header into language codes, best first.

    Example header: en-US,en;q=0.9,af;q=0.8
    """
    if not header:
        return []

    weighted = []
    for part in header.split(","):
        part = part.strip()
        if not part:
            continue

        lang, _, params = part.partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0

        weighted.append((lang.split("-")[0].strip().lower(), quality))

    weighted.sort(key=lambda item: item[1], reverse=True)
    return [lang for lang, _ in weighted]


class LanguageMiddleware(BaseHTTPMiddleware):
    """Picks the visitor's language for pages rendered in this request.

    Priority:
    1. Query parameter: ?lang=af
    2. Cookie: language=af
    3. Accept-Language header
    4. Default language from settings
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        set_current_language(self._detect_language(request))
        return await call_next(request)

    def _detect_language(self, request: Request) -> str:
        supported = settings.supported_languages_list

        for lang in (request.query_params.get("lang"), request.cookies.get("language")):
            if lang and lang in supported:
                return lang

        for lang in parse_accept_language(request.headers.get("Accept-Language", "")):
            if lang in supported:
                return lang

        return settings.default_language
