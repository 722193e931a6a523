"""Authentication web routes for HTML pages."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from pausegate.config import settings
from pausegate.database import get_db
from pausegate.exceptions import PauseGateException
from pausegate.schemas.auth import LoginRequest
from pausegate.services.auth_service import get_auth_service
from pausegate.templates_config import t, templates
from pausegate.utils.request_context import get_current_language
from pausegate.utils.security import decode_access_token

router = APIRouter()

DEFAULT_NEXT = "/admin/maintenance"


def _safe_next(value: str | None) -> str:
    """Only follow site-relative redirect targets."""
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return DEFAULT_NEXT


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, error: str | None = None, next: str | None = None):
    """Render the login page."""
    # Check if already authenticated with a valid token
    token = request.cookies.get("access_token")
    if token:
        if decode_access_token(token):
            return RedirectResponse(url=_safe_next(next), status_code=302)
        # Invalid token - clear the cookie
        response = RedirectResponse(url="/login", status_code=302)
        response.delete_cookie("access_token")
        return response

    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {
            "error": error,
            "next": _safe_next(next),
            "current_language": get_current_language(),
        },
    )


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    next: str = Form(DEFAULT_NEXT),
    db: AsyncSession = Depends(get_db),
):
    """Handle login form submission."""
    lang = get_current_language()
    try:
        auth_service = get_auth_service()
        login_request = LoginRequest(email=email, password=password)
        login_response, _ = await auth_service.login(db, login_request)
    except (PauseGateException, ValidationError):
        # Re-render login page with error
        return templates.TemplateResponse(
            request,
            "auth/login.html",
            {
                "error": t("auth.invalid_credentials", lang),
                "email": email,
                "next": _safe_next(next),
                "current_language": lang,
            },
            status_code=400,
        )

    redirect = RedirectResponse(url=_safe_next(next), status_code=302)
    redirect.set_cookie(
        key="access_token",
        value=login_response.access_token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_access_token_expire_minutes * 60,
    )
    return redirect


@router.get("/logout")
async def logout():
    """Log out the current user."""
    redirect = RedirectResponse(url="/login", status_code=302)
    redirect.delete_cookie(
        key="access_token",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return redirect
