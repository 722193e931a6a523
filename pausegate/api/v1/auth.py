"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from pausegate.config import settings
from pausegate.database import get_db
from pausegate.schemas.auth import LoginRequest, LoginResponse, UserProfile
from pausegate.schemas.common import APIResponse
from pausegate.services.auth_service import get_auth_service
from pausegate.utils.request_context import get_current_user_id

router = APIRouter()


def set_auth_cookie(response: Response, token: str) -> None:
    """Store the access token in an HttpOnly cookie for browser clients."""
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_access_token_expire_minutes * 60,
    )


@router.post("/login", response_model=APIResponse[LoginResponse])
async def login(
    request: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate user and return an access token.

    Sets an HttpOnly cookie for web clients in addition to returning
    the token in the response body for API clients.
    """
    auth_service = get_auth_service()
    login_response, user = await auth_service.login(db, request)

    set_auth_cookie(response, login_response.access_token)

    return APIResponse(
        data=login_response,
        message=f"Welcome back, {user.display_name}!",
    )


@router.post("/logout", response_model=APIResponse)
async def logout(response: Response):
    """Clear the auth cookie."""
    response.delete_cookie("access_token")
    return APIResponse(message="Logged out")


@router.get("/me", response_model=APIResponse[UserProfile])
async def me(db: AsyncSession = Depends(get_db)):
    """Get the signed-in user's profile."""
    auth_service = get_auth_service()
    user = await auth_service.get_current_user(db, get_current_user_id())
    return APIResponse(data=UserProfile.model_validate(user))
