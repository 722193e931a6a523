"""Authentication service for login and user management."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pausegate.config import settings
from pausegate.exceptions import NotFoundException, UnauthorizedException, ValidationException
from pausegate.models.user import Role, User
from pausegate.schemas.auth import LoginRequest, LoginResponse
from pausegate.utils.security import create_access_token, hash_password, verify_password

MIN_PASSWORD_LENGTH = 8


class AuthService:
    """Service for handling authentication operations."""

    async def login(
        self, db: AsyncSession, request: LoginRequest
    ) -> tuple[LoginResponse, User]:
        """Authenticate a user and return an access token.

        Args:
            db: Database session
            request: Login request with email and password

        Returns:
            Tuple of (LoginResponse, User)

        Raises:
            UnauthorizedException: If credentials are invalid
        """
        user = await self.get_user_by_email(db, request.email)

        if not user or not verify_password(request.password, user.password_hash):
            raise UnauthorizedException("Invalid email or password")

        if not user.is_active:
            raise UnauthorizedException("Your account is inactive")

        user.last_login_at = datetime.now(timezone.utc)
        await db.flush()

        access_token = create_access_token(
            user_id=user.id,
            role=user.role,
            name=user.display_name,
        )

        response = LoginResponse(
            access_token=access_token,
            expires_in=settings.jwt_access_token_expire_minutes * 60,
        )
        return response, user

    async def get_current_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundException: If user doesn't exist
        """
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            raise NotFoundException("User")

        return user

    async def get_user_by_email(self, db: AsyncSession, email: str) -> User | None:
        """Get a user by email address (case-insensitive)."""
        result = await db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        role: Role | str = Role.SUBSCRIBER,
        display_name: str = "",
    ) -> User:
        """Create a user account.

        Raises:
            ValidationException: If the input is invalid or the email is taken
        """
        email = email.strip().lower()
        role_value = role.value if isinstance(role, Role) else role

        if "@" not in email:
            raise ValidationException([{"field": "email", "message": "Invalid email address"}])
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                [{"field": "password", "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}]
            )
        if role_value not in {r.value for r in Role}:
            raise ValidationException([{"field": "role", "message": f"Unknown role: {role_value}"}])
        if await self.get_user_by_email(db, email):
            raise ValidationException([{"field": "email", "message": "A user with this email already exists"}])

        user = User(
            email=email,
            password_hash=hash_password(password),
            display_name=display_name or email.split("@")[0],
            role=role_value,
            is_active=True,
        )
        db.add(user)
        await db.flush()
        return user


# Singleton instance
_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
