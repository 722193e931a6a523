"""Role-based permission decorators and utilities."""

from functools import wraps
from typing import Callable

from pausegate.exceptions import ForbiddenException, UnauthorizedException
from pausegate.models.user import Role
from pausegate.utils.request_context import get_current_user_role


def require_role(*allowed_roles: Role | str) -> Callable:
    """Decorator that enforces role-based access control.

    Usage:
        @router.post("/maintenance/settings")
        @require_role(Role.ADMINISTRATOR)
        async def update_settings(...):
            ...

    Args:
        *allowed_roles: Roles that are allowed to access the endpoint

    Returns:
        Decorator function
    """
    role_values = {role.value if isinstance(role, Role) else role for role in allowed_roles}

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_role = get_current_user_role()

            if current_role is None:
                raise UnauthorizedException()

            if current_role not in role_values:
                raise ForbiddenException()

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_administrator() -> Callable:
    """Decorator that requires the ADMINISTRATOR role."""
    return require_role(Role.ADMINISTRATOR)
