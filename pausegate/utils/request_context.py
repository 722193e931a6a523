"""Request context management using contextvars.

This module provides context variables for tracking the current user,
role and language throughout a request lifecycle.
"""

import contextvars
import uuid

from pausegate.exceptions import UserContextError

# Context variables for request-scoped data
_current_user_id: contextvars.ContextVar[uuid.UUID | None] = contextvars.ContextVar(
    "current_user_id", default=None
)
_current_user_role: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "current_user_role", default=None
)
_current_language: contextvars.ContextVar[str] = contextvars.ContextVar(
    "current_language", default="en"
)


# === User Context ===

def get_current_user_id() -> uuid.UUID:
    """Get the current user ID.

    Returns:
        The current user's UUID

    Raises:
        UserContextError: If user context is not set
    """
    uid = _current_user_id.get()
    if uid is None:
        raise UserContextError("User context is not set")
    return uid


def get_current_user_id_or_none() -> uuid.UUID | None:
    """Get the current user ID or None if not set."""
    return _current_user_id.get()


def set_current_user_id(uid: uuid.UUID | None) -> None:
    """Set the current user ID."""
    _current_user_id.set(uid)


# === Role Context ===

def get_current_user_role() -> str | None:
    """Get the current user's role."""
    return _current_user_role.get()


def set_current_user_role(role: str | None) -> None:
    """Set the current user's role."""
    _current_user_role.set(role)


# === Language Context ===

def get_current_language() -> str:
    """Get the current language code (defaults to 'en')."""
    return _current_language.get()


def set_current_language(lang: str) -> None:
    """Set the current language code."""
    _current_language.set(lang)


# === Utility Functions ===

def clear_user_context() -> None:
    """Clear the user context variables.

    Call this at the start and end of each request to prevent context leakage.
    Language is owned by LanguageMiddleware and left alone.
    """
    _current_user_id.set(None)
    _current_user_role.set(None)
