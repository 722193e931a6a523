"""Bypass checks for maintenance mode.

Decides whether a visitor may see the live site while maintenance mode is
on, either because they are signed in with a bypass role or because they
connect from a whitelisted IP address.
"""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from pausegate.models.user import User
from pausegate.schemas.maintenance import MaintenanceSettings
from pausegate.services.settings_service import SessionFactory
from pausegate.utils.sanitize import is_valid_ip
from pausegate.utils.security import decode_access_token

logger = logging.getLogger(__name__)

# Priority order for client IP detection
CLIENT_IP_HEADERS = (
    "cf-connecting-ip",  # Cloudflare
    "x-forwarded-for",  # Proxy
    "x-real-ip",  # Nginx proxy
)


@dataclass(frozen=True)
class RequestIdentity:
    """Who is making the current request."""

    is_authenticated: bool = False
    roles: frozenset[str] = field(default_factory=frozenset)
    client_ip: str = ""


def resolve_client_ip(headers: Mapping[str, str], remote_addr: str | None = None) -> str:
    """Get the client IP address, accounting for proxies like Cloudflare.

    The first source that is present and non-empty is used; for a
    comma-separated list the first entry is taken. A value that is not a
    valid IPv4/IPv6 literal falls through to the next source.

    Args:
        headers: Request headers (case-insensitive lookups expected)
        remote_addr: Address of the direct peer

    Returns:
        The client IP, or an empty string if none validates
    """
    candidates = [headers.get(name) for name in CLIENT_IP_HEADERS]
    candidates.append(remote_addr)

    for raw in candidates:
        if not raw:
            continue
        ip = raw.split(",", 1)[0].strip()
        if is_valid_ip(ip):
            return ip

    return ""


def is_allowed_role(identity: RequestIdentity, settings: MaintenanceSettings) -> bool:
    """Check if a signed-in user has one of the bypass roles."""
    if not identity.is_authenticated:
        return False
    return not identity.roles.isdisjoint(settings.bypass_roles)


def is_whitelisted_ip(identity: RequestIdentity, settings: MaintenanceSettings) -> bool:
    """Check if the client IP is whitelisted (exact match)."""
    if not settings.whitelisted_ips:
        return False
    if not identity.client_ip:
        return False
    return identity.client_ip in settings.whitelisted_ips


def can_access(identity: RequestIdentity, settings: MaintenanceSettings) -> bool:
    """Check if the request may bypass maintenance mode."""
    return is_allowed_role(identity, settings) or is_whitelisted_ip(identity, settings)


class IdentityProvider:
    """Builds a RequestIdentity from a gate context.

    With a session factory the token's subject is looked up on every call,
    so a deactivated user is anonymous and a changed role applies at once.
    Without one the token claims are trusted until the token expires.
    """

    def __init__(self, session_factory: SessionFactory | None = None):
        self.session_factory = session_factory

    async def identify(self, context) -> RequestIdentity:
        """Derive identity from the access token and client IP headers.

        Args:
            context: GateContext for the current request

        Returns:
            RequestIdentity for the request
        """
        client_ip = resolve_client_ip(context.headers, context.remote_addr)

        payload = decode_access_token(context.access_token) if context.access_token else None
        if not payload or not payload.get("sub"):
            return RequestIdentity(client_ip=client_ip)

        if self.session_factory is not None:
            role = await self._current_role(payload["sub"])
            if role is None:
                return RequestIdentity(client_ip=client_ip)
            roles = {role}
        else:
            roles = set()
            if payload.get("role"):
                roles.add(str(payload["role"]))
            for role in payload.get("roles") or []:
                roles.add(str(role))

        return RequestIdentity(
            is_authenticated=True,
            roles=frozenset(roles),
            client_ip=client_ip,
        )

    async def _current_role(self, subject: str) -> str | None:
        """Role of the active user behind a token subject, or None."""
        try:
            user_id = uuid.UUID(str(subject))
        except ValueError:
            return None

        try:
            async with self.session_factory() as db:
                result = await db.execute(select(User).where(User.id == user_id))
                user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user {user_id} for maintenance bypass: {e}")
            return None

        if user is None or not user.is_active:
            return None
        return user.role
