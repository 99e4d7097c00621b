"""FastAPI dependencies for authentication and tenant resolution."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notehub.core.config import Settings
from notehub.core.database import get_session
from notehub.core.errors import AuthenticationError, AuthorizationError, InvalidTokenError
from notehub.core.security import decode_jwt
from notehub.models.tenant import Tenant
from notehub.models.user import User, UserRole

# Missing header is reported by get_principal, not by HTTPBearer.
bearer_scheme = HTTPBearer(auto_error=False)


class Principal:
    """Resolved identity carried through a request."""

    __slots__ = ("user_id", "email", "role", "tenant_id", "tenant_slug", "tenant_plan")

    def __init__(
        self,
        user_id: int,
        email: str,
        role: str,
        tenant_id: int,
        tenant_slug: str,
        tenant_plan: str,
    ) -> None:
        self.user_id = user_id
        self.email = email
        self.role = role
        self.tenant_id = tenant_id
        self.tenant_slug = tenant_slug
        self.tenant_plan = tenant_plan


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


async def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Principal:
    """Resolve a bearer token to a Principal.

    A valid signature is not enough: the user must still exist, and role,
    tenant and plan are read from the store rather than from the token.
    """
    if credentials is None:
        raise AuthenticationError("Access token required")

    claims = decode_jwt(credentials.credentials, settings)

    stmt = (
        select(User, Tenant)
        .join(Tenant, User.tenant_id == Tenant.id)
        .where(User.id == claims.user_id)
    )
    row = (await session.execute(stmt)).one_or_none()
    if row is None:
        raise InvalidTokenError("User not found")

    user, tenant = row
    return Principal(
        user_id=user.id,
        email=user.email,
        role=str(user.role),
        tenant_id=tenant.id,
        tenant_slug=tenant.slug,
        tenant_plan=str(tenant.plan),
    )


def require_role(*roles: str) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory: 403 unless the principal has one of ``roles``."""
    allowed = {str(role) for role in roles}

    async def _check(principal: Annotated[Principal, Depends(get_principal)]) -> Principal:
        if principal.role not in allowed:
            raise AuthorizationError("Insufficient permissions")
        return principal

    return _check


# Typed shorthand for use in route signatures
Auth = Annotated[Principal, Depends(get_principal)]
Member = Annotated[Principal, Depends(require_role(UserRole.ADMIN, UserRole.MEMBER))]
Admin = Annotated[Principal, Depends(require_role(UserRole.ADMIN))]
Session = Annotated[AsyncSession, Depends(get_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
