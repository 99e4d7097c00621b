"""Email + password verification."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notehub.core.errors import InvalidCredentialsError
from notehub.core.security import dummy_verify, verify_password
from notehub.models.tenant import Tenant
from notehub.models.user import User

logger = logging.getLogger(__name__)


async def authenticate(
    session: AsyncSession, email: str, password: str
) -> tuple[User, Tenant]:
    """Return the user and its tenant, or raise InvalidCredentialsError.

    Unknown emails and wrong passwords fail identically, and an unknown email
    still pays for one hash verification.
    """
    stmt = (
        select(User, Tenant)
        .join(Tenant, User.tenant_id == Tenant.id)
        .where(User.email == email)
    )
    row = (await session.execute(stmt)).one_or_none()

    if row is None:
        dummy_verify()
        logger.warning("Login failed for unknown email")
        raise InvalidCredentialsError()

    user, tenant = row
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed for user %s", user.id)
        raise InvalidCredentialsError()

    return user, tenant
