"""User provisioning: self-registration and admin invites."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notehub.core.errors import ConflictError, ValidationError
from notehub.core.security import generate_temp_password, hash_password
from notehub.models.tenant import Tenant
from notehub.models.user import User, UserRole

logger = logging.getLogger(__name__)


def parse_role(role: str | None) -> UserRole:
    if role is None:
        return UserRole.MEMBER
    try:
        return UserRole(role)
    except ValueError:
        raise ValidationError("Role must be 'admin' or 'member'") from None


async def _create_user(
    session: AsyncSession, tenant_id: int, email: str, password: str, role: UserRole
) -> User:
    existing = await session.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("User already exists")

    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        tenant_id=tenant_id,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same email
        await session.rollback()
        raise ConflictError("User already exists") from None
    await session.refresh(user)
    logger.info("Created %s user %s in tenant %s", role, user.id, tenant_id)
    return user


async def register_user(
    session: AsyncSession,
    email: str | None,
    password: str | None,
    role: str | None,
    tenant_slug: str | None,
) -> User:
    if not email or not password or not tenant_slug:
        raise ValidationError("Email, password, and tenant slug are required")
    user_role = parse_role(role)

    result = await session.execute(select(Tenant.id).where(Tenant.slug == tenant_slug))
    tenant_id = result.scalar_one_or_none()
    if tenant_id is None:
        raise ValidationError("Invalid tenant")

    return await _create_user(session, tenant_id, email, password, user_role)


async def invite_user(
    session: AsyncSession, tenant_id: int, email: str | None, role: str | None
) -> tuple[User, str]:
    """Create a user in the inviter's tenant. Returns the user and its one-time password."""
    if not email:
        raise ValidationError("Email is required")
    user_role = parse_role(role)
    temp_password = generate_temp_password()
    user = await _create_user(session, tenant_id, email, temp_password, user_role)
    return user, temp_password
