"""Demo tenants and accounts inserted at startup."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notehub.core.security import hash_password
from notehub.models.tenant import Tenant, TenantPlan
from notehub.models.user import User, UserRole

logger = logging.getLogger(__name__)

SEED_TENANTS = [
    ("acme", "Acme Corporation"),
    ("globex", "Globex Corporation"),
]

SEED_USERS = [
    ("admin@acme.test", UserRole.ADMIN, "acme"),
    ("user@acme.test", UserRole.MEMBER, "acme"),
    ("admin@globex.test", UserRole.ADMIN, "globex"),
    ("user@globex.test", UserRole.MEMBER, "globex"),
]


async def seed_demo_data(session: AsyncSession, password: str) -> None:
    """Insert the demo tenants and users. Existing slugs and emails are kept."""
    tenants: dict[str, Tenant] = {}
    for slug, name in SEED_TENANTS:
        result = await session.execute(select(Tenant).where(Tenant.slug == slug))
        tenant = result.scalar_one_or_none()
        if tenant is None:
            tenant = Tenant(slug=slug, name=name, plan=TenantPlan.FREE)
            session.add(tenant)
            await session.flush()  # populate tenant.id
            logger.info("Seeded tenant %s", slug)
        tenants[slug] = tenant

    password_hash = hash_password(password)
    for email, role, slug in SEED_USERS:
        result = await session.execute(select(User.id).where(User.email == email))
        if result.scalar_one_or_none() is not None:
            continue
        session.add(User(
            email=email,
            password_hash=password_hash,
            role=role,
            tenant_id=tenants[slug].id,
        ))
        logger.info("Seeded user %s", email)

    await session.commit()
