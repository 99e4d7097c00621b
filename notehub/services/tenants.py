"""Tenant lookups, plan upgrade and usage statistics."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notehub.core.errors import ConflictError, NotFoundError
from notehub.models.base import utcnow
from notehub.models.tenant import Tenant, TenantPlan
from notehub.models.user import User
from notehub.services.plans import count_notes

logger = logging.getLogger(__name__)


@dataclass
class TenantStats:
    note_count: int
    user_count: int


async def get_own_tenant(
    session: AsyncSession, slug: str, tenant_id: int, *, for_update: bool = False
) -> Tenant:
    """Resolve a path slug, which must name the caller's own tenant."""
    stmt = select(Tenant).where(Tenant.slug == slug, Tenant.id == tenant_id)
    if for_update:
        stmt = stmt.with_for_update()
    tenant = (await session.execute(stmt)).scalar_one_or_none()
    if tenant is None:
        raise NotFoundError("Tenant not found or access denied")
    return tenant


async def upgrade_to_pro(
    session: AsyncSession, slug: str, tenant_id: int
) -> tuple[Tenant, datetime]:
    """Move a free tenant to pro. There is no way back."""
    tenant = await get_own_tenant(session, slug, tenant_id, for_update=True)
    if tenant.plan == TenantPlan.PRO:
        raise ConflictError("Tenant is already on Pro plan")

    tenant.plan = TenantPlan.PRO
    session.add(tenant)
    await session.commit()
    upgraded_at = utcnow()
    logger.info("Tenant %s upgraded to pro", tenant.slug)
    return tenant, upgraded_at


async def get_stats(session: AsyncSession, tenant_id: int) -> TenantStats:
    user_count = (await session.execute(
        select(func.count()).select_from(User).where(User.tenant_id == tenant_id)
    )).scalar_one()
    return TenantStats(
        note_count=await count_notes(session, tenant_id),
        user_count=user_count,
    )
