"""Tenant info, plan upgrade and statistics for the caller's own tenant."""

from datetime import datetime

from fastapi import APIRouter

from notehub.api.deps import Admin, AppSettings, Auth, Session
from notehub.models.base import ApiSchema
from notehub.models.tenant import TenantRead
from notehub.services import tenants as tenant_service
from notehub.services.plans import count_notes, display_limit, note_limit

router = APIRouter(prefix="/tenants", tags=["tenants"])


# ── Schemas ──────────────────────────────────────────────────

class TenantDetail(TenantRead):
    created_at: datetime
    note_count: int
    note_limit: int | str
    can_create_note: bool


class TenantUpgraded(TenantRead):
    message: str
    note_limit: int | str
    upgrade_date: datetime


class StatsBody(ApiSchema):
    note_count: int
    user_count: int
    note_limit: int | str


class TenantStatsResponse(ApiSchema):
    tenant: TenantRead
    stats: StatsBody


# ── Routes ───────────────────────────────────────────────────

@router.get("/{slug}", response_model=TenantDetail)
async def get_tenant(
    slug: str, auth: Auth, session: Session, settings: AppSettings
) -> TenantDetail:
    """Tenant info with current usage against the plan limit."""
    tenant = await tenant_service.get_own_tenant(session, slug, auth.tenant_id)
    note_count = await count_notes(session, tenant.id)
    limit = note_limit(tenant.plan, settings)
    return TenantDetail(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.name,
        plan=tenant.plan,
        created_at=tenant.created_at,
        note_count=note_count,
        note_limit=display_limit(tenant.plan, settings),
        can_create_note=limit is None or note_count < limit,
    )


@router.post("/{slug}/upgrade", response_model=TenantUpgraded)
async def upgrade_tenant(
    slug: str, auth: Admin, session: Session, settings: AppSettings
) -> TenantUpgraded:
    """Upgrade the caller's tenant to the Pro plan. Repeating it is a 400."""
    tenant, upgraded_at = await tenant_service.upgrade_to_pro(session, slug, auth.tenant_id)
    return TenantUpgraded(
        id=tenant.id,
        slug=tenant.slug,
        name=tenant.name,
        plan=tenant.plan,
        message="Tenant upgraded to Pro plan successfully",
        note_limit=display_limit(tenant.plan, settings),
        upgrade_date=upgraded_at,
    )


@router.get("/{slug}/stats", response_model=TenantStatsResponse)
async def get_tenant_stats(
    slug: str, auth: Admin, session: Session, settings: AppSettings
) -> TenantStatsResponse:
    tenant = await tenant_service.get_own_tenant(session, slug, auth.tenant_id)
    stats = await tenant_service.get_stats(session, tenant.id)
    return TenantStatsResponse(
        tenant=TenantRead.model_validate(tenant),
        stats=StatsBody(
            note_count=stats.note_count,
            user_count=stats.user_count,
            note_limit=display_limit(tenant.plan, settings),
        ),
    )
