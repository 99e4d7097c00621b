"""Plan limits: how many notes a tenant may hold."""

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from notehub.core.config import Settings, get_settings
from notehub.models.note import Note
from notehub.models.tenant import TenantPlan

UNLIMITED = "unlimited"


def note_limit(plan: str, settings: Settings | None = None) -> int | None:
    """Maximum number of notes for a plan; None means unbounded."""
    if plan == TenantPlan.PRO:
        return None
    return (settings or get_settings()).free_plan_note_limit


def display_limit(plan: str, settings: Settings | None = None) -> int | str:
    limit = note_limit(plan, settings)
    return UNLIMITED if limit is None else limit


async def count_notes(session: AsyncSession, tenant_id: int) -> int:
    stmt = select(func.count()).select_from(Note).where(Note.tenant_id == tenant_id)
    return (await session.execute(stmt)).scalar_one()


async def can_create_note(
    session: AsyncSession,
    tenant_id: int,
    plan: str,
    settings: Settings | None = None,
) -> bool:
    limit = note_limit(plan, settings)
    if limit is None:
        return True
    return await count_notes(session, tenant_id) < limit
