"""Note CRUD. Every query carries the caller's tenant_id."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select

from notehub.core.config import Settings
from notehub.core.errors import LimitReachedError, NotFoundError, ValidationError
from notehub.models.base import utcnow
from notehub.models.note import Note, NoteRead
from notehub.models.tenant import Tenant
from notehub.models.user import User
from notehub.services.plans import can_create_note

logger = logging.getLogger(__name__)

Author = aliased(User)
Editor = aliased(User)


def _require_title(title: str | None) -> str:
    if not title:
        raise ValidationError("Title is required")
    return title


def _to_read(
    note: Note, author_email: str | None, updated_by_email: str | None = None
) -> NoteRead:
    return NoteRead(
        id=note.id,
        title=note.title,
        content=note.content,
        tenant_id=note.tenant_id,
        user_id=note.user_id,
        updated_by=note.updated_by,
        created_at=note.created_at,
        updated_at=note.updated_at,
        author_email=author_email,
        updated_by_email=updated_by_email,
    )


def _select_with_emails():
    return (
        select(Note, Author.email, Editor.email)
        .join(Author, Note.user_id == Author.id)
        .outerjoin(Editor, Note.updated_by == Editor.id)
    )


async def _get_owned(session: AsyncSession, note_id: int, tenant_id: int) -> Note:
    stmt = select(Note).where(Note.id == note_id, Note.tenant_id == tenant_id)
    note = (await session.execute(stmt)).scalar_one_or_none()
    if note is None:
        raise NotFoundError("Note not found")
    return note


async def create_note(
    session: AsyncSession,
    tenant_id: int,
    user_id: int,
    author_email: str,
    title: str | None,
    content: str | None,
    settings: Settings | None = None,
) -> NoteRead:
    """Insert a note if the tenant's plan allows it.

    The tenant row is locked for the rest of the transaction, so concurrent
    creators in one tenant count and insert one at a time.
    """
    title = _require_title(title)

    stmt = select(Tenant).where(Tenant.id == tenant_id).with_for_update()
    tenant = (await session.execute(stmt)).scalar_one()

    if not await can_create_note(session, tenant_id, tenant.plan, settings):
        logger.info("Note limit reached for tenant %s", tenant.slug)
        raise LimitReachedError()

    now = utcnow()
    note = Note(
        title=title,
        content=content or "",
        tenant_id=tenant_id,
        user_id=user_id,
        created_at=now,
        updated_at=now,
    )
    session.add(note)
    await session.commit()
    await session.refresh(note)
    return _to_read(note, author_email)


async def list_notes(session: AsyncSession, tenant_id: int) -> list[NoteRead]:
    # No pagination: a tenant's whole note set is returned.
    stmt = (
        _select_with_emails()
        .where(Note.tenant_id == tenant_id)
        .order_by(Note.created_at.desc(), Note.id.desc())  # type: ignore[union-attr]
    )
    result = await session.execute(stmt)
    return [_to_read(note, author, editor) for note, author, editor in result.all()]


async def get_note(session: AsyncSession, note_id: int, tenant_id: int) -> NoteRead:
    stmt = _select_with_emails().where(Note.id == note_id, Note.tenant_id == tenant_id)
    row = (await session.execute(stmt)).one_or_none()
    if row is None:
        raise NotFoundError("Note not found")
    note, author, editor = row
    return _to_read(note, author, editor)


async def update_note(
    session: AsyncSession,
    note_id: int,
    tenant_id: int,
    user_id: int,
    title: str | None,
    content: str | None,
) -> NoteRead:
    title = _require_title(title)
    note = await _get_owned(session, note_id, tenant_id)

    note.title = title
    note.content = content or ""
    note.updated_by = user_id
    note.updated_at = max(utcnow(), note.updated_at)
    session.add(note)
    await session.commit()
    return await get_note(session, note_id, tenant_id)


async def delete_note(session: AsyncSession, note_id: int, tenant_id: int) -> None:
    note = await _get_owned(session, note_id, tenant_id)
    await session.delete(note)
    await session.commit()
