"""Notes CRUD — all queries scoped to the caller's tenant."""

from fastapi import APIRouter, status

from notehub.api.deps import AppSettings, Member, Session
from notehub.models.base import ApiSchema
from notehub.models.note import NoteRead, NoteWrite
from notehub.services import notes as note_service

router = APIRouter(prefix="/notes", tags=["notes"])


class DeleteResponse(ApiSchema):
    message: str


@router.post("", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    body: NoteWrite,
    auth: Member,
    session: Session,
    settings: AppSettings,
) -> NoteRead:
    """Create a note. Free tenants are capped; the 403 carries upgradeRequired."""
    return await note_service.create_note(
        session,
        tenant_id=auth.tenant_id,
        user_id=auth.user_id,
        author_email=auth.email,
        title=body.title,
        content=body.content,
        settings=settings,
    )


@router.get("", response_model=list[NoteRead])
async def list_notes(auth: Member, session: Session) -> list[NoteRead]:
    return await note_service.list_notes(session, auth.tenant_id)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(note_id: int, auth: Member, session: Session) -> NoteRead:
    return await note_service.get_note(session, note_id, auth.tenant_id)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: int,
    body: NoteWrite,
    auth: Member,
    session: Session,
) -> NoteRead:
    return await note_service.update_note(
        session,
        note_id=note_id,
        tenant_id=auth.tenant_id,
        user_id=auth.user_id,
        title=body.title,
        content=body.content,
    )


@router.delete("/{note_id}", response_model=DeleteResponse)
async def delete_note(note_id: int, auth: Member, session: Session) -> DeleteResponse:
    await note_service.delete_note(session, note_id, auth.tenant_id)
    return DeleteResponse(message="Note deleted successfully")
