"""Note model — the only entity end users create, edit and delete."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from notehub.models.base import ApiSchema, TimestampMixin, UTCDateTime, utcnow


class Note(TimestampMixin, SQLModel, table=True):
    __tablename__ = "notes"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(nullable=False)
    content: str = Field(default="", nullable=False)
    tenant_id: int = Field(foreign_key="tenants.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="users.id", nullable=False)

    # Last editor; cleared if that user is removed
    updated_by: int | None = Field(
        default=None, foreign_key="users.id", nullable=True, ondelete="SET NULL"
    )
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class NoteWrite(ApiSchema):
    """Body of create / update. Title emptiness is checked by the service."""
    title: str | None = None
    content: str | None = None


class NoteRead(ApiSchema):
    id: int
    title: str
    content: str
    tenant_id: int
    user_id: int
    updated_by: int | None = None
    created_at: datetime
    updated_at: datetime
    author_email: str | None = None
    updated_by_email: str | None = None
