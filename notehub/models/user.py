"""User model — belongs to exactly one tenant."""

from enum import StrEnum

from sqlalchemy import String
from sqlmodel import Field, SQLModel

from notehub.models.base import ApiSchema, TimestampMixin


class UserRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(max_length=320, unique=True, nullable=False, index=True)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.MEMBER, sa_type=String(20), nullable=False)
    tenant_id: int = Field(foreign_key="tenants.id", nullable=False, index=True)


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(ApiSchema):
    id: int
    email: str
    role: UserRole
