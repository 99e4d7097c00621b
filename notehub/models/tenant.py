"""Tenant model — top-level isolation boundary."""

from enum import StrEnum

from sqlalchemy import String
from sqlmodel import Field, SQLModel

from notehub.models.base import ApiSchema, TimestampMixin


class TenantPlan(StrEnum):
    FREE = "free"
    PRO = "pro"


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: int | None = Field(default=None, primary_key=True)
    slug: str = Field(max_length=100, unique=True, nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)
    plan: TenantPlan = Field(default=TenantPlan.FREE, sa_type=String(20), nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class TenantRead(ApiSchema):
    id: int
    slug: str
    name: str
    plan: TenantPlan
