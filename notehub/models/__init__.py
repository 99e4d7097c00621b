"""Import all models so SQLModel.metadata picks them up."""

from notehub.models.note import Note, NoteRead, NoteWrite
from notehub.models.tenant import Tenant, TenantPlan, TenantRead
from notehub.models.user import User, UserRead, UserRole

__all__ = [
    "Note",
    "NoteRead",
    "NoteWrite",
    "Tenant",
    "TenantPlan",
    "TenantRead",
    "User",
    "UserRead",
    "UserRole",
]
