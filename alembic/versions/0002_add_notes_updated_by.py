"""add updated_by to notes

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:40:05.771902

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: str | Sequence[str] | None = '0001'
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column("notes", sa.Column("updated_by", sa.Integer(), nullable=True))
    op.create_foreign_key(
        "fk_notes_updated_by", "notes", "users", ["updated_by"], ["id"], ondelete="SET NULL"
    )


def downgrade() -> None:
    op.drop_constraint("fk_notes_updated_by", "notes", type_="foreignkey")
    op.drop_column("notes", "updated_by")
