"""Create companies table

Learn: One table, two uniqueness guarantees. owner_email and client_id
are unique at the DB level so a registration race can never produce
two accounts for the same owner or the same client ID.

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 10:12:41.204511
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("owner_name", sa.String(length=200), nullable=False),
        sa.Column("roll_no", sa.String(length=100), nullable=False),
        sa.Column("owner_email", sa.String(length=255), nullable=False),
        sa.Column("access_code", sa.String(length=255), nullable=False),
        sa.Column("client_id", sa.String(length=36), nullable=False),
        sa.Column("client_secret_hash", sa.String(length=64), nullable=False),
        sa.Column("refresh_token", sa.String(length=1024), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_companies_owner_email", "companies", ["owner_email"], unique=True)
    op.create_index("ix_companies_client_id", "companies", ["client_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_companies_client_id", table_name="companies")
    op.drop_index("ix_companies_owner_email", table_name="companies")
    op.drop_table("companies")
