"""Create contacts table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the contacts table named by COLLECTION, with a unique index
       on contact_name.
Rollback: downgrade() drops the table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

from contact_service.config import settings

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE = settings.contacts_collection
NAME_INDEX = f"uq_{TABLE}_contact_name"


def upgrade() -> None:
    op.create_table(
        TABLE,
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("contact_name", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.Text(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # The storage-level guarantee of one contact per name
    op.create_index(NAME_INDEX, TABLE, ["contact_name"], unique=True)


def downgrade() -> None:
    op.drop_index(NAME_INDEX, table_name=TABLE)
    op.drop_table(TABLE)
