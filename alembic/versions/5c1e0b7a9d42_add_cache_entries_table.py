"""add_cache_entries_table

Revision ID: 5c1e0b7a9d42
Revises:
Create Date: 2026-10-19 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e0b7a9d42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'cache_entries',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('cache_key', sa.String(255), nullable=False, index=True, unique=True),
        sa.Column('payload', sa.JSON, nullable=False),
        sa.Column('stored_at', sa.BigInteger, nullable=False),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('cache_entries')
