"""add version column to user_progress

Revision ID: 20261018120000
Revises: 20261001120000
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018120000'
down_revision: Union[str, Sequence[str], None] = '20261001120000'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the optimistic-locking counter for per-user progress writes."""
    op.add_column('user_progress', sa.Column('version', sa.Integer(), nullable=False, server_default='1'))


def downgrade() -> None:
    """Remove the version column from user_progress."""
    op.drop_column('user_progress', 'version')
