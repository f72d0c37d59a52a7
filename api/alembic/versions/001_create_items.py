"""create_items

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # El sync tambien crea la tabla si no existe; no chocar con ella
    if not inspector.has_table('items'):
        op.create_table('items',
        sa.Column('ticker', sa.String(), nullable=False),
        sa.Column('target_from', sa.String(), nullable=True),
        sa.Column('target_to', sa.String(), nullable=True),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=True),
        sa.Column('brokerage', sa.String(), nullable=True),
        sa.Column('rating_from', sa.String(), nullable=True),
        sa.Column('rating_to', sa.String(), nullable=True),
        sa.Column('time', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('ticker', 'time')
        )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table('items'):
        op.drop_table('items')
