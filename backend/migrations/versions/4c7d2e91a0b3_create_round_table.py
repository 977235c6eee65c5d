"""create round table

Revision ID: 4c7d2e91a0b3
Revises:
Create Date: 2026-10-18 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c7d2e91a0b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'round' in set(insp.get_table_names()):
        return

    op.create_table(
        'round',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(length=4), nullable=True),
        sa.Column('game_type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=True),
        sa.Column('state', sa.Text(), nullable=False),
    )
    with op.batch_alter_table('round') as batch_op:
        batch_op.create_index('ix_round_code', ['code'], unique=True)


def downgrade():
    with op.batch_alter_table('round') as batch_op:
        batch_op.drop_index('ix_round_code')
    op.drop_table('round')
