"""create room table

Revision ID: 5c7e9a1d2b40
Revises:
Create Date: 2026-10-19 10:12:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c7e9a1d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Tables created through `flask db-reset` already have the full schema
    if 'room' in set(insp.get_table_names()):
        return

    op.create_table(
        'room',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('room_code', sa.String(length=16), nullable=False),
        sa.Column('player1_username', sa.String(length=64), nullable=False),
        sa.Column('player2_username', sa.String(length=64), nullable=True),
        sa.Column('board', sa.Text(), nullable=False),
        sa.Column('current_turn', sa.Integer(), nullable=False),
        sa.Column('winner', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_room_room_code'), 'room', ['room_code'], unique=True)


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'room' not in set(insp.get_table_names()):
        return
    op.drop_index(op.f('ix_room_room_code'), table_name='room')
    op.drop_table('room')
