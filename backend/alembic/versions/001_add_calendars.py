"""Add calendars table

Revision ID: 001_add_calendars
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_add_calendars'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'calendars',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('owner_id', sa.String(255), nullable=False),
        sa.Column('backend', sa.String(100), nullable=False),
        sa.Column('public_uri', sa.String(255), nullable=False),
        sa.Column('private_uri', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(10), nullable=True),
        sa.Column('components', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('cruds', sa.Integer(), nullable=False, server_default='31'),
        sa.Column('ctag', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_modified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('public_uri', 'user_id', name='uq_calendars_public_uri_user_id'),
    )
    op.create_index('ix_calendars_user_id', 'calendars', ['user_id'])
    op.create_index('ix_calendars_backend', 'calendars', ['backend'])


def downgrade() -> None:
    op.drop_index('ix_calendars_backend', table_name='calendars')
    op.drop_index('ix_calendars_user_id', table_name='calendars')
    op.drop_table('calendars')
