"""visitors and admin_users tables

Revision ID: 3f2a9c1d7e4b
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e4b'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('visitors',
        sa.Column('id', sa.String(length=24), nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('visitor_name', sa.String(length=255), nullable=True),
        sa.Column('cnic', sa.String(length=50), nullable=True),
        sa.Column('visitor_cnic', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('visitor_phone', sa.String(length=50), nullable=True),
        sa.Column('host', sa.String(length=255), nullable=False),
        sa.Column('purpose', sa.String(length=1000), nullable=False),
        sa.Column('entry_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.Column('exit_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_group_visit', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('group_id', sa.String(length=64), nullable=True),
        sa.Column('total_members', sa.Integer(), nullable=True),
        sa.Column('group_members', sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_visitors_type'), 'visitors', ['type'], unique=False)
    op.create_index(op.f('ix_visitors_host'), 'visitors', ['host'], unique=False)
    op.create_index(op.f('ix_visitors_entry_time'), 'visitors', ['entry_time'], unique=False)
    op.create_index(op.f('ix_visitors_timestamp'), 'visitors', ['timestamp'], unique=False)

    op.create_table('admin_users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admin_users_username'), 'admin_users', ['username'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_admin_users_username'), table_name='admin_users')
    op.drop_table('admin_users')
    op.drop_index(op.f('ix_visitors_timestamp'), table_name='visitors')
    op.drop_index(op.f('ix_visitors_entry_time'), table_name='visitors')
    op.drop_index(op.f('ix_visitors_host'), table_name='visitors')
    op.drop_index(op.f('ix_visitors_type'), table_name='visitors')
    op.drop_table('visitors')
