"""create_menus_table

Revision ID: 20261016_menus
Revises:
Create Date: 2026-10-16

Creates the menus tree table: self-referencing parent_id, materialized path
(mpath), unique name/slug/uid and per-sibling-group unique order.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20261016_menus'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name):
    """Check if a table exists in the database"""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade():
    if table_exists('menus'):
        return

    op.create_table(
        'menus',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('uid', sa.String(36), nullable=False),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('slug', sa.String(180), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('menus.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('mpath', sa.String(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('uid'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug'),
    )

    # order is unique per parent; roots (parent_id IS NULL) form their own group
    op.create_index(
        'uq_menus_parent_order', 'menus', ['parent_id', 'order'],
        unique=True, postgresql_where=sa.text('parent_id IS NOT NULL'),
    )
    op.create_index(
        'uq_menus_root_order', 'menus', ['order'],
        unique=True, postgresql_where=sa.text('parent_id IS NULL'),
    )
    op.create_index('idx_menus_parent', 'menus', ['parent_id'])
    op.create_index('idx_menus_mpath', 'menus', ['mpath'])


def downgrade():
    op.drop_index('idx_menus_mpath', table_name='menus')
    op.drop_index('idx_menus_parent', table_name='menus')
    op.drop_index('uq_menus_root_order', table_name='menus')
    op.drop_index('uq_menus_parent_order', table_name='menus')
    op.drop_table('menus')
