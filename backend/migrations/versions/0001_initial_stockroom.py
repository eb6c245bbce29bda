"""initial stockroom schema

Revision ID: 0001_initial_stockroom
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates the complete stockroom schema:
- items, vendors, chefs: mutable catalog (reference data, UUID string ids)
- stock_movements: append-only ledger; on-hand is derived, never stored
- audit_entries: append-only log of state-changing actions

Ledger references (item_id, vendor_id, chef_id) carry no foreign keys so a
catalog delete never invalidates history.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_stockroom'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # items: Founder-managed catalog
    # ============================================================================
    op.create_table(
        'items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('unit', sa.String(length=8), nullable=False),
        sa.Column('sku', sa.String(length=64), nullable=True),
        sa.Column('min_stock', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_items_sku', 'items', ['sku'])
    op.create_index('ix_items_active_name', 'items', ['is_active', 'name'])

    # ============================================================================
    # vendors: global suppliers
    # ============================================================================
    op.create_table(
        'vendors',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vendors_is_active', 'vendors', ['is_active'])

    # ============================================================================
    # chefs: kitchens (tenants); id doubles as the ledger owner key
    # ============================================================================
    op.create_table(
        'chefs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_chefs_is_active', 'chefs', ['is_active'])

    # ============================================================================
    # stock_movements: append-only ledger
    # ============================================================================
    # chef_id NULL is the shared warehouse.
    # quantity is a positive magnitude; direction comes from kind (IN/OUT/ADJUST).
    # reverses_id points at the movement a void compensates.
    # ============================================================================
    op.create_table(
        'stock_movements',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.String(length=36), nullable=False),
        sa.Column('vendor_id', sa.String(length=36), nullable=True),
        sa.Column('chef_id', sa.String(length=36), nullable=True),
        sa.Column('kind', sa.String(length=8), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit_cost', sa.Float(), nullable=True),
        sa.Column('note', sa.String(length=500), nullable=True),
        sa.Column('reverses_id', sa.String(length=36), nullable=True),
        sa.Column('actor_id', sa.String(length=128), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_stock_movements_seq', 'stock_movements', ['seq'])
    op.create_index('ix_stock_movements_item_id', 'stock_movements', ['item_id'])
    op.create_index('ix_stock_movements_vendor_id', 'stock_movements', ['vendor_id'])
    op.create_index('ix_stock_movements_chef_id', 'stock_movements', ['chef_id'])
    op.create_index('ix_stock_movements_reverses_id', 'stock_movements', ['reverses_id'])
    op.create_index('ix_stock_movements_timestamp', 'stock_movements', ['timestamp'])
    op.create_index('ix_movements_owner_item', 'stock_movements', ['chef_id', 'item_id'])
    op.create_index('ix_movements_owner_seq', 'stock_movements', ['chef_id', 'seq'])

    # ============================================================================
    # audit_entries: append-only action log
    # ============================================================================
    op.create_table(
        'audit_entries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('seq', sa.Integer(), nullable=False),
        sa.Column('actor', sa.String(length=128), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('scope', sa.String(length=16), nullable=False),
        sa.Column('chef_id', sa.String(length=36), nullable=True),
        sa.Column('ref_id', sa.String(length=36), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_entries_seq', 'audit_entries', ['seq'])
    op.create_index('ix_audit_entries_actor', 'audit_entries', ['actor'])
    op.create_index('ix_audit_entries_action', 'audit_entries', ['action'])
    op.create_index('ix_audit_entries_chef_id', 'audit_entries', ['chef_id'])
    op.create_index('ix_audit_entries_ref_id', 'audit_entries', ['ref_id'])
    op.create_index('ix_audit_entries_timestamp', 'audit_entries', ['timestamp'])
    op.create_index('ix_audit_scope_chef_seq', 'audit_entries', ['scope', 'chef_id', 'seq'])


def downgrade():
    op.drop_table('audit_entries')
    op.drop_table('stock_movements')
    op.drop_table('chefs')
    op.drop_table('vendors')
    op.drop_table('items')
