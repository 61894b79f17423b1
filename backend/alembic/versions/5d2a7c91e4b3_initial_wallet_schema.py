"""initial wallet schema

Revision ID: 5d2a7c91e4b3
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5d2a7c91e4b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    from sqlalchemy import inspect as sa_inspect
    conn = op.get_bind()
    # Databases created before migrations existed already have some tables.
    existing = set(sa_inspect(conn).get_table_names())

    if 'assets' not in existing:
        op.create_table('assets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('symbol', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('provider', sa.String(), nullable=False),
        sa.Column('api_id', sa.String(), nullable=True),
        sa.Column('exchange', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('provider', 'api_id', 'type', name='uix_asset_provider_api_id_type')
        )
        op.create_index(op.f('ix_assets_symbol'), 'assets', ['symbol'], unique=False)

    if 'wallets' not in existing:
        op.create_table('wallets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_wallets_user_id'), 'wallets', ['user_id'], unique=False)

    if 'transactions' not in existing:
        op.create_table('transactions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('wallet_id', sa.String(length=36), nullable=False),
        sa.Column('asset_id', sa.String(length=36), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=28, scale=12), nullable=False),
        sa.Column('price_per_unit', sa.Numeric(precision=28, scale=10), nullable=False),
        sa.Column('executed_at', sa.DateTime(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['wallet_id'], ['wallets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_transactions_asset_id'), 'transactions', ['asset_id'], unique=False)
        op.create_index(op.f('ix_transactions_wallet_id'), 'transactions', ['wallet_id'], unique=False)

    if 'wallet_assets' not in existing:
        op.create_table('wallet_assets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('wallet_id', sa.String(length=36), nullable=False),
        sa.Column('kind', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=28, scale=12), nullable=True),
        sa.Column('value', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('asset_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id']),
        sa.ForeignKeyConstraint(['wallet_id'], ['wallets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_wallet_assets_wallet_id'), 'wallet_assets', ['wallet_id'], unique=False)

    if 'wallet_snapshots' not in existing:
        op.create_table('wallet_snapshots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('wallet_id', sa.String(length=36), nullable=False),
        sa.Column('value', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('reason', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['wallet_id'], ['wallets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_wallet_snapshots_created_at'), 'wallet_snapshots', ['created_at'], unique=False)
        op.create_index(op.f('ix_wallet_snapshots_wallet_id'), 'wallet_snapshots', ['wallet_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_wallet_snapshots_wallet_id'), table_name='wallet_snapshots')
    op.drop_index(op.f('ix_wallet_snapshots_created_at'), table_name='wallet_snapshots')
    op.drop_table('wallet_snapshots')
    op.drop_index(op.f('ix_wallet_assets_wallet_id'), table_name='wallet_assets')
    op.drop_table('wallet_assets')
    op.drop_index(op.f('ix_transactions_wallet_id'), table_name='transactions')
    op.drop_index(op.f('ix_transactions_asset_id'), table_name='transactions')
    op.drop_table('transactions')
    op.drop_index(op.f('ix_wallets_user_id'), table_name='wallets')
    op.drop_table('wallets')
    op.drop_index(op.f('ix_assets_symbol'), table_name='assets')
    op.drop_table('assets')
