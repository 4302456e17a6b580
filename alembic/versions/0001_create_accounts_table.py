"""create accounts table

Revision ID: createaccountstable
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'createaccountstable'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('phone_number', sa.String(length=16), nullable=True),
        sa.Column('unconfirmed_phone_number', sa.String(length=16), nullable=True),
        sa.Column('confirmation_token', sa.String(length=64), nullable=True),
        sa.Column('confirmation_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('lock_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_accounts_phone_number', 'accounts', ['phone_number'], unique=True)
    op.create_index('ix_accounts_unconfirmed_phone_number', 'accounts', ['unconfirmed_phone_number'])
    op.create_index('ix_accounts_confirmation_token', 'accounts', ['confirmation_token'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_accounts_confirmation_token', table_name='accounts')
    op.drop_index('ix_accounts_unconfirmed_phone_number', table_name='accounts')
    op.drop_index('ix_accounts_phone_number', table_name='accounts')
    op.drop_table('accounts')
