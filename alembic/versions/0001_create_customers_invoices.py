"""create customers and invoices tables

Revision ID: 0001_create_customers_invoices
Revises: 
Create Date: 2026-10-18 00:00:00

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_create_customers_invoices'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('image_url', sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_customers'),
        comment='People or companies invoices are issued to.',
    )
    op.create_table(
        'invoices',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_invoices_amount_positive'),
        sa.CheckConstraint("status IN ('pending', 'paid')", name='ck_invoices_status_valid'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_invoices_customer_id_customers'),
        sa.PrimaryKeyConstraint('id', name='pk_invoices'),
        comment='Invoices; amount is stored in cents.',
    )
    op.create_index('ix_invoices_customer_id', 'invoices', ['customer_id'])


def downgrade() -> None:
    op.drop_index('ix_invoices_customer_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_table('customers')
