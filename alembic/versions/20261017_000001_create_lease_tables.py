"""Create tenants, properties, property_units and leases tables

Revision ID: 20261017_000001
Revises: None
Create Date: 2026-10-17

Lease contracts with their billing configuration, plus the display
entities invoices are rendered with.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create lease-side tables."""
    op.create_table(
        'tenants',
        sa.Column('tenant_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('contact_number', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('tenant_id', name='pk_tenants'),
    )

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_name', sa.String(255), nullable=False),
        sa.Column('landlord_id', sa.Integer(), nullable=True),
        sa.Column('street', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('province', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_properties'),
    )
    op.create_index('ix_properties_landlord_id', 'properties', ['landlord_id'])

    op.create_table(
        'property_units',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('unit_number', sa.String(50), nullable=False),
        sa.Column('unit_type', sa.String(100), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='vacant'),
        sa.PrimaryKeyConstraint('id', name='pk_property_units'),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['properties.id'],
            name='fk_property_units_property_id',
            ondelete='CASCADE'
        ),
    )

    op.create_table(
        'leases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=True),
        sa.Column('property_unit_id', sa.Integer(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('deposit_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('billing_day', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('billing_cycle_months', sa.Integer(), nullable=False, server_default='1'),
        sa.Column(
            'discount_type',
            sa.Enum('PERCENT', 'FIXED', name='discount_type'),
            nullable=True
        ),
        sa.Column('discount_value', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column(
            'status',
            sa.Enum('DRAFT', 'ACTIVE', 'EXPIRED', 'TERMINATED', name='lease_status'),
            nullable=False,
            server_default='DRAFT'
        ),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_leases'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_leases_property_id'),
        sa.ForeignKeyConstraint(['property_unit_id'], ['property_units.id'], name='fk_leases_property_unit_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.tenant_id'], name='fk_leases_tenant_id'),
        sa.CheckConstraint('billing_day BETWEEN 1 AND 31', name='ck_leases_billing_day_range'),
        sa.CheckConstraint('billing_cycle_months >= 1', name='ck_leases_billing_cycle_positive'),
    )
    op.create_index('ix_leases_billing_day', 'leases', ['billing_day'])
    op.create_index('ix_leases_status', 'leases', ['status'])


def downgrade() -> None:
    """Drop lease-side tables."""
    op.drop_index('ix_leases_status', table_name='leases')
    op.drop_index('ix_leases_billing_day', table_name='leases')
    op.drop_table('leases')
    op.drop_table('property_units')
    op.drop_index('ix_properties_landlord_id', table_name='properties')
    op.drop_table('properties')
    op.drop_table('tenants')
