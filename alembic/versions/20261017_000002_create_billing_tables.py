"""Create lease_fees, usage_records, invoices, invoice_items and invoice_sequences

Revision ID: 20261017_000002
Revises: 20261017_000001
Create Date: 2026-10-17

Unique constraints here are what keep concurrent billing runs correct:
one invoice per lease period, one usage row per fee and month, one
counter row per invoice month.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261017_000002"
down_revision: Union[str, None] = "20261017_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "lease_fees",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.Enum("FIXED", "VARIABLE", name="fee_type"), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("unit_price", sa.Numeric(precision=12, scale=4), nullable=True),
        sa.Column("billing_unit", sa.String(50), nullable=True),
        sa.Column("is_mandatory", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_lease_fees"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["leases.id"], name="fk_lease_fees_lease_id", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_lease_fees_lease_id", "lease_fees", ["lease_id"])
    op.create_index("ix_lease_fees_is_active", "lease_fees", ["is_active"])

    op.create_table(
        "usage_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("fee_id", sa.Integer(), nullable=False),
        sa.Column("period_month", sa.Date(), nullable=False),
        sa.Column("usage_value", sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_usage_records"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["leases.id"], name="fk_usage_records_lease_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["fee_id"], ["lease_fees.id"], name="fk_usage_records_fee_id", ondelete="NO ACTION"
        ),
        sa.UniqueConstraint("lease_id", "fee_id", "period_month", name="uq_usage_records_lease_fee_month"),
    )
    op.create_index("ix_usage_records_lease_id", "usage_records", ["lease_id"])
    op.create_index("ix_usage_records_fee_id", "usage_records", ["fee_id"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("invoice_number", sa.String(32), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("subtotal", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("discount_amount", sa.Numeric(precision=12, scale=2), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Numeric(precision=12, scale=2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            "status",
            sa.Enum("UNPAID", "PAID", "OVERDUE", "CANCELLED", name="invoice_status"),
            nullable=False,
            server_default="UNPAID"
        ),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.Column("paid_amount", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_invoices"),
        sa.ForeignKeyConstraint(
            ["lease_id"], ["leases.id"], name="fk_invoices_lease_id", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("lease_id", "period_start", "period_end", name="uq_invoices_lease_period"),
    )
    op.create_index("ix_invoices_lease_id", "invoices", ["lease_id"])
    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"], unique=True)
    op.create_index("ix_invoices_period_end", "invoices", ["period_end"])
    op.create_index("ix_invoices_due_date", "invoices", ["due_date"])
    op.create_index("ix_invoices_status", "invoices", ["status"])

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("invoice_id", sa.Integer(), nullable=False),
        sa.Column("fee_id", sa.Integer(), nullable=True),
        sa.Column(
            "type",
            sa.Enum("RENT", "FIXED_FEE", "VARIABLE_FEE", "DISCOUNT", name="invoice_item_type"),
            nullable=False
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Numeric(precision=12, scale=3), nullable=False),
        sa.Column("unit_price", sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column("amount", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=True),
        sa.Column("period_end", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_invoice_items"),
        sa.ForeignKeyConstraint(
            ["invoice_id"], ["invoices.id"], name="fk_invoice_items_invoice_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["fee_id"], ["lease_fees.id"], name="fk_invoice_items_fee_id", ondelete="NO ACTION"
        ),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])
    op.create_index("ix_invoice_items_fee_id", "invoice_items", ["fee_id"])

    op.create_table(
        "invoice_sequences",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id", name="pk_invoice_sequences"),
        sa.UniqueConstraint("year", "month", name="uq_invoice_sequences_year_month"),
    )


def downgrade() -> None:
    op.drop_table("invoice_sequences")
    op.drop_index("ix_invoice_items_fee_id", table_name="invoice_items")
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_table("invoice_items")
    op.drop_index("ix_invoices_status", table_name="invoices")
    op.drop_index("ix_invoices_due_date", table_name="invoices")
    op.drop_index("ix_invoices_period_end", table_name="invoices")
    op.drop_index("ix_invoices_invoice_number", table_name="invoices")
    op.drop_index("ix_invoices_lease_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("ix_usage_records_fee_id", table_name="usage_records")
    op.drop_index("ix_usage_records_lease_id", table_name="usage_records")
    op.drop_table("usage_records")
    op.drop_index("ix_lease_fees_is_active", table_name="lease_fees")
    op.drop_index("ix_lease_fees_lease_id", table_name="lease_fees")
    op.drop_table("lease_fees")
