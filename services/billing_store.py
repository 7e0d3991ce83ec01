# services/billing_store.py
"""
Persistence functions used by the billing services.

Every read and write the billing engine performs goes through here, so the
uniqueness guarantees it depends on stay in one place:
- invoices: unique (lease_id, period_start, period_end) and invoice_number
- usage_records: unique (lease_id, fee_id, period_month)
"""
import logging
from calendar import monthrange
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from models import (
     Invoice, InvoiceItem, InvoiceStatus, Lease, LeaseFee, LeaseStatus, PropertyUnit, UsageRecord,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Leases and fees
# ---------------------------------------------------------------------------

def find_lease(db: Session, lease_id: int) -> Optional[Lease]:
     return db.query(Lease).filter(Lease.id == lease_id).first()


def find_active_leases_billable_on(db: Session, day_of_month: int) -> List[Lease]:
     """ACTIVE leases whose billing_day equals day_of_month, with fees preloaded."""
     return (
          db.query(Lease)
          .options(selectinload(Lease.fees))
          .filter(
               Lease.status == LeaseStatus.ACTIVE,
               Lease.billing_day == day_of_month,
          )
          .order_by(Lease.id)
          .all()
     )


def find_fee(db: Session, fee_id: int) -> Optional[LeaseFee]:
     return db.query(LeaseFee).filter(LeaseFee.id == fee_id).first()


def find_fees_for_lease(db: Session, lease_id: int) -> List[LeaseFee]:
     return (
          db.query(LeaseFee)
          .filter(LeaseFee.lease_id == lease_id)
          .order_by(LeaseFee.created_at.desc(), LeaseFee.id.desc())
          .all()
     )


def find_active_fees_for_lease(db: Session, lease_id: int) -> List[LeaseFee]:
     return (
          db.query(LeaseFee)
          .filter(LeaseFee.lease_id == lease_id, LeaseFee.is_active.is_(True))
          .order_by(LeaseFee.id)
          .all()
     )


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------

def find_invoice_by_id(db: Session, invoice_id: int) -> Optional[Invoice]:
     return (
          db.query(Invoice)
          .options(
               selectinload(Invoice.items),
               selectinload(Invoice.lease).selectinload(Lease.tenant),
               selectinload(Invoice.lease).selectinload(Lease.property),
               selectinload(Invoice.lease).selectinload(Lease.property_unit).selectinload(PropertyUnit.property),
          )
          .filter(Invoice.id == invoice_id)
          .first()
     )


def find_invoice(db: Session, lease_id: int, period_start: date, period_end: date) -> Optional[Invoice]:
     return (
          db.query(Invoice)
          .filter(
               Invoice.lease_id == lease_id,
               Invoice.period_start == period_start,
               Invoice.period_end == period_end,
          )
          .first()
     )


def find_latest_invoice(db: Session, lease_id: int) -> Optional[Invoice]:
     """Invoice with the latest period_end for the lease."""
     return (
          db.query(Invoice)
          .filter(Invoice.lease_id == lease_id)
          .order_by(desc(Invoice.period_end))
          .limit(1)
          .first()
     )


def find_invoices_for_lease(db: Session, lease_id: int) -> List[Invoice]:
     return (
          db.query(Invoice)
          .options(selectinload(Invoice.items))
          .filter(Invoice.lease_id == lease_id)
          .order_by(desc(Invoice.period_start))
          .all()
     )


def count_invoices_created_in_month(db: Session, year: int, month: int) -> int:
     first_day = date(year, month, 1)
     last_day = date(year, month, monthrange(year, month)[1])
     return (
          db.query(func.count(Invoice.id))
          .filter(Invoice.issue_date >= first_day, Invoice.issue_date <= last_day)
          .scalar()
     )


def create_invoice_with_items(db: Session, invoice: Invoice, items: Iterable[InvoiceItem]) -> Invoice:
     """
     Insert an invoice and its items inside one SAVEPOINT.

     Raises:
          IntegrityError: On a duplicate period or invoice number; nothing
               from this call is left in the session.
     """
     with db.begin_nested():
          invoice.items = list(items)
          db.add(invoice)
     return invoice


def update_invoice_status(db: Session, invoice_id: int, status: InvoiceStatus, **fields) -> Optional[Invoice]:
     invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
     if invoice is None:
          return None
     invoice.status = status
     for name, value in fields.items():
          setattr(invoice, name, value)
     db.flush()
     return invoice


def sweep_overdue_invoices(db: Session, today: date) -> int:
     """Flip every UNPAID invoice due strictly before today to OVERDUE in one statement."""
     result = db.execute(
          update(Invoice)
          .where(Invoice.status == InvoiceStatus.UNPAID, Invoice.due_date < today)
          .values(status=InvoiceStatus.OVERDUE)
          .execution_options(synchronize_session="fetch")
     )
     return result.rowcount or 0


# ---------------------------------------------------------------------------
# Usage records
# ---------------------------------------------------------------------------

def find_usage_records(
     db: Session,
     lease_id: int,
     fee_id: Optional[int] = None,
     month_from: Optional[date] = None,
     month_to: Optional[date] = None,
) -> List[UsageRecord]:
     """Usage records of a lease, optionally for one fee and an inclusive month range."""
     query = db.query(UsageRecord).filter(UsageRecord.lease_id == lease_id)
     if fee_id is not None:
          query = query.filter(UsageRecord.fee_id == fee_id)
     if month_from is not None:
          query = query.filter(UsageRecord.period_month >= month_from)
     if month_to is not None:
          query = query.filter(UsageRecord.period_month <= month_to)
     return query.order_by(desc(UsageRecord.period_month), UsageRecord.fee_id).all()


def find_usage_record(db: Session, usage_id: int) -> Optional[UsageRecord]:
     return db.query(UsageRecord).filter(UsageRecord.id == usage_id).first()


def _find_usage_by_key(db: Session, lease_id: int, fee_id: int, period_month: date) -> Optional[UsageRecord]:
     return (
          db.query(UsageRecord)
          .filter(
               UsageRecord.lease_id == lease_id,
               UsageRecord.fee_id == fee_id,
               UsageRecord.period_month == period_month,
          )
          .first()
     )


def upsert_usage_record(
     db: Session,
     lease_id: int,
     fee_id: int,
     period_month: date,
     usage_value: Decimal,
     total_amount: Decimal,
     notes: Optional[str] = None,
) -> UsageRecord:
     """
     Insert or overwrite the usage row keyed by (lease_id, fee_id, period_month).

     A concurrent insert of the same key surfaces as an IntegrityError on
     our SAVEPOINT; the row that won is then overwritten instead.
     """
     record = _find_usage_by_key(db, lease_id, fee_id, period_month)
     if record is None:
          try:
               with db.begin_nested():
                    record = UsageRecord(
                         lease_id=lease_id,
                         fee_id=fee_id,
                         period_month=period_month,
                         usage_value=usage_value,
                         total_amount=total_amount,
                         notes=notes,
                    )
                    db.add(record)
               return record
          except IntegrityError:
               logger.info(
                    "Usage record for lease=%s fee=%s month=%s inserted concurrently, updating instead",
                    lease_id, fee_id, period_month,
               )
               record = _find_usage_by_key(db, lease_id, fee_id, period_month)
               if record is None:
                    raise

     record.usage_value = usage_value
     record.total_amount = total_amount
     if notes is not None:
          record.notes = notes
     db.flush()
     return record


def delete_usage_record(db: Session, record: UsageRecord) -> None:
     db.delete(record)
     db.flush()


def fee_has_history(db: Session, fee_id: int) -> bool:
     """True when invoice items or usage records reference the fee."""
     used_on_invoice = db.execute(
          select(InvoiceItem.id).where(InvoiceItem.fee_id == fee_id).limit(1)
     ).first()
     if used_on_invoice is not None:
          return True
     metered = db.execute(
          select(UsageRecord.id).where(UsageRecord.fee_id == fee_id).limit(1)
     ).first()
     return metered is not None
