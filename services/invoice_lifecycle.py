# services/invoice_lifecycle.py
"""
Invoice status transitions.

     UNPAID  -> PAID      (payment recorded)
     UNPAID  -> OVERDUE   (scheduled sweep, due date passed)
     OVERDUE -> PAID
     CANCELLED is terminal and set outside the billing engine.
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import Invoice
from models.invoice import InvoiceStatus
from . import billing_store as store
from .discounts import to_money
from .exceptions import InvalidStateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

PAYABLE_STATUSES = (InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE)


def mark_invoice_as_paid(
     db: Session,
     invoice_id: int,
     paid_amount: Decimal,
     payment_method: Optional[str] = None,
     paid_at: Optional[datetime] = None,
) -> Invoice:
     """
     Settle an invoice in full.

     There are no partial payments: any amount settles the invoice.

     Raises:
          NotFoundError: Invoice does not exist
          InvalidStateError: Invoice is already PAID or CANCELLED
          ValidationError: Negative paid_amount
     """
     paid_amount = Decimal(paid_amount)
     if paid_amount < 0:
          raise ValidationError("paid_amount must not be negative")

     invoice = store.find_invoice_by_id(db, invoice_id)
     if invoice is None:
          raise NotFoundError(f"Invoice with ID {invoice_id} not found")
     if invoice.status not in PAYABLE_STATUSES:
          raise InvalidStateError(f"Invoice {invoice.invoice_number} is already {invoice.status.value}")

     store.update_invoice_status(
          db,
          invoice.id,
          InvoiceStatus.PAID,
          paid_at=paid_at or datetime.now(timezone.utc).replace(tzinfo=None),
          paid_amount=to_money(paid_amount),
          payment_method=payment_method,
     )
     logger.info("Invoice %s marked PAID (%s via %s)", invoice.invoice_number, paid_amount, payment_method or "n/a")
     return invoice


def update_overdue_invoices(db: Session, today: Optional[date] = None) -> int:
     """
     Mark every UNPAID invoice whose due date is before today as OVERDUE.

     Intended for a daily schedule; rerunning it changes nothing because
     OVERDUE invoices no longer match.

     Returns:
          Number of invoices marked as overdue
     """
     today = today or date.today()
     count = store.sweep_overdue_invoices(db, today)
     logger.info("Overdue sweep for %s updated %s invoice(s)", today.isoformat(), count)
     return count
