from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from models import InvoiceStatus
from services import InvoiceService, mark_invoice_as_paid, update_overdue_invoices
from services.exceptions import InvalidStateError, NotFoundError, ValidationError


@pytest.fixture
def make_invoice(db_session, lease):
     service = InvoiceService(db_session)

     def _make_invoice(month, today):
          period = (date(2025, month, 1), date(2025, month, 28))
          invoice = service.generate_invoice_for_lease(lease.id, period_override=period, today=today)
          db_session.commit()
          return invoice
     return _make_invoice


def test_overdue_sweep(db_session, make_invoice):
     # due dates 2025-03-07 and 2025-03-09
     late = make_invoice(1, date(2025, 2, 28))
     current = make_invoice(2, date(2025, 3, 2))

     assert update_overdue_invoices(db_session, today=date(2025, 3, 8)) == 1
     db_session.commit()

     assert late.status == InvoiceStatus.OVERDUE
     assert current.status == InvoiceStatus.UNPAID
     assert late.is_overdue(date(2025, 3, 8)) is False
     assert update_overdue_invoices(db_session, today=date(2025, 3, 8)) == 0


def test_due_today_is_not_overdue(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 3, 1))

     assert update_overdue_invoices(db_session, today=invoice.due_date) == 0
     assert invoice.status == InvoiceStatus.UNPAID


def test_mark_paid(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 1, 1))
     paid_at = datetime(2025, 1, 5, 10, 30)

     paid = mark_invoice_as_paid(db_session, invoice.id, Decimal("1000"), "GCASH", paid_at=paid_at)

     assert paid.status == InvoiceStatus.PAID
     assert paid.paid_amount == Decimal("1000.00")
     assert paid.payment_method == "GCASH"
     assert paid.paid_at == paid_at


def test_overdue_invoice_can_be_paid(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 1, 1))
     update_overdue_invoices(db_session, today=date(2025, 2, 1))

     paid = mark_invoice_as_paid(db_session, invoice.id, Decimal("1000.00"))

     assert paid.status == InvoiceStatus.PAID
     assert paid.paid_at is not None


def test_paying_twice_is_rejected(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 1, 1))
     mark_invoice_as_paid(db_session, invoice.id, Decimal("1000.00"), "CASH")

     with pytest.raises(InvalidStateError):
          mark_invoice_as_paid(db_session, invoice.id, Decimal("5.00"), "CARD")

     assert invoice.paid_amount == Decimal("1000.00")
     assert invoice.payment_method == "CASH"


def test_cancelled_invoice_cannot_be_paid(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 1, 1))
     invoice.status = InvoiceStatus.CANCELLED
     db_session.commit()

     with pytest.raises(InvalidStateError):
          mark_invoice_as_paid(db_session, invoice.id, Decimal("1000.00"))


def test_pay_rejects_bad_input(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 1, 1))
     with pytest.raises(ValidationError):
          mark_invoice_as_paid(db_session, invoice.id, Decimal("-1"))
     with pytest.raises(NotFoundError):
          mark_invoice_as_paid(db_session, 999, Decimal("1"))


def test_paid_at_defaults_to_now(db_session, make_invoice):
     invoice = make_invoice(1, date(2025, 1, 1))
     before = datetime.now(timezone.utc).replace(tzinfo=None)

     paid = mark_invoice_as_paid(db_session, invoice.id, Decimal("1000.00"))

     assert paid.paid_at.tzinfo is None
     assert paid.paid_at >= before
