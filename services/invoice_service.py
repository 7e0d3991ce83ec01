# services/invoice_service.py
"""
Invoice Service - business logic for generating and reading invoices.

Generation resolves the billing period, refuses periods that were already
billed, composes line items from rent, fees and metered usage, allocates an
invoice number and stores the invoice together with its items.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BillingPolicy, settings
from models import Invoice, InvoiceItem, Lease, LeaseStatus
from models.invoice import InvoiceStatus
from . import billing_store as store
from .billing_periods import BillingPeriod, calculate_next_period, validate_period
from .discounts import ZERO
from .exceptions import DuplicateInvoiceError, InvalidStateError, NotFoundError
from .fee_ledger import FeeLedger
from .invoice_builder import InvoiceDraft, build_invoice_draft
from .invoice_numbers import allocate_invoice_number
from .usage_service import aggregate_usage

logger = logging.getLogger(__name__)


class InvoiceService:
     """Service class for invoice-related business logic."""

     def __init__(self, db: Session, policy: Optional[BillingPolicy] = None):
          self.db = db
          self.policy = policy or settings.billing_policy

     def _get_lease(self, lease_id: int) -> Lease:
          lease = store.find_lease(self.db, lease_id)
          if lease is None:
               raise NotFoundError(f"Lease with ID {lease_id} not found")
          return lease

     def resolve_period(self, lease: Lease) -> BillingPeriod:
          """Next contiguous period for the lease, based on its latest invoice."""
          latest = store.find_latest_invoice(self.db, lease.id)
          return calculate_next_period(
               lease.start_date,
               lease.end_date,
               lease.billing_cycle_months,
               previous_period_end=latest.period_end if latest else None,
          )

     def generate_invoice_for_lease(
          self,
          lease_id: int,
          period_override: Optional[Tuple[date, date]] = None,
          today: Optional[date] = None,
     ) -> Invoice:
          """
          Generate and persist the invoice for one lease period.

          Args:
               lease_id: Lease to bill
               period_override: Explicit (period_start, period_end), for backfills
                    and corrections; otherwise the next period is computed
               today: Issue date (defaults to date.today())

          Returns:
               The persisted Invoice (status UNPAID) with its items

          Raises:
               NotFoundError: Lease does not exist
               InvalidStateError: Lease is not ACTIVE or already fully billed
               ValidationError: Override period is inverted
               DuplicateInvoiceError: The period was already invoiced
          """
          today = today or date.today()
          lease = self._get_lease(lease_id)
          if lease.status != LeaseStatus.ACTIVE:
               raise InvalidStateError(
                    f"Lease {lease_id} is {lease.status.value}; only ACTIVE leases can be billed"
               )

          if period_override is not None:
               period = validate_period(*period_override)
          else:
               period = self.resolve_period(lease)

          if store.find_invoice(self.db, lease.id, period.start, period.end) is not None:
               raise DuplicateInvoiceError(self._duplicate_message(lease.id, period))

          fee_ledger = FeeLedger.for_lease(self.db, lease.id)
          usage_totals = aggregate_usage(
               self.db,
               lease.id,
               [fee.id for fee in fee_ledger.variable_fees],
               period.start,
               period.end,
          )
          draft = build_invoice_draft(lease, fee_ledger, usage_totals, period)

          invoice = self._persist(lease, draft, today)
          logger.info(
               "Generated invoice %s for lease %s period %s..%s total=%s",
               invoice.invoice_number, lease.id, period.start, period.end, invoice.total_amount,
          )
          return store.find_invoice_by_id(self.db, invoice.id)

     def _persist(self, lease: Lease, draft: InvoiceDraft, today: date) -> Invoice:
          """
          Store the draft, retrying with a fresh number if the invoice number
          collides. A collision on the period means another writer billed it.

          The number is allocated outside the invoice SAVEPOINT, so a failed
          insert keeps the counter advanced and the next attempt gets a new value.
          """
          last_error: Optional[IntegrityError] = None
          for attempt in range(1, self.policy.sequence_retries + 1):
               invoice_number = allocate_invoice_number(
                    self.db, today, prefix=self.policy.invoice_prefix
               )
               try:
                    invoice = self._to_invoice(lease, draft, invoice_number, today)
                    store.create_invoice_with_items(self.db, invoice, self._to_items(draft))
                    return invoice
               except IntegrityError as e:
                    last_error = e
                    if store.find_invoice(self.db, lease.id, draft.period.start, draft.period.end) is not None:
                         raise DuplicateInvoiceError(self._duplicate_message(lease.id, draft.period)) from e
                    logger.warning(
                         "Invoice number conflict for lease %s (attempt %s/%s), retrying",
                         lease.id, attempt, self.policy.sequence_retries,
                    )
          raise InvalidStateError(
               f"Could not allocate a unique invoice number for lease {lease.id}"
          ) from last_error

     def _to_invoice(self, lease: Lease, draft: InvoiceDraft, invoice_number: str, today: date) -> Invoice:
          return Invoice(
               lease_id=lease.id,
               invoice_number=invoice_number,
               period_start=draft.period.start,
               period_end=draft.period.end,
               issue_date=today,
               due_date=today + timedelta(days=self.policy.due_days),
               subtotal=draft.subtotal,
               discount_amount=draft.discount_amount,
               tax_amount=draft.tax_amount,
               total_amount=draft.total_amount,
               status=InvoiceStatus.UNPAID,
          )

     @staticmethod
     def _to_items(draft: InvoiceDraft) -> List[InvoiceItem]:
          return [
               InvoiceItem(
                    fee_id=item.fee_id,
                    type=item.type,
                    name=item.name,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    amount=item.amount,
                    period_start=item.period_start,
                    period_end=item.period_end,
               )
               for item in draft.items
          ]

     @staticmethod
     def _duplicate_message(lease_id: int, period: BillingPeriod) -> str:
          return (
               f"Invoice already exists for lease {lease_id} "
               f"period {period.start.isoformat()} to {period.end.isoformat()}"
          )

     def get_invoices_for_lease(self, lease_id: int) -> List[Invoice]:
          self._get_lease(lease_id)
          return store.find_invoices_for_lease(self.db, lease_id)

     def get_invoice(self, invoice_id: int) -> Invoice:
          invoice = store.find_invoice_by_id(self.db, invoice_id)
          if invoice is None:
               raise NotFoundError(f"Invoice with ID {invoice_id} not found")
          return invoice

     def get_billing_stats(self, lease_id: int) -> dict:
          """
          Totals across all invoices of a lease.

          Returns:
               Dictionary with counts per status, total billed and total paid
          """
          invoices = self.get_invoices_for_lease(lease_id)

          def count(status: InvoiceStatus) -> int:
               return sum(1 for inv in invoices if inv.status == status)

          return {
               "lease_id": lease_id,
               "total_invoices": len(invoices),
               "total_billed": sum((Decimal(inv.total_amount) for inv in invoices), ZERO),
               "total_paid": sum(
                    (Decimal(inv.paid_amount or 0) for inv in invoices if inv.status == InvoiceStatus.PAID),
                    ZERO,
               ),
               "unpaid_invoices": count(InvoiceStatus.UNPAID),
               "overdue_invoices": count(InvoiceStatus.OVERDUE),
               "paid_invoices": count(InvoiceStatus.PAID),
          }
