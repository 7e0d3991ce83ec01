# services/billing_runner.py
"""
Daily billing run.

Bills every ACTIVE lease whose billing day is today. Each lease is committed
on its own, so one failing lease never undoes or blocks the others.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from config import BillingPolicy
from models import Invoice, Lease
from . import billing_store as store
from .billing_periods import calendar_months_between
from .exceptions import BillingError
from .invoice_service import InvoiceService

logger = logging.getLogger(__name__)


@dataclass
class BillingRunResult:
     invoices: List[Invoice] = field(default_factory=list)
     skipped: List[int] = field(default_factory=list)
     failed: Dict[int, str] = field(default_factory=dict)

     @property
     def generated(self) -> int:
          return len(self.invoices)


def _skip_reason(lease: Lease, latest: Optional[Invoice], today: date) -> Optional[str]:
     if latest is None:
          return None
     if latest.period_end >= lease.end_date:
          return "lease fully billed"
     elapsed = calendar_months_between(latest.period_end, today)
     if elapsed < lease.billing_cycle_months:
          return f"only {elapsed} of {lease.billing_cycle_months} month(s) since last period"
     return None


def generate_invoices_for_today(
     db: Session,
     today: Optional[date] = None,
     policy: Optional[BillingPolicy] = None,
) -> BillingRunResult:
     """
     Generate invoices for all leases billable today.

     Args:
          db: SQLAlchemy database session (committed once per lease)
          today: Run date (defaults to date.today())
          policy: Billing policy passed through to InvoiceService

     Returns:
          BillingRunResult with generated invoices, skipped and failed lease ids
     """
     today = today or date.today()
     service = InvoiceService(db, policy)
     result = BillingRunResult()

     leases = store.find_active_leases_billable_on(db, today.day)
     lease_ids = [lease.id for lease in leases]
     logger.info("Billing run %s: %s lease(s) with billing day %s", today.isoformat(), len(leases), today.day)

     for lease_id in lease_ids:
          try:
               lease = store.find_lease(db, lease_id)
               latest = store.find_latest_invoice(db, lease_id)
               reason = _skip_reason(lease, latest, today)
               if reason:
                    logger.debug("Skipping lease %s: %s", lease_id, reason)
                    result.skipped.append(lease_id)
                    continue

               invoice = service.generate_invoice_for_lease(lease_id, today=today)
               db.commit()
               result.invoices.append(invoice)
          except BillingError as e:
               db.rollback()
               logger.warning("Billing failed for lease %s: %s", lease_id, e.message)
               result.failed[lease_id] = e.message
          except Exception as e:
               db.rollback()
               logger.exception("Unexpected error billing lease %s", lease_id)
               result.failed[lease_id] = str(e)

     logger.info(
          "Billing run %s finished: generated=%s skipped=%s failed=%s",
          today.isoformat(), result.generated, len(result.skipped), len(result.failed),
     )
     return result
