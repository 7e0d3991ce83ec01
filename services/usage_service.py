# services/usage_service.py
"""
Usage Service - metered usage for VARIABLE lease fees.

Readings are stored one row per (lease, fee, calendar month). Recording a
reading for a month that already has one replaces it, so a metering source
can resubmit corrected values without creating duplicate charges.
"""
import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import LeaseFee, UsageRecord
from models.lease_fee import FeeType
from . import billing_store as store
from .billing_periods import first_day_of_month
from .discounts import ZERO, to_money
from .exceptions import BillingError, InvalidStateError, NotFoundError, ValidationError
from .invoice_builder import UsageTotal

logger = logging.getLogger(__name__)


class UsageEntry(NamedTuple):
     fee_id: int
     usage_value: Decimal
     period_month: date
     notes: Optional[str] = None


def _get_variable_fee(db: Session, lease_id: int, fee_id: int) -> LeaseFee:
     if store.find_lease(db, lease_id) is None:
          raise NotFoundError(f"Lease with ID {lease_id} not found")

     fee = store.find_fee(db, fee_id)
     if fee is None or fee.lease_id != lease_id:
          raise NotFoundError(f"Fee with ID {fee_id} not found for lease {lease_id}")
     if fee.type != FeeType.VARIABLE:
          raise InvalidStateError(f"Fee {fee_id} is not a VARIABLE fee; usage cannot be recorded")
     if fee.unit_price is None:
          raise InvalidStateError(f"Fee {fee_id} has no unit price configured")
     return fee


def record_usage(
     db: Session,
     lease_id: int,
     fee_id: int,
     usage_value: Decimal,
     period_month: date,
     notes: Optional[str] = None,
) -> UsageRecord:
     """
     Record (or replace) the usage of a variable fee for a month.

     Args:
          db: SQLAlchemy database session
          lease_id: Lease the reading belongs to
          fee_id: VARIABLE fee of that lease
          usage_value: Metered quantity (>= 0)
          period_month: Any date inside the month; normalized to the 1st
          notes: Optional free text, e.g. the raw meter reading

     Returns:
          The inserted or updated UsageRecord

     Raises:
          NotFoundError: Lease or fee missing, or fee belongs to another lease
          InvalidStateError: Fee is not VARIABLE or has no unit price
          ValidationError: Usage is not a number or is negative
     """
     try:
          usage_value = Decimal(usage_value)
     except (InvalidOperation, TypeError, ValueError):
          raise ValidationError("usage_value must be a number")
     if not usage_value.is_finite():
          raise ValidationError("usage_value must be a number")
     if usage_value < 0:
          raise ValidationError("usage_value must not be negative")

     fee = _get_variable_fee(db, lease_id, fee_id)
     month = first_day_of_month(period_month)
     total_amount = to_money(usage_value * Decimal(fee.unit_price))

     record = store.upsert_usage_record(
          db,
          lease_id=lease_id,
          fee_id=fee_id,
          period_month=month,
          usage_value=usage_value,
          total_amount=total_amount,
          notes=notes,
     )
     logger.info(
          "Recorded usage lease=%s fee=%s month=%s usage=%s total=%s",
          lease_id, fee_id, month.isoformat(), usage_value, total_amount,
     )
     return record


def bulk_record_usage(db: Session, lease_id: int, entries: Iterable) -> List[UsageRecord]:
     """
     Record several readings for one lease.

     Each entry (fee_id, usage_value, period_month, optional notes) is applied
     in its own SAVEPOINT; a failing entry is logged and skipped. Only the
     successfully recorded rows are returned.
     """
     results: List[UsageRecord] = []
     for entry in entries:
          try:
               with db.begin_nested():
                    record = record_usage(
                         db,
                         lease_id,
                         entry.fee_id,
                         entry.usage_value,
                         entry.period_month,
                         notes=getattr(entry, "notes", None),
                    )
               results.append(record)
          except BillingError as e:
               logger.warning("Skipping usage entry for lease=%s fee=%s: %s", lease_id, entry.fee_id, e.message)
          except SQLAlchemyError:
               logger.exception("Failed to store usage entry for lease=%s fee=%s", lease_id, entry.fee_id)
     return results


def get_usage_for_lease(db: Session, lease_id: int) -> List[UsageRecord]:
     if store.find_lease(db, lease_id) is None:
          raise NotFoundError(f"Lease with ID {lease_id} not found")
     return store.find_usage_records(db, lease_id)


def get_usage_for_period(db: Session, lease_id: int, period_start: date, period_end: date) -> List[UsageRecord]:
     """Usage records whose month falls inside [month of period_start, month of period_end]."""
     if period_start > period_end:
          raise ValidationError("period_start must not be after period_end")
     if store.find_lease(db, lease_id) is None:
          raise NotFoundError(f"Lease with ID {lease_id} not found")
     return store.find_usage_records(
          db,
          lease_id,
          month_from=first_day_of_month(period_start),
          month_to=first_day_of_month(period_end),
     )


def aggregate_usage(
     db: Session,
     lease_id: int,
     fee_ids: Iterable[int],
     period_start: date,
     period_end: date,
) -> Dict[int, UsageTotal]:
     """Sum usage quantity and stored totals per fee over the period's months."""
     wanted = set(fee_ids)
     totals: Dict[int, UsageTotal] = {}
     if not wanted:
          return totals

     records = store.find_usage_records(
          db,
          lease_id,
          month_from=first_day_of_month(period_start),
          month_to=first_day_of_month(period_end),
     )
     for record in records:
          if record.fee_id not in wanted:
               continue
          current = totals.get(record.fee_id, UsageTotal(Decimal(0), ZERO))
          totals[record.fee_id] = UsageTotal(
               quantity=current.quantity + Decimal(record.usage_value),
               amount=current.amount + Decimal(record.total_amount),
          )
     return totals


def get_usage_summary(db: Session, lease_id: int, period_start: date, period_end: date) -> List[dict]:
     """Per-fee totals for a period, in fee order."""
     records = get_usage_for_period(db, lease_id, period_start, period_end)

     summary: "OrderedDict[int, dict]" = OrderedDict()
     for record in sorted(records, key=lambda r: (r.fee_id, r.period_month)):
          row = summary.get(record.fee_id)
          if row is None:
               fee = record.fee
               row = summary[record.fee_id] = {
                    "fee_id": record.fee_id,
                    "fee_name": fee.name if fee else None,
                    "billing_unit": fee.billing_unit if fee else None,
                    "record_count": 0,
                    "total_usage": Decimal(0),
                    "total_amount": ZERO,
               }
          row["record_count"] += 1
          row["total_usage"] += Decimal(record.usage_value)
          row["total_amount"] += Decimal(record.total_amount)

     return list(summary.values())


def delete_usage_record(db: Session, usage_id: int) -> None:
     record = store.find_usage_record(db, usage_id)
     if record is None:
          raise NotFoundError(f"Usage record with ID {usage_id} not found")
     store.delete_usage_record(db, record)
     logger.info("Deleted usage record %s", usage_id)
