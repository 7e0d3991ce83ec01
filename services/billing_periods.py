# services/billing_periods.py
"""
Calendar helpers and billing period calculation.

Periods are inclusive date ranges snapped to month boundaries. Each new
period starts the day after the previous invoice ended, so successive
invoices of a lease are contiguous and never overlap.
"""
from calendar import monthrange
from datetime import date, timedelta
from typing import NamedTuple, Optional

from .exceptions import InvalidStateError, ValidationError


class BillingPeriod(NamedTuple):
     start: date
     end: date


def first_day_of_month(day: date) -> date:
     return day.replace(day=1)


def last_day_of_month(day: date) -> date:
     return day.replace(day=monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
     """Shift a date by whole months, clamping the day to the target month length."""
     month_index = day.year * 12 + (day.month - 1) + months
     year, month = divmod(month_index, 12)
     month += 1
     return date(year, month, min(day.day, monthrange(year, month)[1]))


def calendar_months_between(earlier: date, later: date) -> int:
     """Number of month boundaries crossed going from earlier to later (days ignored)."""
     return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def calculate_next_period(
     lease_start: date,
     lease_end: date,
     billing_cycle_months: int,
     previous_period_end: Optional[date] = None,
) -> BillingPeriod:
     """
     Compute the next billing period for a lease.

     Args:
          lease_start: Lease start date
          lease_end: Lease end date (periods never run past it)
          billing_cycle_months: Months covered by one invoice (>= 1)
          previous_period_end: period_end of the latest invoice, if any

     Returns:
          BillingPeriod(start, end)

     Raises:
          ValidationError: If billing_cycle_months < 1
          InvalidStateError: If the lease has already been billed up to its end date
     """
     if billing_cycle_months < 1:
          raise ValidationError("billing_cycle_months must be at least 1")

     if previous_period_end is not None:
          period_start = previous_period_end + timedelta(days=1)
     else:
          # First invoice starts at the beginning of the lease's first month,
          # even when the lease itself starts mid-month.
          period_start = first_day_of_month(lease_start)

     if period_start > lease_end:
          raise InvalidStateError(f"Lease is fully billed through {lease_end.isoformat()}")

     period_end = last_day_of_month(add_months(period_start, billing_cycle_months - 1))
     if period_end > lease_end:
          period_end = lease_end

     return BillingPeriod(period_start, period_end)


def validate_period(period_start: date, period_end: date) -> BillingPeriod:
     """Check an explicitly supplied (override) period."""
     if period_start > period_end:
          raise ValidationError(
               f"period_start {period_start.isoformat()} is after period_end {period_end.isoformat()}"
          )
     return BillingPeriod(period_start, period_end)
