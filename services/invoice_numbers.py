# services/invoice_numbers.py
"""
Invoice number allocation.

Numbers look like INV-202502-0007: prefix, issue year and month, then a
4-digit sequence that restarts every month. The sequence lives in the
invoice_sequences table and is advanced with an atomic UPDATE, so two
billing runs in parallel can never receive the same value.
"""
import logging
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import InvoiceSequence
from .billing_store import count_invoices_created_in_month
from .exceptions import BillingError

logger = logging.getLogger(__name__)


def format_invoice_number(prefix: str, year: int, month: int, sequence: int) -> str:
     return f"{prefix}-{year:04d}{month:02d}-{sequence:04d}"


def next_invoice_sequence(db: Session, year: int, month: int) -> int:
     """
     Return the next sequence value for the month.

     The first call in a month seeds the counter from the number of invoices
     already issued that month; if another writer seeds it first, our insert
     hits the unique (year, month) constraint and we fall back to the UPDATE.
     """
     for _ in range(2):
          result = db.execute(
               update(InvoiceSequence)
               .where(InvoiceSequence.year == year, InvoiceSequence.month == month)
               .values(last_value=InvoiceSequence.last_value + 1)
               .execution_options(synchronize_session=False)
          )
          if result.rowcount:
               return db.execute(
                    select(InvoiceSequence.last_value)
                    .where(InvoiceSequence.year == year, InvoiceSequence.month == month)
               ).scalar_one()

          first_value = count_invoices_created_in_month(db, year, month) + 1
          try:
               with db.begin_nested():
                    db.add(InvoiceSequence(year=year, month=month, last_value=first_value))
               return first_value
          except IntegrityError:
               logger.info("Invoice sequence %04d-%02d seeded concurrently, retrying", year, month)

     raise BillingError(f"Could not allocate an invoice sequence for {year:04d}-{month:02d}")


def allocate_invoice_number(db: Session, issued_on: date, prefix: str = "INV") -> str:
     sequence = next_invoice_sequence(db, issued_on.year, issued_on.month)
     return format_invoice_number(prefix, issued_on.year, issued_on.month, sequence)
