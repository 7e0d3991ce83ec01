# services/invoice_builder.py
"""
Pure invoice composition: turns a lease, its fees and the usage totals for a
period into line items and totals. No database access happens here.

Line order is fixed: rent, fixed fees, variable fees, then the discount.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional

from models.invoice_item import InvoiceItemType
from models.lease import DiscountType
from .billing_periods import BillingPeriod
from .discounts import ZERO, calculate_discount, to_money
from .fee_ledger import FeeLedger


class UsageTotal(NamedTuple):
     quantity: Decimal
     amount: Decimal


class LineItem(NamedTuple):
     type: InvoiceItemType
     name: str
     quantity: Decimal
     unit_price: Decimal
     amount: Decimal
     fee_id: Optional[int] = None
     description: Optional[str] = None
     period_start: Optional[date] = None
     period_end: Optional[date] = None


@dataclass
class InvoiceDraft:
     period: BillingPeriod
     items: List[LineItem] = field(default_factory=list)
     subtotal: Decimal = ZERO
     discount_amount: Decimal = ZERO
     tax_amount: Decimal = ZERO
     total_amount: Decimal = ZERO


def _format_quantity(value: Decimal) -> str:
     return format(Decimal(value).normalize(), "f")


def build_invoice_draft(
     lease,
     fee_ledger: FeeLedger,
     usage_totals: Dict[int, UsageTotal],
     period: BillingPeriod,
) -> InvoiceDraft:
     """
     Compose an invoice for one lease period.

     Args:
          lease: Lease (rent_amount, billing_cycle_months, discount_type, discount_value)
          fee_ledger: Active fees of the lease
          usage_totals: fee_id -> summed usage for the period's months
          period: Inclusive period being billed

     Returns:
          InvoiceDraft with items and totals; total = subtotal - discount
     """
     cycle = Decimal(lease.billing_cycle_months)
     draft = InvoiceDraft(period=period)

     rent = Decimal(lease.rent_amount)
     draft.items.append(LineItem(
          type=InvoiceItemType.RENT,
          name="Rent",
          quantity=cycle,
          unit_price=rent,
          amount=to_money(cycle * rent),
          description=f"Rent {period.start.isoformat()} to {period.end.isoformat()}",
          period_start=period.start,
          period_end=period.end,
     ))

     for fee in fee_ledger.fixed_fees:
          fee_amount = Decimal(fee.amount or 0)
          draft.items.append(LineItem(
               type=InvoiceItemType.FIXED_FEE,
               name=fee.name,
               quantity=cycle,
               unit_price=fee_amount,
               amount=to_money(cycle * fee_amount),
               fee_id=fee.id,
               period_start=period.start,
               period_end=period.end,
          ))

     for fee in fee_ledger.variable_fees:
          usage = usage_totals.get(fee.id)
          if usage is None or usage.quantity <= 0:
               continue
          # amount is the sum of per-record totals fixed at metering time
          draft.items.append(LineItem(
               type=InvoiceItemType.VARIABLE_FEE,
               name=fee.name,
               quantity=usage.quantity,
               unit_price=Decimal(fee.unit_price or 0),
               amount=to_money(usage.amount),
               fee_id=fee.id,
               description=f"{_format_quantity(usage.quantity)} {fee.billing_unit or 'units'}",
               period_start=period.start,
               period_end=period.end,
          ))

     draft.subtotal = to_money(sum((item.amount for item in draft.items), ZERO))

     draft.discount_amount = calculate_discount(draft.subtotal, lease.discount_type, lease.discount_value)
     if draft.discount_amount > 0:
          draft.items.append(LineItem(
               type=InvoiceItemType.DISCOUNT,
               name="Discount",
               quantity=Decimal(1),
               unit_price=-draft.discount_amount,
               amount=-draft.discount_amount,
               description=_describe_discount(lease),
          ))
     else:
          draft.discount_amount = ZERO

     draft.tax_amount = ZERO
     draft.total_amount = draft.subtotal - draft.discount_amount
     return draft


def _describe_discount(lease) -> str:
     value = _format_quantity(Decimal(lease.discount_value))
     if DiscountType(lease.discount_type) == DiscountType.PERCENT:
          return f"{value}% discount"
     return f"Fixed discount of {value}"
