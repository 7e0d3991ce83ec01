# services/discounts.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from models.lease import DiscountType

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal) -> Decimal:
     """Quantize to currency minor units."""
     return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_discount(
     subtotal: Decimal,
     discount_type: Optional[DiscountType],
     discount_value: Optional[Decimal],
) -> Decimal:
     """
     Discount amount for an invoice subtotal.

     PERCENT takes discount_value percent of the subtotal. FIXED returns
     discount_value unchanged and is not capped at the subtotal, so the
     invoice total may go negative.
     """
     if discount_type is None or discount_value is None:
          return ZERO

     discount_type = DiscountType(discount_type)
     if discount_type == DiscountType.PERCENT:
          return to_money(Decimal(subtotal) * Decimal(discount_value) / Decimal(100))
     return to_money(Decimal(discount_value))
