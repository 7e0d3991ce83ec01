from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from models.invoice_item import InvoiceItemType
from models.lease import DiscountType
from models.lease_fee import FeeType
from services.billing_periods import BillingPeriod
from services.fee_ledger import FeeLedger
from services.invoice_builder import UsageTotal, build_invoice_draft

PERIOD = BillingPeriod(date(2025, 1, 1), date(2025, 1, 31))


def _lease(**overrides):
     values = dict(
          rent_amount=Decimal("1000.00"),
          billing_cycle_months=1,
          discount_type=None,
          discount_value=None,
     )
     values.update(overrides)
     return SimpleNamespace(**values)


def _fee(fee_id, fee_type, **overrides):
     values = dict(
          id=fee_id, name=f"Fee {fee_id}", type=fee_type, is_active=True,
          amount=None, unit_price=None, billing_unit=None,
     )
     values.update(overrides)
     return SimpleNamespace(**values)


def test_rent_and_fixed_fees_sum_exactly():
     fees = FeeLedger([
          _fee(1, FeeType.FIXED, amount=Decimal("50.00")),
          _fee(2, FeeType.FIXED, amount=Decimal("25.00")),
     ])
     for _ in range(3):
          draft = build_invoice_draft(_lease(), fees, {}, PERIOD)
          assert draft.subtotal == Decimal("1075.00")
          assert draft.total_amount == Decimal("1075.00")
     assert [item.type for item in draft.items] == [
          InvoiceItemType.RENT, InvoiceItemType.FIXED_FEE, InvoiceItemType.FIXED_FEE,
     ]


def test_inactive_fees_are_ignored():
     fees = FeeLedger([_fee(1, FeeType.FIXED, amount=Decimal("50.00"), is_active=False)])
     draft = build_invoice_draft(_lease(), fees, {}, PERIOD)
     assert len(draft.items) == 1
     assert draft.subtotal == Decimal("1000.00")


def test_variable_fee_uses_stored_totals_and_skips_zero_usage():
     fees = FeeLedger([
          _fee(1, FeeType.VARIABLE, unit_price=Decimal("0.20"), billing_unit="kWh"),
          _fee(2, FeeType.VARIABLE, unit_price=Decimal("1.00"), billing_unit="m3"),
     ])
     usage = {1: UsageTotal(Decimal("150"), Decimal("22.50"))}
     draft = build_invoice_draft(_lease(), fees, usage, PERIOD)

     variable = [item for item in draft.items if item.type == InvoiceItemType.VARIABLE_FEE]
     assert len(variable) == 1
     assert variable[0].quantity == Decimal("150")
     # stored totals win over quantity x current unit price
     assert variable[0].amount == Decimal("22.50")
     assert variable[0].description == "150 kWh"
     assert draft.subtotal == Decimal("1022.50")


def test_percent_discount_line_is_negative_and_last():
     draft = build_invoice_draft(
          _lease(discount_type=DiscountType.PERCENT, discount_value=Decimal("10")),
          FeeLedger([]), {}, PERIOD,
     )
     assert draft.discount_amount == Decimal("100.00")
     assert draft.total_amount == Decimal("900.00")
     assert draft.items[-1].type == InvoiceItemType.DISCOUNT
     assert draft.items[-1].amount == Decimal("-100.00")
     assert draft.tax_amount == Decimal("0")


def test_fixed_discount_can_make_total_negative():
     draft = build_invoice_draft(
          _lease(rent_amount=Decimal("40.00"), discount_type=DiscountType.FIXED, discount_value=Decimal("50")),
          FeeLedger([]), {}, PERIOD,
     )
     assert draft.total_amount == Decimal("-10.00")


def test_cycle_months_multiply_rent_and_fixed_fees():
     fees = FeeLedger([_fee(1, FeeType.FIXED, amount=Decimal("30.00"))])
     period = BillingPeriod(date(2025, 2, 1), date(2025, 4, 30))
     draft = build_invoice_draft(_lease(rent_amount=Decimal("2000"), billing_cycle_months=3), fees, {}, period)
     assert draft.items[0].quantity == Decimal("3")
     assert draft.items[0].amount == Decimal("6000.00")
     assert draft.items[1].amount == Decimal("90.00")


def test_discount_line_description():
     percent = build_invoice_draft(
          _lease(discount_type="PERCENT", discount_value=Decimal("12.5")), FeeLedger([]), {}, PERIOD,
     )
     fixed = build_invoice_draft(
          _lease(discount_type=DiscountType.FIXED, discount_value=Decimal("50")), FeeLedger([]), {}, PERIOD,
     )
     assert percent.items[-1].description == "12.5% discount"
     assert fixed.items[-1].description == "Fixed discount of 50"
