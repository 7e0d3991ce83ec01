from datetime import date
from decimal import Decimal

import pytest

from models import UsageRecord
from models.lease_fee import FeeType
from services import UsageEntry, bulk_record_usage, record_usage
from services.exceptions import InvalidStateError, NotFoundError, ValidationError
from services.usage_service import (
     aggregate_usage,
     delete_usage_record,
     get_usage_for_lease,
     get_usage_for_period,
     get_usage_summary,
)


@pytest.fixture
def electricity(lease, make_fee):
     return make_fee(lease, "Electricity", FeeType.VARIABLE, unit_price=Decimal("0.15"), billing_unit="kWh")


def test_record_usage_normalizes_month_and_prices(db_session, lease, electricity):
     record = record_usage(db_session, lease.id, electricity.id, Decimal("150"), date(2025, 3, 17), notes="12345")

     assert record.period_month == date(2025, 3, 1)
     assert record.total_amount == Decimal("22.50")
     assert record.notes == "12345"


def test_record_usage_replaces_same_month(db_session, lease, electricity):
     first = record_usage(db_session, lease.id, electricity.id, Decimal("100"), date(2025, 3, 1), notes="first")
     second = record_usage(db_session, lease.id, electricity.id, Decimal("120"), date(2025, 3, 28))

     assert first.id == second.id
     assert db_session.query(UsageRecord).count() == 1
     assert second.usage_value == Decimal("120")
     assert second.total_amount == Decimal("18.00")
     # notes kept when the resubmission has none
     assert second.notes == "first"


def test_record_usage_rejections(db_session, lease, make_lease, make_fee, electricity):
     fixed = make_fee(lease, "Dues", amount=Decimal("50.00"))
     other_lease = make_lease()
     unpriced = make_fee(lease, "Gas", FeeType.VARIABLE, billing_unit="m3")

     with pytest.raises(ValidationError):
          record_usage(db_session, lease.id, electricity.id, Decimal("-1"), date(2025, 3, 1))
     with pytest.raises(NotFoundError):
          record_usage(db_session, 999, electricity.id, Decimal("1"), date(2025, 3, 1))
     with pytest.raises(NotFoundError):
          record_usage(db_session, other_lease.id, electricity.id, Decimal("1"), date(2025, 3, 1))
     with pytest.raises(InvalidStateError):
          record_usage(db_session, lease.id, fixed.id, Decimal("1"), date(2025, 3, 1))
     with pytest.raises(InvalidStateError):
          record_usage(db_session, lease.id, unpriced.id, Decimal("1"), date(2025, 3, 1))

     assert db_session.query(UsageRecord).count() == 0


def test_bulk_record_skips_bad_entries(db_session, lease, electricity, make_fee):
     fixed = make_fee(lease, "Dues", amount=Decimal("50.00"))
     entries = [
          UsageEntry(electricity.id, Decimal("100"), date(2025, 1, 1)),
          UsageEntry(fixed.id, Decimal("5"), date(2025, 1, 1)),
          UsageEntry(electricity.id, Decimal("-3"), date(2025, 2, 1)),
          UsageEntry(electricity.id, Decimal("80"), date(2025, 2, 1), "estimate"),
     ]

     results = bulk_record_usage(db_session, lease.id, entries)
     db_session.commit()

     assert [r.period_month for r in results] == [date(2025, 1, 1), date(2025, 2, 1)]
     assert db_session.query(UsageRecord).count() == 2


def test_usage_queries_and_summary(db_session, lease, electricity):
     for month, value in ((1, "100"), (2, "50"), (3, "70")):
          record_usage(db_session, lease.id, electricity.id, Decimal(value), date(2025, month, 1))

     assert len(get_usage_for_lease(db_session, lease.id)) == 3
     in_period = get_usage_for_period(db_session, lease.id, date(2025, 1, 15), date(2025, 2, 10))
     assert sorted(r.period_month.month for r in in_period) == [1, 2]

     summary = get_usage_summary(db_session, lease.id, date(2025, 1, 1), date(2025, 2, 28))
     assert summary == [{
          "fee_id": electricity.id,
          "fee_name": "Electricity",
          "billing_unit": "kWh",
          "record_count": 2,
          "total_usage": Decimal("150"),
          "total_amount": Decimal("22.50"),
     }]

     totals = aggregate_usage(db_session, lease.id, [electricity.id], date(2025, 1, 1), date(2025, 2, 28))
     assert totals[electricity.id].quantity == Decimal("150")
     assert totals[electricity.id].amount == Decimal("22.50")


def test_usage_period_validation(db_session, lease):
     with pytest.raises(ValidationError):
          get_usage_for_period(db_session, lease.id, date(2025, 3, 1), date(2025, 1, 1))
     with pytest.raises(NotFoundError):
          get_usage_for_lease(db_session, 999)


def test_delete_usage_record(db_session, lease, electricity):
     record = record_usage(db_session, lease.id, electricity.id, Decimal("10"), date(2025, 1, 1))

     delete_usage_record(db_session, record.id)

     assert db_session.query(UsageRecord).count() == 0
     with pytest.raises(NotFoundError):
          delete_usage_record(db_session, record.id)


def test_bulk_record_skips_malformed_values(db_session, lease, electricity):
     entries = [
          UsageEntry(electricity.id, Decimal("10"), date(2025, 1, 1)),
          UsageEntry(electricity.id, "not-a-number", date(2025, 2, 1)),
          UsageEntry(electricity.id, None, date(2025, 3, 1)),
          UsageEntry(electricity.id, Decimal("20"), date(2025, 4, 1)),
     ]

     results = bulk_record_usage(db_session, lease.id, entries)

     assert [r.usage_value for r in results] == [Decimal("10"), Decimal("20")]
     assert db_session.query(UsageRecord).count() == 2


def test_record_usage_rejects_non_numbers(db_session, lease, electricity):
     for value in ("abc", None, "NaN"):
          with pytest.raises(ValidationError):
               record_usage(db_session, lease.id, electricity.id, value, date(2025, 1, 1))
