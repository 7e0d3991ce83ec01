from datetime import date
from decimal import Decimal

import pytest

from models import LeaseFee
from models.lease_fee import FeeType
from services import InvoiceService, record_usage
from services.exceptions import InvalidStateError, NotFoundError, ValidationError
from services.lease_fee_service import (
     create_lease_fee,
     delete_lease_fee,
     get_lease_fees,
     update_lease_fee,
)


def test_create_fixed_and_variable_fees(db_session, lease):
     dues = create_lease_fee(db_session, lease.id, "Association Dues", FeeType.FIXED, amount=Decimal("50.00"))
     power = create_lease_fee(
          db_session, lease.id, "Electricity", "VARIABLE", unit_price=Decimal("0.15"), billing_unit="kWh"
     )

     assert dues.type == FeeType.FIXED
     assert power.type == FeeType.VARIABLE
     assert {fee.id for fee in get_lease_fees(db_session, lease.id)} == {dues.id, power.id}


def test_create_fee_validation(db_session, lease):
     with pytest.raises(ValidationError):
          create_lease_fee(db_session, lease.id, "Dues", FeeType.FIXED)
     with pytest.raises(ValidationError):
          create_lease_fee(db_session, lease.id, "Water", FeeType.VARIABLE, unit_price=Decimal("2"))
     with pytest.raises(NotFoundError):
          create_lease_fee(db_session, 999, "Dues", FeeType.FIXED, amount=Decimal("1"))


def test_update_fee_rechecks_pricing(db_session, lease):
     fee = create_lease_fee(db_session, lease.id, "Dues", FeeType.FIXED, amount=Decimal("50.00"))

     updated = update_lease_fee(db_session, fee.id, amount=Decimal("60.00"), is_active=False)
     assert updated.amount == Decimal("60.00")
     assert updated.is_active is False

     with pytest.raises(ValidationError):
          update_lease_fee(db_session, fee.id, type=FeeType.VARIABLE)
     with pytest.raises(NotFoundError):
          update_lease_fee(db_session, 999, name="x")


def test_delete_unused_fee(db_session, lease):
     fee = create_lease_fee(db_session, lease.id, "Dues", FeeType.FIXED, amount=Decimal("50.00"))

     delete_lease_fee(db_session, fee.id)

     assert db_session.query(LeaseFee).count() == 0


def test_fee_with_history_cannot_be_deleted(db_session, lease):
     billed = create_lease_fee(db_session, lease.id, "Dues", FeeType.FIXED, amount=Decimal("50.00"))
     metered = create_lease_fee(
          db_session, lease.id, "Electricity", FeeType.VARIABLE, unit_price=Decimal("0.15"), billing_unit="kWh"
     )
     InvoiceService(db_session).generate_invoice_for_lease(lease.id, today=date(2025, 1, 1))
     record_usage(db_session, lease.id, metered.id, Decimal("10"), date(2025, 2, 1))

     for fee in (billed, metered):
          with pytest.raises(InvalidStateError):
               delete_lease_fee(db_session, fee.id)
     assert db_session.query(LeaseFee).count() == 2
