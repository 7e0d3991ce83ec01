# services/lease_fee_service.py
"""
Lease fee management: the fixed and variable charges billed alongside rent.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from models import LeaseFee
from models.lease_fee import FeeType
from . import billing_store as store
from .exceptions import InvalidStateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _validate_pricing(fee_type: FeeType, amount: Optional[Decimal], unit_price: Optional[Decimal],
                      billing_unit: Optional[str]) -> None:
     if fee_type == FeeType.FIXED and amount is None:
          raise ValidationError("FIXED fees require an amount")
     if fee_type == FeeType.VARIABLE and (unit_price is None or not billing_unit):
          raise ValidationError("VARIABLE fees require unit_price and billing_unit")


def create_lease_fee(
     db: Session,
     lease_id: int,
     name: str,
     fee_type: FeeType,
     amount: Optional[Decimal] = None,
     unit_price: Optional[Decimal] = None,
     billing_unit: Optional[str] = None,
     is_mandatory: bool = True,
     is_active: bool = True,
) -> LeaseFee:
     if store.find_lease(db, lease_id) is None:
          raise NotFoundError(f"Lease with ID {lease_id} not found")

     fee_type = FeeType(fee_type)
     _validate_pricing(fee_type, amount, unit_price, billing_unit)

     fee = LeaseFee(
          lease_id=lease_id,
          name=name,
          type=fee_type,
          amount=amount,
          unit_price=unit_price,
          billing_unit=billing_unit,
          is_mandatory=is_mandatory,
          is_active=is_active,
     )
     db.add(fee)
     db.flush()
     logger.info("Added %s fee '%s' (id=%s) to lease %s", fee_type.value, name, fee.id, lease_id)
     return fee


def get_lease_fees(db: Session, lease_id: int) -> List[LeaseFee]:
     if store.find_lease(db, lease_id) is None:
          raise NotFoundError(f"Lease with ID {lease_id} not found")
     return store.find_fees_for_lease(db, lease_id)


def update_lease_fee(db: Session, fee_id: int, **changes) -> LeaseFee:
     """
     Apply a partial update. Pricing rules are re-checked against the
     resulting fee, so switching a fee to VARIABLE requires a unit price.
     """
     fee = store.find_fee(db, fee_id)
     if fee is None:
          raise NotFoundError(f"Fee with ID {fee_id} not found")

     for name, value in changes.items():
          setattr(fee, name, value)
     _validate_pricing(FeeType(fee.type), fee.amount, fee.unit_price, fee.billing_unit)

     db.flush()
     return fee


def delete_lease_fee(db: Session, fee_id: int) -> None:
     """
     Delete a fee that was never billed or metered.

     Raises:
          InvalidStateError: Fee is referenced by invoices or usage; deactivate it instead
     """
     fee = store.find_fee(db, fee_id)
     if fee is None:
          raise NotFoundError(f"Fee with ID {fee_id} not found")
     if store.fee_has_history(db, fee_id):
          raise InvalidStateError(
               f"Fee {fee_id} has billing history; set is_active=false instead of deleting it"
          )
     db.delete(fee)
     db.flush()
     logger.info("Deleted fee %s from lease %s", fee_id, fee.lease_id)
