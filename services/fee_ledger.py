# services/fee_ledger.py
from typing import Iterable, List

from sqlalchemy.orm import Session

from models.lease_fee import FeeType, LeaseFee
from .billing_store import find_active_fees_for_lease


class FeeLedger:
     """Read-only view over the active fees of one lease, split by fee type."""

     def __init__(self, fees: Iterable[LeaseFee]):
          self._fees = sorted((fee for fee in fees if fee.is_active), key=lambda fee: fee.id or 0)

     @classmethod
     def for_lease(cls, db: Session, lease_id: int) -> "FeeLedger":
          return cls(find_active_fees_for_lease(db, lease_id))

     @property
     def fees(self) -> List[LeaseFee]:
          return list(self._fees)

     @property
     def fixed_fees(self) -> List[LeaseFee]:
          return [fee for fee in self._fees if fee.type == FeeType.FIXED]

     @property
     def variable_fees(self) -> List[LeaseFee]:
          return [fee for fee in self._fees if fee.type == FeeType.VARIABLE]

     def __len__(self) -> int:
          return len(self._fees)
