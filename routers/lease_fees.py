# routers/lease_fees.py
"""
Lease fee routes: the fixed and metered charges billed with rent.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from schemas.lease_fee import LeaseFeeCreate, LeaseFeeUpdate, LeaseFeeResponse
from services import lease_fee_service

router = APIRouter(prefix="/api", tags=["lease fees"])


@router.post(
     "/leases/{lease_id}/fees",
     response_model=LeaseFeeResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Add a fee to a lease"
)
def create_lease_fee(
     lease_id: int,
     fee_data: LeaseFeeCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     - **FIXED**: requires **amount** (flat monthly charge)
     - **VARIABLE**: requires **unit_price** and **billing_unit** (metered charge)
     """
     fee = lease_fee_service.create_lease_fee(
          db,
          lease_id,
          name=fee_data.name,
          fee_type=fee_data.type,
          amount=fee_data.amount,
          unit_price=fee_data.unit_price,
          billing_unit=fee_data.billing_unit,
          is_mandatory=fee_data.is_mandatory,
          is_active=fee_data.is_active,
     )
     return LeaseFeeResponse.model_validate(fee)


@router.get(
     "/leases/{lease_id}/fees",
     response_model=List[LeaseFeeResponse],
     summary="Get all fees for a lease"
)
def get_lease_fees(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     fees = lease_fee_service.get_lease_fees(db, lease_id)
     return [LeaseFeeResponse.model_validate(fee) for fee in fees]


@router.patch(
     "/fees/{fee_id}",
     response_model=LeaseFeeResponse,
     summary="Update a lease fee"
)
def update_lease_fee(
     fee_id: int,
     fee_data: LeaseFeeUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Only provided fields are updated. Set **is_active** to false to stop
     billing a fee while keeping its history.
     """
     fee = lease_fee_service.update_lease_fee(db, fee_id, **fee_data.model_dump(exclude_unset=True))
     return LeaseFeeResponse.model_validate(fee)


@router.delete(
     "/fees/{fee_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete a lease fee"
)
def delete_lease_fee(
     fee_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     lease_fee_service.delete_lease_fee(db, fee_id)
     return None
