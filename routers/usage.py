# routers/usage.py
"""
Usage tracking routes for VARIABLE fees (electricity, water, ...).
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from schemas.usage import (
     RecordUsageRequest,
     BulkRecordUsageRequest,
     UsageRecordResponse,
     BulkUsageResponse,
     UsageSummaryItem,
)
from services import usage_service
from services.exceptions import ValidationError

router = APIRouter(prefix="/api", tags=["usage"])


@router.post(
     "/leases/{lease_id}/usage",
     response_model=UsageRecordResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record usage for a variable fee"
)
def record_usage(
     lease_id: int,
     body: RecordUsageRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Record the metered usage of a fee for a month. Submitting again for the
     same fee and month replaces the earlier reading.
     """
     record = usage_service.record_usage(
          db,
          lease_id,
          body.fee_id,
          body.usage_value,
          body.period_month,
          notes=body.notes,
     )
     return UsageRecordResponse.model_validate(record)


@router.post(
     "/leases/{lease_id}/usage/bulk",
     response_model=BulkUsageResponse,
     summary="Bulk record usage for multiple fees"
)
def bulk_record_usage(
     lease_id: int,
     body: BulkRecordUsageRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Entries that fail validation are skipped; **results** lists only the
     readings that were stored.
     """
     records = usage_service.bulk_record_usage(db, lease_id, body.usage_data)
     return BulkUsageResponse(results=[UsageRecordResponse.model_validate(r) for r in records])


@router.get(
     "/leases/{lease_id}/usage",
     response_model=List[UsageRecordResponse],
     summary="Get usage records for a lease"
)
def get_usage_for_lease(
     lease_id: int,
     period_start: Optional[date] = Query(None, description="Start of period (inclusive)"),
     period_end: Optional[date] = Query(None, description="End of period (inclusive)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     if period_start and period_end:
          records = usage_service.get_usage_for_period(db, lease_id, period_start, period_end)
     elif period_start or period_end:
          raise ValidationError("period_start and period_end must be given together")
     else:
          records = usage_service.get_usage_for_lease(db, lease_id)
     return [UsageRecordResponse.model_validate(r) for r in records]


@router.get(
     "/leases/{lease_id}/usage/summary",
     response_model=List[UsageSummaryItem],
     summary="Get usage summary for a period"
)
def get_usage_summary(
     lease_id: int,
     period_start: date = Query(..., description="Start of period (inclusive)"),
     period_end: date = Query(..., description="End of period (inclusive)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return [
          UsageSummaryItem(**row)
          for row in usage_service.get_usage_summary(db, lease_id, period_start, period_end)
     ]


@router.delete(
     "/usage/{usage_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete a usage record"
)
def delete_usage_record(
     usage_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     usage_service.delete_usage_record(db, usage_id)
     return None
