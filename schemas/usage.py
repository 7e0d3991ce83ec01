"""
Pydantic schemas for metered usage.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class RecordUsageRequest(BaseModel):
     fee_id: int = Field(..., gt=0, description="VARIABLE fee of the lease")
     usage_value: Decimal = Field(..., ge=0, max_digits=12, decimal_places=3)
     period_month: date = Field(..., description="Any day of the month being metered")
     notes: Optional[str] = Field(None, max_length=1000)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "fee_id": 1,
                    "usage_value": 150.5,
                    "period_month": "2025-10-01",
                    "notes": "Meter reading: 12345"
               }
          }
     )


class BulkRecordUsageRequest(BaseModel):
     usage_data: List[RecordUsageRequest] = Field(..., min_length=1)


class UsageRecordResponse(BaseModel):
     id: int
     lease_id: int
     fee_id: int
     period_month: date
     usage_value: Decimal
     total_amount: Decimal
     notes: Optional[str] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class BulkUsageResponse(BaseModel):
     """Only the entries that were recorded; failed entries are left out."""
     results: List[UsageRecordResponse]


class UsageSummaryItem(BaseModel):
     fee_id: int
     fee_name: Optional[str] = None
     billing_unit: Optional[str] = None
     record_count: int
     total_usage: Decimal
     total_amount: Decimal
