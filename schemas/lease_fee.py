"""
Pydantic schemas for lease fees.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models.lease_fee import FeeType


class LeaseFeeCreate(BaseModel):
     """FIXED fees need amount; VARIABLE fees need unit_price and billing_unit."""
     name: str = Field(..., min_length=1, max_length=255)
     type: FeeType
     amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=4)
     billing_unit: Optional[str] = Field(None, max_length=50)
     is_mandatory: bool = True
     is_active: bool = True

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Electricity",
                    "type": "VARIABLE",
                    "unit_price": 0.15,
                    "billing_unit": "kWh"
               }
          }
     )


class LeaseFeeUpdate(BaseModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     type: Optional[FeeType] = None
     amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=4)
     billing_unit: Optional[str] = Field(None, max_length=50)
     is_mandatory: Optional[bool] = None
     is_active: Optional[bool] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "is_active": False
               }
          }
     )


class LeaseFeeResponse(BaseModel):
     id: int
     lease_id: int
     name: str
     type: FeeType
     amount: Optional[Decimal] = None
     unit_price: Optional[Decimal] = None
     billing_unit: Optional[str] = None
     is_mandatory: bool
     is_active: bool
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
