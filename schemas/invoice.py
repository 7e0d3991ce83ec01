"""
Pydantic schemas for Invoice API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional, List
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models.invoice import InvoiceStatus
from models.invoice_item import InvoiceItemType


class GenerateInvoiceRequest(BaseModel):
     """Optional explicit period, used for backfills and corrections."""
     period_start: Optional[date] = Field(None, description="First day billed (inclusive)")
     period_end: Optional[date] = Field(None, description="Last day billed (inclusive)")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "period_start": "2025-01-01",
                    "period_end": "2025-03-31"
               }
          }
     )

     @model_validator(mode="after")
     def _both_or_neither(self):
          if (self.period_start is None) != (self.period_end is None):
               raise ValueError("period_start and period_end must be given together")
          if self.period_start and self.period_end and self.period_start > self.period_end:
               raise ValueError("period_start must not be after period_end")
          return self

     @property
     def period(self):
          if self.period_start is None:
               return None
          return (self.period_start, self.period_end)


class PayInvoiceRequest(BaseModel):
     """Schema for recording a payment."""
     paid_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Amount paid")
     payment_method: Optional[str] = Field(None, max_length=50)
     paid_at: Optional[datetime] = Field(None, description="Defaults to now")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "paid_amount": 2500.00,
                    "payment_method": "bank_transfer"
               }
          }
     )


class InvoiceItemResponse(BaseModel):
     id: int
     fee_id: Optional[int] = None
     type: InvoiceItemType
     name: str
     description: Optional[str] = None
     quantity: Decimal
     unit_price: Decimal
     amount: Decimal
     period_start: Optional[date] = None
     period_end: Optional[date] = None

     model_config = ConfigDict(from_attributes=True)


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: int
     lease_id: int
     invoice_number: str
     period_start: date
     period_end: date
     issue_date: date
     due_date: date
     subtotal: Decimal
     discount_amount: Decimal
     tax_amount: Decimal
     total_amount: Decimal
     status: InvoiceStatus
     paid_at: Optional[datetime] = None
     paid_amount: Optional[Decimal] = None
     payment_method: Optional[str] = None
     notes: Optional[str] = None
     created_at: Optional[datetime] = None
     items: List[InvoiceItemResponse] = []
     
     # Optional related data
     tenant_name: Optional[str] = None
     tenant_email: Optional[str] = None
     property_name: Optional[str] = None
     unit_number: Optional[str] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "lease_id": 1,
                    "invoice_number": "INV-202502-0001",
                    "period_start": "2025-02-01",
                    "period_end": "2025-04-30",
                    "issue_date": "2025-02-01",
                    "due_date": "2025-02-08",
                    "subtotal": "6000.00",
                    "discount_amount": "0.00",
                    "tax_amount": "0.00",
                    "total_amount": "6000.00",
                    "status": "UNPAID",
                    "items": [],
                    "tenant_name": "John Doe",
                    "tenant_email": "john@example.com",
                    "property_name": "Sunset Condos",
                    "unit_number": "Unit 101"
               }
          }
     )


class InvoiceListResponse(BaseModel):
     invoices: List[InvoiceResponse]
     total: int


class BillingRunResponse(BaseModel):
     """Summary of a billing run; partial failures are reported, not raised."""
     generated: int
     invoices: List[InvoiceResponse]
     skipped: List[int] = []
     failed: Dict[int, str] = {}


class OverdueSweepResponse(BaseModel):
     updated: int


class BillingStatsResponse(BaseModel):
     lease_id: int
     total_invoices: int
     total_billed: Decimal
     total_paid: Decimal
     unpaid_invoices: int
     overdue_invoices: int
     paid_invoices: int
