# routers/invoices.py
"""
Invoice API routes.

Generation, lookup and payment of lease invoices, plus the two scheduled
jobs (daily billing run and overdue sweep) exposed for admins/schedulers.
Service errors propagate and are mapped to HTTP codes in main.py.
"""
from typing import Optional
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import verify_token
from models import Invoice
from schemas.invoice import (
     GenerateInvoiceRequest,
     PayInvoiceRequest,
     InvoiceItemResponse,
     InvoiceResponse,
     InvoiceListResponse,
     BillingRunResponse,
     OverdueSweepResponse,
     BillingStatsResponse,
)
from services import InvoiceService, generate_invoices_for_today, mark_invoice_as_paid, update_overdue_invoices

router = APIRouter(prefix="/api", tags=["invoices"])


@router.post(
     "/leases/{lease_id}/invoices/generate",
     response_model=InvoiceResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Generate invoice for a lease"
)
def generate_invoice(
     lease_id: int,
     body: Optional[GenerateInvoiceRequest] = Body(None),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Generate the next invoice for an ACTIVE lease.

     - Without a body the period continues from the latest invoice.
     - **period_start** / **period_end** bill an explicit period (backfill).
     - A period that was already invoiced returns 409.
     """
     service = InvoiceService(db)
     invoice = service.generate_invoice_for_lease(lease_id, period_override=body.period if body else None)
     return _build_invoice_response(invoice)


@router.get(
     "/leases/{lease_id}/invoices",
     response_model=InvoiceListResponse,
     summary="Get all invoices for a lease"
)
def get_invoices_for_lease(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     invoices = InvoiceService(db).get_invoices_for_lease(lease_id)
     return InvoiceListResponse(
          invoices=[_build_invoice_response(inv) for inv in invoices],
          total=len(invoices),
     )


@router.get(
     "/leases/{lease_id}/billing-stats",
     response_model=BillingStatsResponse,
     summary="Get billing statistics for a lease"
)
def get_billing_stats(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return BillingStatsResponse(**InvoiceService(db).get_billing_stats(lease_id))


@router.get(
     "/invoices/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by ID"
)
def get_invoice(
     invoice_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Retrieve an invoice with its line items and tenant/property information.
     """
     return _build_invoice_response(InvoiceService(db).get_invoice(invoice_id))


@router.patch(
     "/invoices/{invoice_id}/pay",
     response_model=InvoiceResponse,
     summary="Mark invoice as paid"
)
def pay_invoice(
     invoice_id: int,
     body: PayInvoiceRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Settle an UNPAID or OVERDUE invoice in full. Paying an invoice that is
     already PAID returns 409.
     """
     invoice = mark_invoice_as_paid(
          db,
          invoice_id,
          body.paid_amount,
          payment_method=body.payment_method,
          paid_at=body.paid_at,
     )
     return _build_invoice_response(invoice)


# ---------------------------------------------------------------------------
# Scheduled jobs (admin / scheduler)
# ---------------------------------------------------------------------------

@router.post(
     "/billing/generate-today",
     response_model=BillingRunResponse,
     summary="Generate all invoices due today"
)
def run_billing_for_today(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Bill every ACTIVE lease whose billing day is today. Failures on single
     leases are reported in **failed** and do not stop the run.
     """
     result = generate_invoices_for_today(db)
     return BillingRunResponse(
          generated=result.generated,
          invoices=[_build_invoice_response(inv) for inv in result.invoices],
          skipped=result.skipped,
          failed=result.failed,
     )


@router.post(
     "/billing/update-overdue",
     response_model=OverdueSweepResponse,
     summary="Update overdue invoice statuses"
)
def run_overdue_sweep(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return OverdueSweepResponse(updated=update_overdue_invoices(db))


def _build_invoice_response(invoice: Invoice) -> InvoiceResponse:
     """
     Helper function to build InvoiceResponse with related data.
     """
     lease = invoice.lease
     tenant = lease.tenant if lease else None
     property_name = None
     unit_number = None

     if lease:
          if lease.property:
               property_name = lease.property.property_name
          if lease.property_unit:
               unit_number = lease.property_unit.unit_number
               if property_name is None and lease.property_unit.property:
                    property_name = lease.property_unit.property.property_name

     return InvoiceResponse(
          id=invoice.id,
          lease_id=invoice.lease_id,
          invoice_number=invoice.invoice_number,
          period_start=invoice.period_start,
          period_end=invoice.period_end,
          issue_date=invoice.issue_date,
          due_date=invoice.due_date,
          subtotal=invoice.subtotal,
          discount_amount=invoice.discount_amount,
          tax_amount=invoice.tax_amount,
          total_amount=invoice.total_amount,
          status=invoice.status,
          paid_at=invoice.paid_at,
          paid_amount=invoice.paid_amount,
          payment_method=invoice.payment_method,
          notes=invoice.notes,
          created_at=invoice.created_at,
          items=[InvoiceItemResponse.model_validate(item) for item in invoice.items],
          tenant_name=tenant.full_name if tenant else None,
          tenant_email=tenant.email if tenant else None,
          property_name=property_name,
          unit_number=unit_number,
     )
