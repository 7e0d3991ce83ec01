from .exceptions import (
     BillingError,
     NotFoundError,
     InvalidStateError,
     DuplicateInvoiceError,
     ValidationError,
)
from .invoice_service import InvoiceService
from .invoice_lifecycle import mark_invoice_as_paid, update_overdue_invoices
from .billing_runner import BillingRunResult, generate_invoices_for_today
from .usage_service import UsageEntry, record_usage, bulk_record_usage

__all__ = [
     "BillingError",
     "NotFoundError",
     "InvalidStateError",
     "DuplicateInvoiceError",
     "ValidationError",
     "InvoiceService",
     "mark_invoice_as_paid",
     "update_overdue_invoices",
     "BillingRunResult",
     "generate_invoices_for_today",
     "UsageEntry",
     "record_usage",
     "bulk_record_usage",
]
