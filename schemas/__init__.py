from .invoice import (
     GenerateInvoiceRequest,
     PayInvoiceRequest,
     InvoiceItemResponse,
     InvoiceResponse,
     InvoiceListResponse,
     BillingRunResponse,
     OverdueSweepResponse,
     BillingStatsResponse,
)
from .lease_fee import LeaseFeeCreate, LeaseFeeUpdate, LeaseFeeResponse
from .usage import (
     RecordUsageRequest,
     BulkRecordUsageRequest,
     UsageRecordResponse,
     BulkUsageResponse,
     UsageSummaryItem,
)

__all__ = [
     "GenerateInvoiceRequest",
     "PayInvoiceRequest",
     "InvoiceItemResponse",
     "InvoiceResponse",
     "InvoiceListResponse",
     "BillingRunResponse",
     "OverdueSweepResponse",
     "BillingStatsResponse",
     "LeaseFeeCreate",
     "LeaseFeeUpdate",
     "LeaseFeeResponse",
     "RecordUsageRequest",
     "BulkRecordUsageRequest",
     "UsageRecordResponse",
     "BulkUsageResponse",
     "UsageSummaryItem",
]
