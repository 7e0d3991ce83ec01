# models/__init__.py
from .base import Base
from .tenant import Tenant
from .property import Property
from .property_unit import PropertyUnit
from .lease import Lease, LeaseStatus, DiscountType
from .lease_fee import LeaseFee, FeeType
from .usage_record import UsageRecord
from .invoice import Invoice, InvoiceStatus
from .invoice_item import InvoiceItem, InvoiceItemType
from .invoice_sequence import InvoiceSequence

__all__ = [
     "Base",
     "Tenant",
     "Property",
     "PropertyUnit",
     "Lease",
     "LeaseStatus",
     "DiscountType",
     "LeaseFee",
     "FeeType",
     "UsageRecord",
     "Invoice",
     "InvoiceStatus",
     "InvoiceItem",
     "InvoiceItemType",
     "InvoiceSequence",
]
