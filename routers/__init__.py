from .invoices import router as invoices_router
from .lease_fees import router as lease_fees_router
from .usage import router as usage_router

__all__ = ["invoices_router", "lease_fees_router", "usage_router"]
