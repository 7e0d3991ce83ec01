# services/exceptions.py
"""
Errors raised by the billing services.

Routers let these propagate; main.py maps them onto HTTP status codes.
"""


class BillingError(Exception):
     """Base class for billing failures."""

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class NotFoundError(BillingError):
     """Lease, fee, invoice or usage record does not exist."""


class InvalidStateError(BillingError):
     """Entity exists but is in the wrong state for the operation."""


class DuplicateInvoiceError(BillingError):
     """An invoice already covers the requested lease period."""


class ValidationError(BillingError, ValueError):
     """Malformed input (bad period, missing fee pricing, ...)."""
