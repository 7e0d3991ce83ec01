# models/invoice.py
import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
     Column, Integer, String, Numeric, Date, DateTime, Text, ForeignKey, Enum, UniqueConstraint, func,
)
from sqlalchemy.orm import relationship
from .base import Base


class InvoiceStatus(str, enum.Enum):
     """Enumeration for invoice payment status."""
     UNPAID = "UNPAID"
     PAID = "PAID"
     OVERDUE = "OVERDUE"
     CANCELLED = "CANCELLED"


class Invoice(Base):
     """
     Invoice model - one billing period of a lease.
     
     Holds the totals of its line items; the items themselves are
     written in the same transaction and never edited afterwards.
     """
     __tablename__ = "invoices"
     __table_args__ = (
          UniqueConstraint("lease_id", "period_start", "period_end", name="uq_invoices_lease_period"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     
     # Foreign keys
     lease_id = Column(
          Integer, 
          ForeignKey("leases.id", ondelete="CASCADE"), 
          nullable=False,
          index=True
     )
     
     # Invoice details
     invoice_number = Column(String(32), nullable=False, unique=True, index=True)
     period_start = Column(Date, nullable=False)
     period_end = Column(Date, nullable=False, index=True)
     issue_date = Column(Date, nullable=False)
     due_date = Column(Date, nullable=False, index=True)

     subtotal = Column(Numeric(12, 2), nullable=False)
     discount_amount = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
     tax_amount = Column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)
     total_amount = Column(Numeric(12, 2), nullable=False)

     status = Column(
          Enum(InvoiceStatus, name="invoice_status", create_constraint=True),
          default=InvoiceStatus.UNPAID,
          nullable=False,
          index=True
     )

     # Payment
     paid_at = Column(DateTime, nullable=True)
     paid_amount = Column(Numeric(12, 2), nullable=True)
     payment_method = Column(String(50), nullable=True)

     notes = Column(Text, nullable=True)
     
     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)
     
     # Relationships
     lease = relationship("Lease", back_populates="invoices")
     items = relationship(
          "InvoiceItem",
          back_populates="invoice",
          cascade="all, delete-orphan",
          order_by="InvoiceItem.id",
     )
     
     def __repr__(self):
          return (
               f"<Invoice(id={self.id}, number='{self.invoice_number}', total={self.total_amount}, "
               f"status='{self.status.value}', period={self.period_start}..{self.period_end})>"
          )

     def is_overdue(self, today: Optional[date] = None) -> bool:
          """Check if invoice is past due date and unpaid."""
          today = today or date.today()
          return self.status == InvoiceStatus.UNPAID and self.due_date < today
