# models/invoice_item.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Text, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class InvoiceItemType(str, enum.Enum):
     RENT = "RENT"
     FIXED_FEE = "FIXED_FEE"
     VARIABLE_FEE = "VARIABLE_FEE"
     DISCOUNT = "DISCOUNT"


class InvoiceItem(Base):
     """
     Line of an invoice. DISCOUNT lines carry a negative amount.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(
          Integer,
          ForeignKey("invoices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     fee_id = Column(Integer, ForeignKey("lease_fees.id", ondelete="NO ACTION"), nullable=True, index=True)
     type = Column(Enum(InvoiceItemType, name="invoice_item_type", create_constraint=True), nullable=False)
     name = Column(String(255), nullable=False)
     description = Column(Text, nullable=True)

     quantity = Column(Numeric(12, 3), nullable=False)
     unit_price = Column(Numeric(12, 4), nullable=False)
     amount = Column(Numeric(12, 2), nullable=False)

     period_start = Column(Date, nullable=True)
     period_end = Column(Date, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     invoice = relationship("Invoice", back_populates="items")
     fee = relationship("LeaseFee")
     
     def __repr__(self):
          return f"<InvoiceItem(id={self.id}, type='{self.type}', amount={self.amount})>"
