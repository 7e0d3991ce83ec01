# models/invoice_sequence.py
from sqlalchemy import Column, Integer, UniqueConstraint
from .base import Base


class InvoiceSequence(Base):
     """
     Per-month invoice number counter.

     Advanced with a single UPDATE ... SET last_value = last_value + 1 so
     concurrent invoice runs never hand out the same number.
     """
     __table_args__ = (
          UniqueConstraint("year", "month", name="uq_invoice_sequences_year_month"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     year = Column(Integer, nullable=False)
     month = Column(Integer, nullable=False)
     last_value = Column(Integer, default=0, nullable=False)

     def __repr__(self):
          return f"<InvoiceSequence({self.year}-{self.month:02d}, last_value={self.last_value})>"
