# models/usage_record.py
from sqlalchemy import Column, Integer, Numeric, Date, DateTime, Text, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base


class UsageRecord(Base):
     """
     Metered usage of a VARIABLE fee for one calendar month.

     One row per (lease, fee, period_month); resubmitted readings overwrite
     the row. total_amount is frozen at record time so later unit price
     changes do not rewrite past charges.
     """
     __table_args__ = (
          UniqueConstraint("lease_id", "fee_id", "period_month", name="uq_usage_records_lease_fee_month"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     fee_id = Column(
          Integer,
          ForeignKey("lease_fees.id", ondelete="NO ACTION"),
          nullable=False,
          index=True
     )
     period_month = Column(Date, nullable=False)  # always the 1st of the month
     usage_value = Column(Numeric(12, 3), nullable=False)
     total_amount = Column(Numeric(12, 2), nullable=False)
     notes = Column(Text, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     lease = relationship("Lease", back_populates="usage_records")
     fee = relationship("LeaseFee", back_populates="usage_records")
     
     def __repr__(self):
          return (
               f"<UsageRecord(id={self.id}, fee_id={self.fee_id}, "
               f"period_month={self.period_month}, usage={self.usage_value})>"
          )
