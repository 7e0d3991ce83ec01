# models/lease_fee.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class FeeType(str, enum.Enum):
     """FIXED fees are a flat monthly amount; VARIABLE fees are metered."""
     FIXED = "FIXED"
     VARIABLE = "VARIABLE"


class LeaseFee(Base):
     """
     Recurring charge attached to a lease on top of rent.

     Inactive fees are skipped by future invoices but kept so past
     invoice items and usage records still resolve.
     """
     __tablename__ = "lease_fees"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     name = Column(String(255), nullable=False)
     type = Column(Enum(FeeType, name="fee_type", create_constraint=True), nullable=False)

     amount = Column(Numeric(12, 2), nullable=True)  # FIXED: flat monthly amount
     unit_price = Column(Numeric(12, 4), nullable=True)  # VARIABLE: price per billing unit
     billing_unit = Column(String(50), nullable=True)  # e.g. kWh, m3

     is_mandatory = Column(Boolean, default=True, nullable=False)
     is_active = Column(Boolean, default=True, nullable=False, index=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     lease = relationship("Lease", back_populates="fees")
     usage_records = relationship("UsageRecord", back_populates="fee")
     
     def __repr__(self):
          return f"<LeaseFee(id={self.id}, lease_id={self.lease_id}, name='{self.name}', type='{self.type}')>"
