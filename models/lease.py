# models/lease.py
import enum
from sqlalchemy import (
     CheckConstraint, Column, Integer, Numeric, Date, DateTime, Enum, ForeignKey, func,
)
from sqlalchemy.orm import relationship
from .base import Base


class LeaseStatus(str, enum.Enum):
     """Lifecycle of a lease contract. Only ACTIVE leases are billed."""
     DRAFT = "DRAFT"
     ACTIVE = "ACTIVE"
     EXPIRED = "EXPIRED"
     TERMINATED = "TERMINATED"


class DiscountType(str, enum.Enum):
     PERCENT = "PERCENT"
     FIXED = "FIXED"


class Lease(Base):
     """
     Lease model - rental contract between a tenant and a property unit.

     Carries the billing configuration used to build periodic invoices:
     rent, billing day of month, cycle length and an optional discount.
     """
     __tablename__ = "leases"
     __table_args__ = (
          CheckConstraint("billing_day BETWEEN 1 AND 31", name="billing_day_range"),
          CheckConstraint("billing_cycle_months >= 1", name="billing_cycle_positive"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=True)
     property_unit_id = Column(Integer, ForeignKey("property_units.id"), nullable=True)
     tenant_id = Column(Integer, ForeignKey("tenants.tenant_id"), nullable=True)
     
     # Pricing
     rent_amount = Column(Numeric(12, 2), nullable=False)
     deposit_amount = Column(Numeric(12, 2), nullable=True)

     # Billing configuration
     billing_day = Column(Integer, default=1, nullable=False, index=True)
     billing_cycle_months = Column(Integer, default=1, nullable=False)
     discount_type = Column(Enum(DiscountType, name="discount_type", create_constraint=True), nullable=True)
     discount_value = Column(Numeric(12, 2), nullable=True)

     status = Column(
          Enum(LeaseStatus, name="lease_status", create_constraint=True),
          default=LeaseStatus.DRAFT,
          nullable=False,
          index=True
     )
     
     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False)
     
     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="leases")
     property_unit = relationship("PropertyUnit", back_populates="leases")
     tenant = relationship("Tenant", back_populates="leases")
     fees = relationship("LeaseFee", back_populates="lease", cascade="all, delete-orphan")
     usage_records = relationship("UsageRecord", back_populates="lease", cascade="all, delete-orphan")
     invoices = relationship("Invoice", back_populates="lease", cascade="all, delete-orphan")
     
     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, status='{self.status}')>"
