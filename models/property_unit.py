# models/property_unit.py
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class PropertyUnit(Base):
     """
     PropertyUnit model - individual rentable units within a property.
     """
     __tablename__ = "property_units"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
     
     unit_number = Column(String(50), nullable=False)
     unit_type = Column(String(100), nullable=True)
     status = Column(String(50), default="vacant", nullable=False)  # vacant, occupied

     # Relationships
     property = relationship("Property", back_populates="property_units")
     leases = relationship("Lease", back_populates="property_unit")
     
     def __repr__(self):
          return f"<PropertyUnit(id={self.id}, unit_number='{self.unit_number}', status='{self.status}')>"
