# models/property.py
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Property(Base):
     """
     Property model - a building managed by a landlord.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_name = Column(String(255), nullable=False)
     landlord_id = Column(Integer, nullable=True, index=True)
     
     # Address
     street = Column(String(255), nullable=True)
     city = Column(String(100), nullable=True)
     province = Column(String(100), nullable=True)
     
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     property_units = relationship("PropertyUnit", back_populates="property", cascade="all, delete-orphan")
     leases = relationship("Lease", back_populates="property")
     
     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.property_name}')>"
