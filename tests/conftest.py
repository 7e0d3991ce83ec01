import os

# Point the app at an in-memory database before anything imports database.py
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal

import pytest

from database import SessionLocal, engine
from models import (
     Base, FeeType, Lease, LeaseFee, LeaseStatus, Property, PropertyUnit, Tenant,
)


@pytest.fixture
def db_session():
     """Fresh schema and session for each test."""
     Base.metadata.create_all(bind=engine)
     session = SessionLocal()
     try:
          yield session
     finally:
          session.rollback()
          session.close()
          Base.metadata.drop_all(bind=engine)


@pytest.fixture
def tenant(db_session):
     t = Tenant(first_name="John", last_name="Doe", email="john@example.com")
     db_session.add(t)
     db_session.commit()
     return t


@pytest.fixture
def unit(db_session):
     prop = Property(property_name="Sunset Condos", city="Makati")
     prop.property_units.append(PropertyUnit(unit_number="Unit 101"))
     db_session.add(prop)
     db_session.commit()
     return prop.property_units[0]


@pytest.fixture
def make_lease(db_session, tenant, unit):
     """Factory for leases; ACTIVE, monthly, no discount unless overridden."""
     def _make_lease(**overrides):
          values = dict(
               tenant_id=tenant.tenant_id,
               property_id=unit.property_id,
               property_unit_id=unit.id,
               rent_amount=Decimal("1000.00"),
               billing_day=1,
               billing_cycle_months=1,
               status=LeaseStatus.ACTIVE,
               start_date=date(2025, 1, 1),
               end_date=date(2025, 12, 31),
          )
          values.update(overrides)
          lease = Lease(**values)
          db_session.add(lease)
          db_session.commit()
          return lease
     return _make_lease


@pytest.fixture
def make_fee(db_session):
     def _make_fee(lease, name="Fee", fee_type=FeeType.FIXED, **overrides):
          fee = LeaseFee(lease_id=lease.id, name=name, type=fee_type, **overrides)
          db_session.add(fee)
          db_session.commit()
          return fee
     return _make_fee


@pytest.fixture
def lease(make_lease):
     return make_lease()
