from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from config import settings
from database import get_session
from dependencies import verify_token
from main import app
from models import LeaseStatus
from models.lease_fee import FeeType


@pytest.fixture
def client(db_session):
     def _get_session():
          yield db_session
          db_session.commit()

     app.dependency_overrides[get_session] = _get_session
     app.dependency_overrides[verify_token] = lambda: {"sub": "admin"}
     with TestClient(app) as test_client:
          yield test_client
     app.dependency_overrides.clear()


def test_health(client):
     assert client.get("/api/health").json() == {"status": "ok"}


def test_requires_bearer_token(db_session):
     app.dependency_overrides[get_session] = lambda: db_session
     try:
          with TestClient(app) as anonymous:
               assert anonymous.get("/api/invoices/1").status_code == 401

               bad = anonymous.get("/api/invoices/1", headers={"Authorization": "Bearer not-a-jwt"})
               assert bad.status_code == 403

               token = jwt.encode({"sub": "admin"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
               ok = anonymous.get("/api/invoices/1", headers={"Authorization": f"Bearer {token}"})
               assert ok.status_code == 404
     finally:
          app.dependency_overrides.clear()


def test_generate_and_fetch_invoice(client, lease, make_fee):
     make_fee(lease, "Association Dues", amount=Decimal("50.00"))
     make_fee(lease, "Parking", amount=Decimal("25.00"))

     response = client.post(f"/api/leases/{lease.id}/invoices/generate")
     assert response.status_code == 201
     body = response.json()
     assert Decimal(body["total_amount"]) == Decimal("1075.00")
     assert body["period_start"] == "2025-01-01"
     assert body["period_end"] == "2025-01-31"
     assert body["status"] == "UNPAID"
     assert body["tenant_name"] == "John Doe"
     assert body["unit_number"] == "Unit 101"
     assert len(body["items"]) == 3

     fetched = client.get(f"/api/invoices/{body['id']}")
     assert fetched.status_code == 200
     assert fetched.json()["invoice_number"] == body["invoice_number"]

     listed = client.get(f"/api/leases/{lease.id}/invoices").json()
     assert listed["total"] == 1


def test_generate_duplicate_period_conflict(client, lease):
     period = {"period_start": "2025-06-01", "period_end": "2025-06-30"}
     assert client.post(f"/api/leases/{lease.id}/invoices/generate", json=period).status_code == 201

     again = client.post(f"/api/leases/{lease.id}/invoices/generate", json=period)
     assert again.status_code == 409
     assert "already exists" in again.json()["detail"]


def test_generate_error_mapping(client, make_lease):
     draft = make_lease(status=LeaseStatus.DRAFT)
     assert client.post(f"/api/leases/{draft.id}/invoices/generate").status_code == 409
     assert client.post("/api/leases/999/invoices/generate").status_code == 404

     half_period = client.post(
          f"/api/leases/{draft.id}/invoices/generate", json={"period_start": "2025-06-01"}
     )
     assert half_period.status_code == 422


def test_pay_invoice(client, lease):
     invoice_id = client.post(f"/api/leases/{lease.id}/invoices/generate").json()["id"]

     paid = client.patch(
          f"/api/invoices/{invoice_id}/pay",
          json={"paid_amount": "1000.00", "payment_method": "BANK_TRANSFER"},
     )
     assert paid.status_code == 200
     assert paid.json()["status"] == "PAID"

     again = client.patch(f"/api/invoices/{invoice_id}/pay", json={"paid_amount": "1000.00"})
     assert again.status_code == 409

     stats = client.get(f"/api/leases/{lease.id}/billing-stats").json()
     assert stats["paid_invoices"] == 1
     assert Decimal(stats["total_paid"]) == Decimal("1000.00")


def test_overdue_sweep_endpoint(client, lease):
     client.post(
          f"/api/leases/{lease.id}/invoices/generate",
          json={"period_start": "2025-01-01", "period_end": "2025-01-31"},
     )
     # issued today, so due in the future
     assert client.post("/api/billing/update-overdue").json() == {"updated": 0}


def test_generate_today_endpoint(client, make_lease):
     lease = make_lease(billing_day=date.today().day)

     body = client.post("/api/billing/generate-today").json()

     assert body["generated"] == 1
     assert body["invoices"][0]["lease_id"] == lease.id
     assert body["failed"] == {}


def test_fee_routes(client, lease):
     created = client.post(
          f"/api/leases/{lease.id}/fees",
          json={"name": "Electricity", "type": "VARIABLE", "unit_price": "0.15", "billing_unit": "kWh"},
     )
     assert created.status_code == 201
     fee_id = created.json()["id"]

     missing_price = client.post(f"/api/leases/{lease.id}/fees", json={"name": "Dues", "type": "FIXED"})
     assert missing_price.status_code == 400

     patched = client.patch(f"/api/fees/{fee_id}", json={"is_active": False})
     assert patched.json()["is_active"] is False

     assert len(client.get(f"/api/leases/{lease.id}/fees").json()) == 1
     assert client.delete(f"/api/fees/{fee_id}").status_code == 204
     assert client.get(f"/api/leases/{lease.id}/fees").json() == []


def test_usage_routes(client, lease, make_fee):
     fee = make_fee(lease, "Electricity", FeeType.VARIABLE, unit_price=Decimal("0.15"), billing_unit="kWh")

     recorded = client.post(
          f"/api/leases/{lease.id}/usage",
          json={"fee_id": fee.id, "usage_value": "100", "period_month": "2025-01-20"},
     )
     assert recorded.status_code == 201
     assert recorded.json()["period_month"] == "2025-01-01"
     assert Decimal(recorded.json()["total_amount"]) == Decimal("15.00")

     bulk = client.post(
          f"/api/leases/{lease.id}/usage/bulk",
          json={"usage_data": [
               {"fee_id": fee.id, "usage_value": "50", "period_month": "2025-02-01"},
               {"fee_id": 9999, "usage_value": "5", "period_month": "2025-02-01"},
          ]},
     )
     assert bulk.status_code == 200
     assert len(bulk.json()["results"]) == 1

     all_usage = client.get(f"/api/leases/{lease.id}/usage").json()
     assert len(all_usage) == 2
     january = client.get(
          f"/api/leases/{lease.id}/usage",
          params={"period_start": "2025-01-01", "period_end": "2025-01-31"},
     ).json()
     assert len(january) == 1
     assert client.get(f"/api/leases/{lease.id}/usage", params={"period_start": "2025-01-01"}).status_code == 400

     summary = client.get(
          f"/api/leases/{lease.id}/usage/summary",
          params={"period_start": "2025-01-01", "period_end": "2025-02-28"},
     ).json()
     assert summary[0]["record_count"] == 2
     assert Decimal(summary[0]["total_amount"]) == Decimal("22.50")

     assert client.delete(f"/api/usage/{january[0]['id']}").status_code == 204
     assert client.delete(f"/api/usage/{january[0]['id']}").status_code == 404
