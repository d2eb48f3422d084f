"""Tests for deleting rows that other records still point to, and for error bodies on failures"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from conftest import auth_headers
from zimmr.domain.customers.repository import CustomerRepository
from zimmr.domain.customers.router import get_customer_service
from zimmr.main import app

MATERIALS = [{"name": "Silikon", "unit": "Stk", "quantity": 2, "unitPrice": 8.5}]


@pytest.fixture
def carla(fk_client):
    headers = auth_headers("user-carla", email="carla@example.com", full_name="Carla Braun")
    assert fk_client.get("/profile", headers=headers).status_code == 200
    return headers


def _post(client, path, headers, payload):
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestReferencedRows:
    def test_customer_referenced_by_quote_and_invoice(self, fk_client, carla):
        customer = _post(fk_client, "/customers", carla, {"name": "Familie Roth"})
        quote = _post(fk_client, "/quotes", carla, {"customerId": customer["id"], "materials": MATERIALS})
        invoice = _post(
            fk_client, "/invoices", carla, {"customerId": customer["id"], "materials": MATERIALS}
        )

        response = fk_client.delete(f"/customers/{customer['id']}", headers=carla)

        assert response.status_code == 200, response.text
        assert fk_client.get(f"/quotes/{quote['id']}", headers=carla).json()["customerId"] is None
        assert fk_client.get(f"/invoices/{invoice['id']}", headers=carla).json()["customerId"] is None

    def test_customer_with_appointment_and_note(self, fk_client, carla):
        customer = _post(fk_client, "/customers", carla, {"name": "Herr Vogel"})
        appointment = _post(
            fk_client,
            "/appointments",
            carla,
            {"scheduledAt": "2025-03-12T10:00:00", "customerId": customer["id"]},
        )
        note = _post(
            fk_client,
            "/notes",
            carla,
            {"customerId": customer["id"], "title": "Zugang", "content": "Schlüssel beim Nachbarn"},
        )

        assert fk_client.delete(f"/customers/{customer['id']}", headers=carla).status_code == 200

        kept = fk_client.get(f"/appointments/{appointment['id']}", headers=carla).json()
        assert kept["customerId"] is None
        assert fk_client.get(f"/notes/{note['id']}", headers=carla).status_code == 404

    def test_appointment_referenced_by_invoice(self, fk_client, carla):
        appointment = _post(fk_client, "/appointments", carla, {"scheduledAt": "2025-03-12T10:00:00"})
        invoice = _post(
            fk_client, "/invoices", carla, {"appointmentId": appointment["id"], "materials": MATERIALS}
        )

        response = fk_client.delete(f"/appointments/{appointment['id']}", headers=carla)

        assert response.status_code == 200, response.text
        kept = fk_client.get(f"/invoices/{invoice['id']}", headers=carla).json()
        assert kept["appointmentId"] is None
        assert kept["totalAmount"] == 20.23


class TestErrorBodies:
    def test_database_failure_on_delete(self, client, alice):
        headers, _ = alice
        customer = _post(client, "/customers", headers, {"name": "Frau Klein"})
        failure = OperationalError("DELETE FROM customers", {}, Exception("connection lost"))

        with patch.object(CustomerRepository, "delete", side_effect=failure):
            response = client.delete(f"/customers/{customer['id']}", headers=headers)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "Failed to delete customer"}
        assert client.get(f"/customers/{customer['id']}", headers=headers).status_code == 200

    def test_unexpected_exception(self, client, alice):
        headers, _ = alice

        def broken_service():
            raise RuntimeError("boom")

        app.dependency_overrides[get_customer_service] = broken_service
        response = TestClient(app, raise_server_exceptions=False).get("/customers", headers=headers)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "Server error processing your request"}
