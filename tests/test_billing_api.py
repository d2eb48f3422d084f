"""Tests for quotes, invoices and quote conversion"""

from datetime import datetime

import pytest

from zimmr.domain.billing.repository import InvoiceRepository, generate_invoice_number
from zimmr.domain.billing.service import compute_totals
from zimmr.models import Craftsman, Invoice

MATERIALS = [
    {"name": "Kupferrohr", "unit": "m", "quantity": 2, "unitPrice": 50.0},
    {"name": "Arbeitszeit", "unit": "h", "quantity": 1, "unitPrice": 100.0},
]


def _quote(client, headers, **fields):
    payload = {"materials": MATERIALS, "notes": "Bad sanieren"}
    payload.update(fields)
    response = client.post("/quotes", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestTotals:
    def test_compute_totals(self):
        totals = compute_totals(
            [{"quantity": 3, "unit_price": 19.99}, {"quantity": 0.5, "unit_price": 80}], 0.19
        )
        assert totals == {"amount": 99.97, "tax_amount": 18.99, "total_amount": 118.96}

    def test_no_items(self):
        assert compute_totals([], 0.19) == {"amount": 0, "tax_amount": 0, "total_amount": 0}


class TestQuotes:
    def test_totals_are_computed_server_side(self, client, alice):
        headers, craftsman_id = alice
        quote = _quote(client, headers, amount=1, totalAmount=1)

        assert quote["craftsmanId"] == craftsman_id
        assert quote["status"] == "draft"
        assert quote["amount"] == 200.0
        assert quote["taxAmount"] == 38.0
        assert quote["totalAmount"] == 238.0
        assert [m["name"] for m in quote["materials"]] == ["Kupferrohr", "Arbeitszeit"]

    def test_update_replaces_items_and_recomputes(self, client, alice):
        headers, _ = alice
        quote_id = _quote(client, headers)["id"]

        response = client.put(
            f"/quotes/{quote_id}",
            json={"taxRate": 0.07, "materials": [{"name": "Fliesen", "quantity": 10, "unitPrice": 10}]},
            headers=headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert len(body["materials"]) == 1
        assert body["amount"] == 100.0
        assert body["taxAmount"] == 7.0
        assert body["totalAmount"] == 107.0

    def test_invalid_line_item(self, client, alice):
        headers, _ = alice
        response = client.post(
            "/quotes", json={"materials": [{"name": "x", "quantity": -1}]}, headers=headers
        )
        assert response.status_code == 400

    def test_foreign_quote_is_not_found(self, client, alice, bob):
        alice_headers, _ = alice
        bob_headers, _ = bob
        quote_id = _quote(client, alice_headers)["id"]

        assert client.get(f"/quotes/{quote_id}", headers=bob_headers).status_code == 404
        assert client.delete(f"/quotes/{quote_id}", headers=bob_headers).status_code == 404
        assert (
            client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=bob_headers).status_code
            == 404
        )
        assert client.get("/quotes", headers=bob_headers).json() == []

    def test_delete(self, client, alice):
        headers, _ = alice
        quote_id = _quote(client, headers)["id"]

        assert client.delete(f"/quotes/{quote_id}", headers=headers).status_code == 200
        assert client.get(f"/quotes/{quote_id}", headers=headers).status_code == 404


class TestConvertToInvoice:
    def test_conversion_copies_quote(self, client, alice):
        headers, craftsman_id = alice
        quote = _quote(client, headers)

        response = client.post(f"/quotes/{quote['id']}/convert-to-invoice", headers=headers)

        assert response.status_code == 201
        invoice = response.json()
        assert invoice["quoteId"] == quote["id"]
        assert invoice["craftsmanId"] == craftsman_id
        assert invoice["status"] == "draft"
        assert invoice["totalAmount"] == quote["totalAmount"]
        assert invoice["invoiceNumber"] == f"INV-{datetime.now().year}-0001"
        assert len(invoice["materials"]) == 2

        converted = client.get(f"/quotes/{quote['id']}", headers=headers).json()
        assert converted["status"] == "converted"
        assert converted["invoiceId"] == invoice["id"]

    def test_quote_converts_only_once(self, client, alice):
        headers, _ = alice
        quote_id = _quote(client, headers)["id"]

        assert client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=headers).status_code == 201
        second = client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=headers)

        assert second.status_code == 400
        assert len(client.get("/invoices", headers=headers).json()) == 1

    def test_converted_quote_cannot_be_deleted(self, client, alice):
        headers, _ = alice
        quote_id = _quote(client, headers)["id"]
        client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=headers)

        assert client.delete(f"/quotes/{quote_id}", headers=headers).status_code == 400

    def test_deleting_invoice_releases_quote(self, client, alice):
        """The source quote can be converted again, or deleted, once its invoice is gone"""
        headers, _ = alice
        quote_id = _quote(client, headers)["id"]
        invoice = client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=headers).json()

        assert client.delete(f"/invoices/{invoice['id']}", headers=headers).status_code == 200

        released = client.get(f"/quotes/{quote_id}", headers=headers).json()
        assert released["status"] == "accepted"
        assert released["invoiceId"] is None

        again = client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=headers)
        assert again.status_code == 201
        assert again.json()["quoteId"] == quote_id

    def test_released_quote_can_be_deleted(self, client, alice):
        headers, _ = alice
        quote_id = _quote(client, headers)["id"]
        invoice = client.post(f"/quotes/{quote_id}/convert-to-invoice", headers=headers).json()
        client.delete(f"/invoices/{invoice['id']}", headers=headers)

        assert client.delete(f"/quotes/{quote_id}", headers=headers).status_code == 200
        assert client.get(f"/quotes/{quote_id}", headers=headers).status_code == 404


class TestInvoices:
    def test_numbers_are_sequential_per_tenant(self, client, alice, bob):
        alice_headers, _ = alice
        bob_headers, _ = bob
        year = datetime.now().year

        first = client.post("/invoices", json={"materials": MATERIALS}, headers=alice_headers).json()
        second = client.post("/invoices", json={"materials": MATERIALS}, headers=alice_headers).json()
        other = client.post("/invoices", json={"materials": MATERIALS}, headers=bob_headers).json()

        assert first["invoiceNumber"] == f"INV-{year}-0001"
        assert second["invoiceNumber"] == f"INV-{year}-0002"
        assert other["invoiceNumber"] == f"INV-{year}-0001"

    def test_update_status_and_due_date(self, client, alice):
        headers, _ = alice
        invoice_id = client.post("/invoices", json={"materials": MATERIALS}, headers=headers).json()["id"]

        response = client.put(
            f"/invoices/{invoice_id}",
            json={"status": "paid", "dueDate": "2025-04-01T00:00:00Z"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "paid"
        assert response.json()["dueDate"].startswith("2025-04-01")
        assert response.json()["totalAmount"] == 238.0

    def test_foreign_invoice_is_not_found(self, client, alice, bob):
        alice_headers, _ = alice
        bob_headers, _ = bob
        invoice_id = client.post(
            "/invoices", json={"materials": MATERIALS}, headers=alice_headers
        ).json()["id"]

        assert client.get(f"/invoices/{invoice_id}", headers=bob_headers).status_code == 404
        assert client.put(
            f"/invoices/{invoice_id}", json={"status": "paid"}, headers=bob_headers
        ).status_code == 404
        assert client.delete(f"/invoices/{invoice_id}", headers=bob_headers).status_code == 404


class TestInvoiceNumbering:
    @pytest.fixture
    def craftsman(self, db_session):
        craftsman = Craftsman(user_id="user-n", name="N")
        db_session.add(craftsman)
        db_session.commit()
        return craftsman

    def test_skips_numbers_already_taken(self, db_session, craftsman):
        year = 2025
        for number in (f"INV-{year}-0002",):
            db_session.add(Invoice(craftsman_id=craftsman.id, invoice_number=number))
        db_session.commit()

        repo = InvoiceRepository(db_session)
        assert generate_invoice_number(repo, craftsman.id, now=datetime(year, 6, 1)) == f"INV-{year}-0003"

    def test_new_year_restarts_sequence(self, db_session, craftsman):
        db_session.add(Invoice(craftsman_id=craftsman.id, invoice_number="INV-2024-0007"))
        db_session.commit()

        repo = InvoiceRepository(db_session)
        assert generate_invoice_number(repo, craftsman.id, now=datetime(2025, 1, 2)) == "INV-2025-0001"
