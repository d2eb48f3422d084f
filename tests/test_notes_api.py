"""Tests for customer notes"""

import pytest


@pytest.fixture
def customer(client, alice):
    headers, _ = alice
    response = client.post("/customers", json={"name": "Familie Roth"}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def _note(client, headers, customer_id, **fields):
    payload = {"customerId": customer_id, "title": "Aufmaß", "content": "Bad 2,4 x 3,1 m"}
    payload.update(fields)
    response = client.post("/notes", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestNotes:
    def test_create_and_get(self, client, alice, customer):
        headers, craftsman_id = alice

        note = _note(client, headers, customer, tags=["bad", "aufmass"])

        assert note["craftsmanId"] == craftsman_id
        assert note["customerId"] == customer
        assert note["tags"] == ["bad", "aufmass"]
        assert note["isPrivate"] is False
        fetched = client.get(f"/notes/{note['id']}", headers=headers).json()
        assert fetched["customerName"] == "Familie Roth"

    @pytest.mark.parametrize("missing", ["customerId", "title", "content"])
    def test_required_fields(self, client, alice, customer, missing):
        headers, _ = alice
        payload = {"customerId": customer, "title": "Aufmaß", "content": "Bad"}
        del payload[missing]

        assert client.post("/notes", json=payload, headers=headers).status_code == 400

    def test_appointment_must_belong_to_customer(self, client, alice, customer):
        headers, _ = alice
        other = client.post("/customers", json={"name": "Herr Vogel"}, headers=headers).json()["id"]
        appointment = client.post(
            "/appointments",
            json={"scheduledAt": "2025-03-12T10:00:00", "customerId": other},
            headers=headers,
        ).json()["id"]

        response = client.post(
            "/notes",
            json={"customerId": customer, "appointmentId": appointment, "title": "x", "content": "y"},
            headers=headers,
        )

        assert response.status_code == 404
        assert _note(client, headers, other, appointmentId=appointment)["appointmentId"] == appointment

    def test_list_filters_and_pagination(self, client, alice, customer):
        headers, _ = alice
        for i in range(3):
            _note(client, headers, customer, title=f"Heizung {i}")
        _note(client, headers, customer, title="Dach", content="Ziegel prüfen")

        page = client.get("/notes", params={"limit": 2}, headers=headers).json()
        assert len(page["notes"]) == 2
        assert page["pagination"] == {
            "page": 1,
            "limit": 2,
            "total": 4,
            "totalPages": 2,
            "hasNext": True,
            "hasPrev": False,
        }

        found = client.get("/notes", params={"search": "ziegel"}, headers=headers).json()
        assert [n["title"] for n in found["notes"]] == ["Dach"]
        assert found["pagination"]["total"] == 1

        unlinked = client.get("/notes", params={"noAppointment": "true"}, headers=headers).json()
        assert unlinked["pagination"]["total"] == 4

    def test_update(self, client, alice, customer):
        headers, _ = alice
        note = _note(client, headers, customer)

        response = client.put(
            f"/notes/{note['id']}", json={"content": "Bad 2,5 x 3,1 m", "isPrivate": True}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["content"] == "Bad 2,5 x 3,1 m"
        assert response.json()["isPrivate"] is True
        assert response.json()["title"] == "Aufmaß"

    def test_empty_title_is_rejected(self, client, alice, customer):
        headers, _ = alice
        note = _note(client, headers, customer)
        assert client.put(f"/notes/{note['id']}", json={"title": ""}, headers=headers).status_code == 400

    def test_delete(self, client, alice, customer):
        headers, _ = alice
        note = _note(client, headers, customer)

        assert client.delete(f"/notes/{note['id']}", headers=headers).status_code == 200
        assert client.get(f"/notes/{note['id']}", headers=headers).status_code == 404

    def test_other_tenants_notes_are_invisible(self, client, alice, bob, customer):
        alice_headers, _ = alice
        bob_headers, _ = bob
        note = _note(client, alice_headers, customer)

        assert client.get("/notes", headers=bob_headers).json()["notes"] == []
        assert client.get(f"/notes/{note['id']}", headers=bob_headers).status_code == 404
        assert client.put(
            f"/notes/{note['id']}", json={"title": "x"}, headers=bob_headers
        ).status_code == 404
        assert client.delete(f"/notes/{note['id']}", headers=bob_headers).status_code == 404
        # Bob cannot attach a note to Alice's customer either
        response = client.post(
            "/notes", json={"customerId": customer, "title": "x", "content": "y"}, headers=bob_headers
        )
        assert response.status_code == 404
