"""Tests for time tracking"""


def _entry(client, headers, **fields):
    payload = {"startTime": "2025-03-12T08:00:00", "description": "Rohbau"}
    payload.update(fields)
    response = client.post("/time-entries", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestTimeEntries:
    def test_duration_is_derived_from_start_and_end(self, client, alice):
        headers, craftsman_id = alice

        entry = _entry(client, headers, endTime="2025-03-12T10:30:00")

        assert entry["craftsmanId"] == craftsman_id
        assert entry["durationMinutes"] == 150
        assert entry["startTime"].startswith("2025-03-12T07:00:00")
        assert entry["isBillable"] is True

    def test_explicit_duration_is_kept(self, client, alice):
        headers, _ = alice
        entry = _entry(client, headers, endTime="2025-03-12T10:00:00", durationMinutes=90)
        assert entry["durationMinutes"] == 90

    def test_customer_work_is_always_billable(self, client, alice):
        headers, _ = alice
        customer = client.post("/customers", json={"name": "Frau Klein"}, headers=headers).json()["id"]

        entry = _entry(client, headers, customerId=customer, isBillable=False)
        internal = _entry(client, headers, isBillable=False)

        assert entry["isBillable"] is True
        assert internal["isBillable"] is False

    def test_start_time_is_required(self, client, alice):
        headers, _ = alice
        assert client.post("/time-entries", json={"description": "x"}, headers=headers).status_code == 400

    def test_end_before_start_is_rejected(self, client, alice):
        headers, _ = alice
        response = client.post(
            "/time-entries",
            json={"startTime": "2025-03-12T10:00:00", "endTime": "2025-03-12T09:00:00"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_list_latest_first(self, client, alice):
        headers, _ = alice
        _entry(client, headers, startTime="2025-03-10T08:00:00")
        _entry(client, headers, startTime="2025-03-12T08:00:00")

        entries = client.get("/time-entries", headers=headers).json()

        assert [e["startTime"][:10] for e in entries] == ["2025-03-12", "2025-03-10"]

    def test_tenant_isolation(self, client, alice, bob):
        alice_headers, _ = alice
        bob_headers, _ = bob
        customer = client.post(
            "/customers", json={"name": "Frau Klein"}, headers=alice_headers
        ).json()["id"]
        _entry(client, alice_headers)

        assert client.get("/time-entries", headers=bob_headers).json() == []
        response = client.post(
            "/time-entries",
            json={"startTime": "2025-03-12T08:00:00", "customerId": customer},
            headers=bob_headers,
        )
        assert response.status_code == 404
