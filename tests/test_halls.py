def test_admin_creates_hall(client, admin_headers):
    response = client.post("/api/halls", json={"name": "Auditorium", "capacity": "200"}, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["name"] == "Auditorium"
    assert data["capacity"] == "200"
    assert data["location"] is None
    assert data["createdAt"]


def test_numeric_capacity_is_kept_as_text(client, admin_headers):
    response = client.post("/api/halls", json={"name": "Lab Hall", "capacity": 45}, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["capacity"] == "45"


def test_hall_requires_name_and_capacity(client, admin_headers):
    assert client.post("/api/halls", json={"capacity": "20"}, headers=admin_headers).status_code == 400
    assert client.post("/api/halls", json={"name": "", "capacity": "20"}, headers=admin_headers).status_code == 400
    assert client.post("/api/halls", json={"name": "Room"}, headers=admin_headers).status_code == 400


def test_faculty_cannot_manage_halls(client, hall, faculty_headers):
    create = client.post("/api/halls", json={"name": "Annex", "capacity": "30"}, headers=faculty_headers)
    assert create.status_code == 403
    assert client.delete(f"/api/halls/{hall['id']}", headers=faculty_headers).status_code == 403


def test_list_halls_newest_first(client, hall, admin_headers, faculty_headers):
    client.post("/api/halls", json={"name": "Seminar Room 2", "capacity": "60"}, headers=admin_headers)

    response = client.get("/api/halls", headers=faculty_headers)
    assert response.status_code == 200
    assert [item["name"] for item in response.json()] == ["Seminar Room 2", "Auditorium"]


def test_list_halls_requires_authentication(client):
    assert client.get("/api/halls").status_code == 401


def test_delete_hall_keeps_its_bookings(client, hall, faculty_headers, admin_headers):
    booking = client.post(
        "/api/bookings",
        json={"hallId": hall["id"], "bookingReason": "Seminar", "bookingDate": "2025-03-10", "period": 2},
        headers=faculty_headers,
    ).json()

    response = client.delete(f"/api/halls/{hall['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert client.get(f"/api/halls/{hall['id']}", headers=admin_headers).status_code == 404

    remaining = client.get(f"/api/bookings/{booking['id']}", headers=admin_headers)
    assert remaining.status_code == 200
    assert remaining.json()["hallId"] == hall["id"]


def test_delete_unknown_hall(client, admin_headers):
    assert client.delete("/api/halls/missing", headers=admin_headers).status_code == 404


def test_availability_reflects_live_bookings(client, hall, faculty, faculty_headers, other_headers, admin_headers):
    payload = {"hallId": hall["id"], "bookingReason": "Seminar", "bookingDate": "2025-03-10"}
    mine = client.post("/api/bookings", json={**payload, "period": 1}, headers=faculty_headers).json()
    theirs = client.post("/api/bookings", json={**payload, "period": 2}, headers=other_headers).json()
    rejected = client.post("/api/bookings", json={**payload, "period": 3}, headers=other_headers).json()
    client.patch(
        f"/api/bookings/{rejected['id']}",
        json={"status": "rejected", "rejectionReason": "Maintenance"},
        headers=admin_headers,
    )

    response = client.get(f"/api/halls/{hall['id']}/availability?date=2025-03-10", headers=faculty_headers)
    assert response.status_code == 200
    slots = {slot["period"]: slot for slot in response.json()["slots"]}

    assert len(slots) == 8
    assert slots[1]["available"] is False and slots[1]["mine"] is True
    assert slots[1]["bookingId"] == mine["id"]
    assert slots[2]["available"] is False and slots[2]["mine"] is False
    assert slots[2]["bookingId"] is None
    assert slots[3]["available"] is True
    assert all(slots[period]["available"] for period in range(4, 9))
    assert slots[4]["timeRange"] == "11:45 – 12:35"

    as_admin = client.get(f"/api/halls/{hall['id']}/availability?date=2025-03-10", headers=admin_headers).json()
    assert {slot["period"]: slot["bookingId"] for slot in as_admin["slots"]}[2] == theirs["id"]


def test_availability_validates_date_and_hall(client, hall, faculty_headers):
    assert client.get(f"/api/halls/{hall['id']}/availability?date=March", headers=faculty_headers).status_code == 400
    assert client.get("/api/halls/missing/availability?date=2025-03-10", headers=faculty_headers).status_code == 404


def test_period_catalog(client):
    response = client.get("/api/periods")
    assert response.status_code == 200
    periods = response.json()
    assert [entry["period"] for entry in periods] == list(range(1, 9))
    assert periods[0]["timeRange"] == "9:00 – 9:50"
