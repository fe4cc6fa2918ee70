"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from workforce_allocation.api.main import create_app
from workforce_allocation.config import Settings


@pytest.fixture
def client(seeded_store):
    return TestClient(create_app(store=seeded_store, settings=Settings()))


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["counts"]["assignments"] == 2


def test_create_contract_and_auto_assign(client, seeded_store):
    response = client.post("/contracts", json={
        "vendor_name": "Acme", "region": "North", "hours_required": 10,
        "skills_required": "Construction", "start_date": "2025-12-10",
        "end_date": "2025-12-12", "auto_assign": True,
    })
    assert response.status_code == 201
    body = response.json()
    assert body["contract"]["status"] == "active"
    assert body["allocation"]["status"] == "active"
    # Emily (35 h) is more loaded than John (25 h)
    assert [a["person_id"] for a in body["allocation"]["assignments"]] == ["1"]
    assert seeded_store.find_person("1").hours_allocated == 35


def test_auto_assign_twice_conflicts(client):
    assert client.post("/contracts/c2/auto-assign").status_code == 200
    response = client.post("/contracts/c2/auto-assign")
    assert response.status_code == 409
    assert client.post("/contracts/c2/auto-assign", json={"top_up": True}).status_code == 200


def test_invalid_contract_period(client):
    response = client.post("/contracts", json={
        "vendor_name": "Acme", "region": "North", "hours_required": 10,
        "skills_required": ["Construction"], "start_date": "2025-12-12", "end_date": "2025-12-10",
    })
    assert response.status_code == 400


def test_manual_assignment_flags_over_capacity(client):
    response = client.post("/assignments", json={"contract_id": "c1", "person_id": "4", "hours": 10})
    assert response.status_code == 201
    assert response.json()["over_capacity"] is True


@pytest.mark.parametrize("payload,status", [
    ({"contract_id": "c1", "person_id": "2", "hours": 0}, 400),
    ({"contract_id": "c404", "person_id": "2", "hours": 5}, 404),
])
def test_manual_assignment_errors(client, payload, status):
    assert client.post("/assignments", json=payload).status_code == status


def test_edit_and_delete_assignment(client, seeded_store):
    assert client.patch("/assignments/a1", json={"hours_assigned": 20}).status_code == 200
    assert client.get("/people/1/hours").json()["assigned"] == 20
    assert client.delete("/assignments/a1").status_code == 200
    assert seeded_store.find_person("1").hours_allocated == 0
    assert client.delete("/assignments/a1").status_code == 404


def test_time_entry_lifecycle(client):
    response = client.post("/time-entries", json={"assignment_id": "a2", "date": "2025-12-01", "hours_clocked": 2})
    assert response.status_code == 201
    entry = response.json()
    assert entry["person_id"] == "4"

    assert client.patch(f"/time-entries/{entry['id']}", json={"hours_clocked": 3}).json()["hours_clocked"] == 3
    assert client.get("/contracts/c1/hours").json()["worked"] == 40
    assert client.delete(f"/time-entries/{entry['id']}").status_code == 200
    assert client.patch("/time-entries/t0", json={"hours_clocked": -1}).status_code == 400


def test_contract_calendar(client):
    response = client.get("/contracts/c1/calendar", params={"today": "2025-12-04"})
    assert response.status_code == 200
    calendars = response.json()
    assert [c["assignment_id"] for c in calendars] == ["a1", "a2"]
    assert len(calendars[0]["days"]) == 15
    assert calendars[0]["performance"]["hours_behind"] == 8


def test_exports(client):
    assert client.get("/exports/company").json()[0]["personnel_count"] == 2
    assert client.get("/exports/all").json()[0]["totals"]["worked_hours"] == 37
    assert client.get("/exports/vendors").status_code == 400
    schedule = client.get("/exports/schedule", params={"today": "2025-12-04"}).json()
    assert len(schedule[0]["rows"]) == 30


def test_people_and_overview(client):
    people = client.get("/people").json()
    assert {p["id"] for p in people} == {"1", "2", "4", "5"}
    assert client.get("/overview").json()["fully_available"] == 2


def test_load_people_csv(client, seeded_store):
    csv = b"id,name,region,max_hours,skills\n20,Nina,West,40,\"Driving, Logistics\"\n"
    response = client.post("/people/load", files={"file": ("people.csv", csv, "text/csv")})
    assert response.status_code == 200
    assert seeded_store.find_person("20").skills == ["Driving", "Logistics"]


def test_load_people_csv_is_all_or_nothing(client, seeded_store):
    csv = b"id,name,region,max_hours\n21,Ok,West,40\n22,Bad,Mars,40\n"
    response = client.post("/people/load", files={"file": ("people.csv", csv, "text/csv")})
    assert response.status_code == 400
    assert "21" not in seeded_store.people


def test_non_finite_hours_rejected_before_saving(client, seeded_store):
    response = client.post(
        "/assignments",
        content=b'{"contract_id": "c1", "person_id": "2", "hours": NaN}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert len(seeded_store.assignments) == 2
    assert seeded_store.find_person("2").hours_allocated == 0


def test_completed_contract_cannot_be_restaffed(client):
    assert client.post("/contracts/c1/complete").json()["status"] == "completed"
    assert client.post("/contracts/c1/auto-assign", json={"top_up": True}).status_code == 400
