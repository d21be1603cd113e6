"""
End-to-end tests for the public and admin HTTP routes
"""

import inspect
import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from church_site.api.routes_public import apply_for_membership, member_login
from church_site.core.config import settings
from church_site.services.repositories import Store, get_store
from church_site.services.seed import seed_store
from church_site.utils.security import rate_limiter
from main import app

ADMIN_HEADERS = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}

@pytest.fixture
def store():
    return Store.in_memory()

@pytest.fixture
def client(store):
    """Test client wired to a private store"""
    app.dependency_overrides[get_store] = lambda: store
    rate_limiter.clear()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

def event_payload(**overrides):
    data = {
        "title": "Annual Community Picnic",
        "description": "Food, games and fellowship",
        "date": "2099-07-15",
        "start_time": "11:00",
        "end_time": "15:00",
        "location": "Community Park",
        "registration_enabled": True,
        "max_attendees": 2,
    }
    data.update(overrides)
    return data

def registration_payload(attendees):
    return {
        "first_name": "Michael",
        "last_name": "Johnson",
        "email": "michael.johnson@example.com",
        "phone": "(555) 234-5678",
        "number_of_attendees": attendees,
    }

def membership_payload(**overrides):
    data = {
        "membership_type": "individual",
        "first_name": "John",
        "last_name": "Doe",
        "email": "john.doe@example.com",
        "phone": "(555) 123-4567",
        "address": "123 Main St",
        "city": "Anytown",
        "state": "CA",
        "zip_code": "12345",
        "birth_date": "1990-03-10",
        "password": "password123",
        "confirm_password": "password123",
    }
    data.update(overrides)
    return data

def create_event(client, **overrides):
    response = client.post("/admin/events", json=event_payload(**overrides), headers=ADMIN_HEADERS)
    assert response.status_code == 201
    return response.json()["data"]

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_admin_routes_require_token(client):
    assert client.get("/admin/events").status_code in (401, 403)
    response = client.get("/admin/events", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401

def test_admin_login(client):
    response = client.post("/admin/login", json={"username": settings.ADMIN_USERNAME, "password": settings.ADMIN_PASSWORD})
    assert response.status_code == 200
    assert response.json()["data"]["token"] == settings.ADMIN_TOKEN

    response = client.post("/admin/login", json={"username": settings.ADMIN_USERNAME, "password": "nope"})
    assert response.status_code == 401

def test_registration_capacity_flow(client):
    """Cap 2: party of 2 succeeds, then a party of 1 gets 409"""
    event = create_event(client, max_attendees=2)

    response = client.post(f"/events/{event['id']}/register", json=registration_payload(2))
    assert response.status_code == 201

    detail = client.get(f"/events/{event['id']}").json()["data"]
    assert detail["is_full"] is True
    assert detail["remaining_capacity"] == 0

    response = client.post(f"/events/{event['id']}/register", json=registration_payload(1))
    assert response.status_code == 409
    assert response.json()["error_code"] == "event_full"

    listing = client.get(f"/admin/events/{event['id']}/registrations", headers=ADMIN_HEADERS).json()["data"]
    assert listing["total_attendees"] == 2
    assert listing["is_full"] is True
    assert len(listing["registrations"]) == 1

def test_register_unknown_or_closed_event(client):
    assert client.post("/events/missing/register", json=registration_payload(1)).status_code == 404

    closed = create_event(client, registration_enabled=False)
    response = client.post(f"/events/{closed['id']}/register", json=registration_payload(1))
    assert response.status_code == 409
    assert response.json()["error_code"] == "registration_closed"

def test_register_rejects_zero_attendees(client):
    event = create_event(client)
    response = client.post(f"/events/{event['id']}/register", json=registration_payload(0))
    assert response.status_code == 422

def test_public_event_list_is_upcoming_and_sorted(client):
    create_event(client, title="Christmas Eve Service", date="2099-12-24")
    create_event(client, title="Picnic", date="2099-07-15")
    create_event(client, title="Long Ago", date="2000-01-01")

    titles = [e["title"] for e in client.get("/events").json()["data"]]

    assert titles == ["Picnic", "Christmas Eve Service"]

def test_event_update_and_delete(client):
    event = create_event(client, max_attendees=5)
    client.post(f"/events/{event['id']}/register", json=registration_payload(3))

    response = client.patch(f"/admin/events/{event['id']}", json={"max_attendees": 2}, headers=ADMIN_HEADERS)
    assert response.status_code == 409

    response = client.patch(f"/admin/events/{event['id']}", json={"title": "Picnic"}, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Picnic"
    assert response.json()["data"]["max_attendees"] == 5

    response = client.patch(f"/admin/events/{event['id']}", json={"title": None}, headers=ADMIN_HEADERS)
    assert response.status_code == 422

    assert client.delete(f"/admin/events/{event['id']}", headers=ADMIN_HEADERS).status_code == 200
    assert client.delete(f"/admin/events/{event['id']}", headers=ADMIN_HEADERS).status_code == 404
    assert client.get(f"/events/{event['id']}").status_code == 404

def test_registration_admin_update_and_delete(client):
    event = create_event(client, max_attendees=3)
    registration = client.post(f"/events/{event['id']}/register", json=registration_payload(1)).json()["data"]

    url = f"/admin/registrations/{registration['id']}"
    assert client.patch(url, json={"number_of_attendees": 4}, headers=ADMIN_HEADERS).status_code == 409
    response = client.patch(url, json={"number_of_attendees": 3}, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["number_of_attendees"] == 3

    assert client.delete(url, headers=ADMIN_HEADERS).status_code == 200
    assert client.get(url, headers=ADMIN_HEADERS).status_code == 404

def test_membership_application_and_login(client):
    response = client.post("/membership", json=membership_payload())
    assert response.status_code == 201
    member = response.json()["data"]
    assert "password_hash" not in member
    assert "password" not in member

    response = client.post("/members/login", json={"email": "JOHN.DOE@example.com", "password": "password123"})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == member["id"]

    response = client.post("/members/login", json={"email": "john.doe@example.com", "password": "bad"})
    assert response.status_code == 401

def test_membership_password_mismatch(client):
    response = client.post("/membership", json=membership_payload(confirm_password="other"))
    assert response.status_code == 422
    assert response.json()["error_code"] == "password_mismatch"

def test_admin_member_search_update_delete(client):
    member = client.post("/membership", json=membership_payload()).json()["data"]

    found = client.get("/admin/members", params={"search": "doe"}, headers=ADMIN_HEADERS).json()["data"]
    assert [m["id"] for m in found] == [member["id"]]
    assert all("password_hash" not in m for m in found)

    url = f"/admin/members/{member['id']}"
    response = client.patch(url, json={"notes": "Choir"}, headers=ADMIN_HEADERS)
    assert response.json()["data"]["notes"] == "Choir"

    assert client.delete(url, headers=ADMIN_HEADERS).status_code == 200
    assert client.get(url, headers=ADMIN_HEADERS).status_code == 404

def test_member_roster_export_and_import(client):
    client.post("/membership", json=membership_payload())

    response = client.get("/admin/members/export.xlsx", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    df = pd.read_excel(io.BytesIO(response.content))
    assert list(df['Email']) == ['john.doe@example.com']

    files = {"file": ("roster.xlsx", response.content, "application/octet-stream")}
    response = client.post("/admin/members/import", files=files, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["processed_count"] == 1

    assert len(client.get("/admin/members", headers=ADMIN_HEADERS).json()["data"]) == 2

def test_member_import_rejects_non_excel(client):
    files = {"file": ("roster.csv", b"a,b", "text/csv")}
    response = client.post("/admin/members/import", files=files, headers=ADMIN_HEADERS)
    assert response.status_code == 400

def test_registration_export(client):
    event = create_event(client, max_attendees=10)
    client.post(f"/events/{event['id']}/register", json=registration_payload(4))

    response = client.get(f"/admin/events/{event['id']}/registrations/export.xlsx", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    df = pd.read_excel(io.BytesIO(response.content))
    assert df['Attendees'].sum() == 4

def test_event_qr(client):
    event = create_event(client)

    response = client.get(f"/events/{event['id']}/qr.png")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert client.get("/events/missing/qr.png").status_code == 404

def test_dashboard_and_calendar(client, store):
    seed_store(store)

    # Jane Smith's anniversary is June 12
    data = client.get("/admin/dashboard", params={"today": "2024-06-01"}, headers=ADMIN_HEADERS).json()["data"]
    assert data["total_members"] == 2
    assert data["anniversaries"] == 1
    assert data["birthdays"] == 0

    entries = client.get("/admin/calendar", params={"year": 2025}, headers=ADMIN_HEADERS).json()["data"]
    assert [e["date"] for e in entries] == sorted(e["date"] for e in entries)
    assert sum(1 for e in entries if e["type"] == "event") == 2

    day = client.get("/admin/calendar/day", params={"date": "2025-07-15"}, headers=ADMIN_HEADERS).json()["data"]
    assert [e["description"] for e in day] == ["Annual Community Picnic"]

def test_password_routes_run_in_threadpool():
    # bcrypt work must not block the event loop
    assert not inspect.iscoroutinefunction(apply_for_membership)
    assert not inspect.iscoroutinefunction(member_login)
