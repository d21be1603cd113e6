"""
Tests for registrations and the capacity guard
"""

import threading

import pytest
from datetime import date

from church_site.schemas import EventCreate, RegistrationCreate
from church_site.services.errors import CapacityError, EventNotFoundError, RegistrationClosedError
from church_site.services.event_service import EventService
from church_site.services.registration_service import RegistrationService
from church_site.services.repositories import Store

@pytest.fixture
def store():
    return Store.in_memory()

@pytest.fixture
def events(store):
    return EventService(store)

@pytest.fixture
def registrations(store):
    return RegistrationService(store)

def create_event(events, max_attendees=None, registration_enabled=True, on=date(2025, 7, 15)):
    return events.add(EventCreate(
        title="Annual Community Picnic",
        description="Food, games and fellowship",
        date=on,
        start_time="11:00",
        end_time="15:00",
        location="Community Park",
        registration_enabled=registration_enabled,
        max_attendees=max_attendees,
    ))

def signup(attendees=1, first_name="Michael"):
    return RegistrationCreate(
        first_name=first_name,
        last_name="Johnson",
        email="michael.johnson@example.com",
        phone="(555) 234-5678",
        number_of_attendees=attendees,
    )

def test_fill_event_then_reject(events, registrations):
    """Cap of 2: a party of 2 fills it, a later party of 1 is turned away"""
    event = create_event(events, max_attendees=2)

    registrations.add(event.id, signup(2))
    assert registrations.is_event_full(event.id)

    with pytest.raises(CapacityError) as exc:
        registrations.add(event.id, signup(1))
    assert exc.value.remaining == 0
    assert registrations.count_attendees_by_event(event.id) == 2

def test_rejection_regardless_of_order(events, registrations):
    """Party of 1 first, then party of 2 does not fit in a cap of 2"""
    event = create_event(events, max_attendees=2)

    registrations.add(event.id, signup(1))
    with pytest.raises(CapacityError) as exc:
        registrations.add(event.id, signup(2))

    assert exc.value.remaining == 1
    assert len(registrations.list_by_event(event.id)) == 1

def test_oversized_party_rejected_on_empty_event(events, registrations):
    event = create_event(events, max_attendees=2)

    with pytest.raises(CapacityError):
        registrations.add(event.id, signup(3))

    assert registrations.list() == []

def test_count_sums_attendees_not_rows(events, registrations):
    event = create_event(events, max_attendees=10)
    other = create_event(events, max_attendees=10)

    registrations.add(event.id, signup(3))
    registrations.add(event.id, signup(2))
    registrations.add(other.id, signup(4))

    assert registrations.count_attendees_by_event(event.id) == 5
    assert registrations.remaining_capacity(event.id) == 5
    assert not registrations.is_event_full(event.id)

def test_uncapped_event_is_never_full(events, registrations):
    event = create_event(events, max_attendees=None)

    registrations.add(event.id, signup(250))

    assert not registrations.is_event_full(event.id)
    assert registrations.remaining_capacity(event.id) is None

def test_zero_max_attendees_means_no_cap(events, registrations):
    event = create_event(events, max_attendees=0)

    assert event.max_attendees is None
    registrations.add(event.id, signup(5))
    assert not registrations.is_event_full(event.id)

def test_unknown_event(registrations):
    with pytest.raises(EventNotFoundError):
        registrations.add("missing", signup(1))

    assert not registrations.is_event_full("missing")

def test_closed_event(events, registrations):
    event = create_event(events, max_attendees=10, registration_enabled=False)

    with pytest.raises(RegistrationClosedError):
        registrations.add(event.id, signup(1))

def test_concurrent_submissions_for_last_slot(events, registrations):
    """Many threads racing for one seat: exactly one wins"""
    event = create_event(events, max_attendees=1)
    barrier = threading.Barrier(8)
    results = []

    def submit(n):
        barrier.wait()
        try:
            registrations.add(event.id, signup(1, first_name=f"Guest{n}"))
            results.append("ok")
        except CapacityError:
            results.append("full")

    threads = [threading.Thread(target=submit, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("full") == 7
    assert registrations.count_attendees_by_event(event.id) == 1

def test_concurrent_submissions_across_events(events, registrations):
    """Writers on different events share one registration collection"""
    event_ids = [create_event(events, max_attendees=100000).id for _ in range(4)]
    barrier = threading.Barrier(len(event_ids))
    errors = []

    def submit(event_id):
        barrier.wait()
        try:
            for n in range(300):
                registrations.add(event_id, signup(1, first_name=f"Guest{n}"))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=submit, args=(event_id,)) for event_id in event_ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert [registrations.count_attendees_by_event(event_id) for event_id in event_ids] == [300] * 4
    assert len(registrations.list()) == 1200

def test_unknown_event_leaves_no_lock(store, registrations):
    with pytest.raises(EventNotFoundError):
        registrations.add("missing", signup(1))

    assert "missing" not in store._locks

def test_update_within_capacity(events, registrations):
    event = create_event(events, max_attendees=5)
    registration = registrations.add(event.id, signup(2))

    updated = registrations.update(registration.id, {"number_of_attendees": 5})

    assert updated.number_of_attendees == 5
    assert registrations.is_event_full(event.id)

def test_update_over_capacity_rejected(events, registrations):
    event = create_event(events, max_attendees=5)
    first = registrations.add(event.id, signup(2))
    registrations.add(event.id, signup(2))

    with pytest.raises(CapacityError):
        registrations.update(first.id, {"number_of_attendees": 4})

    assert registrations.get_by_id(first.id).number_of_attendees == 2

def test_move_registration_to_full_event_rejected(events, registrations):
    full = create_event(events, max_attendees=1)
    other = create_event(events, max_attendees=None)
    registrations.add(full.id, signup(1))
    moving = registrations.add(other.id, signup(1))

    with pytest.raises(CapacityError):
        registrations.update(moving.id, {"event_id": full.id})

def test_update_contact_fields_only(events, registrations):
    event = create_event(events, max_attendees=1)
    registration = registrations.add(event.id, signup(1))

    updated = registrations.update(registration.id, {"special_requests": "Wheelchair access"})

    assert updated.special_requests == "Wheelchair access"

def test_update_missing(registrations):
    assert registrations.update("missing", {"number_of_attendees": 2}) is None

def test_delete_frees_capacity(events, registrations):
    event = create_event(events, max_attendees=2)
    registration = registrations.add(event.id, signup(2))

    assert registrations.delete(registration.id) is True
    assert registrations.delete(registration.id) is False
    assert not registrations.is_event_full(event.id)
    registrations.add(event.id, signup(2))
