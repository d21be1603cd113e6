"""
Sample roster, events and registrations loaded into an empty store
"""

import logging
from datetime import date, datetime

from church_site.schemas import EventRecord, MemberRecord, RegistrationRecord
from church_site.services.repositories import Store
from church_site.utils.security import hash_password

logger = logging.getLogger(__name__)

def sample_members():
    return [
        MemberRecord(
            id="1",
            membership_type="individual",
            first_name="John",
            last_name="Doe",
            email="john.doe@example.com",
            phone="(555) 123-4567",
            address="123 Main St",
            city="Anytown",
            state="CA",
            zip_code="12345",
            birth_date=date(1980, 5, 15),
            password_hash=hash_password("password123"),
            ministry_interests="Worship, Outreach",
            created_at=datetime(2023, 1, 15, 12, 0),
        ),
        MemberRecord(
            id="2",
            membership_type="family",
            first_name="Jane",
            last_name="Smith",
            email="jane.smith@example.com",
            phone="(555) 987-6543",
            address="456 Oak Ave",
            city="Somewhere",
            state="NY",
            zip_code="67890",
            birth_date=date(1975, 8, 22),
            password_hash=hash_password("password456"),
            spouse_name="Michael Smith",
            anniversary_date=date(2005, 6, 12),
            children="Emma (12), Jacob (8)",
            ministry_interests="Children's Ministry, Bible Study",
            created_at=datetime(2023, 2, 20, 14, 30),
        ),
    ]

def sample_events():
    return [
        EventRecord(
            id="1",
            title="Annual Community Picnic",
            description="Join us for food, games, and fellowship at our annual community picnic. "
                        "Everyone is welcome to attend this family-friendly event.",
            date=date(2025, 7, 15),
            start_time="11:00",
            end_time="15:00",
            location="Community Park",
            registration_enabled=True,
            max_attendees=100,
            created_at=datetime(2023, 1, 15, 12, 0),
        ),
        EventRecord(
            id="2",
            title="Vacation Bible School",
            description="A week of fun, learning, and spiritual growth for children ages 5-12. "
                        "Registration is required and space is limited.",
            date=date(2025, 8, 7),
            start_time="09:00",
            end_time="12:00",
            location="Church Education Building",
            registration_enabled=True,
            max_attendees=50,
            created_at=datetime(2023, 2, 20, 14, 30),
        ),
    ]

def sample_registrations():
    return [
        RegistrationRecord(
            id="1",
            event_id="1",
            first_name="Michael",
            last_name="Johnson",
            email="michael.johnson@example.com",
            phone="(555) 234-5678",
            number_of_attendees=3,
            special_requests="Vegetarian meal options, please.",
            created_at=datetime(2023, 3, 10, 9, 15),
        ),
        RegistrationRecord(
            id="2",
            event_id="2",
            first_name="Sarah",
            last_name="Williams",
            email="sarah.williams@example.com",
            phone="(555) 876-5432",
            number_of_attendees=2,
            special_requests="Children ages 6 and 8.",
            created_at=datetime(2023, 3, 15, 14, 30),
        ),
    ]

def seed_store(store: Store) -> bool:
    """Load the sample data if the store is empty; returns whether it did"""
    if store.members.list() or store.events.list() or store.registrations.list():
        return False

    store.members.replace_all(sample_members())
    store.events.replace_all(sample_events())
    store.registrations.replace_all(sample_registrations())
    logger.info("Sample data loaded")
    return True
