"""
Event registration service and capacity guard
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from church_site.schemas.event import EventRecord
from church_site.schemas.registration import RegistrationCreate, RegistrationRecord
from church_site.services.errors import CapacityError, EventNotFoundError, RegistrationClosedError
from church_site.services.repositories import Store

logger = logging.getLogger(__name__)


def count_attendees(store: Store, event_id: str, exclude_registration_id: Optional[str] = None) -> int:
    """Sum of number_of_attendees over an event's registrations"""
    return sum(
        r.number_of_attendees
        for r in store.registrations.list()
        if r.event_id == event_id and r.id != exclude_registration_id
    )


def remaining_for(event: EventRecord, attendees: int) -> Optional[int]:
    if not event.max_attendees:
        return None
    return max(0, event.max_attendees - attendees)


class RegistrationService:
    """Service for event registrations"""

    def __init__(self, store: Store):
        self.store = store

    def list(self) -> List[RegistrationRecord]:
        return self.store.registrations.list()

    def list_by_event(self, event_id: str) -> List[RegistrationRecord]:
        return [r for r in self.store.registrations.list() if r.event_id == event_id]

    def get_by_id(self, registration_id: str) -> Optional[RegistrationRecord]:
        return self.store.registrations.get(registration_id)

    def count_attendees_by_event(self, event_id: str) -> int:
        return count_attendees(self.store, event_id)

    def is_event_full(self, event_id: str) -> bool:
        event = self.store.events.get(event_id)
        if not event or not event.max_attendees:
            return False
        return self.count_attendees_by_event(event_id) >= event.max_attendees

    def remaining_capacity(self, event_id: str) -> Optional[int]:
        """Seats left, or None when the event is unknown or has no cap"""
        event = self.store.events.get(event_id)
        if not event:
            return None
        return remaining_for(event, self.count_attendees_by_event(event_id))

    def _reserve(self, event_id: str, requested: int, exclude_registration_id: Optional[str] = None) -> EventRecord:
        """Check that ``requested`` seats fit; caller must hold the event lock"""
        event = self.store.events.get(event_id)
        if not event:
            self.store.discard_event_lock(event_id)
            raise EventNotFoundError(f"Event {event_id} not found")
        if not event.registration_enabled:
            raise RegistrationClosedError(f"Registration is closed for '{event.title}'")

        if event.max_attendees:
            taken = count_attendees(self.store, event_id, exclude_registration_id)
            remaining = max(0, event.max_attendees - taken)
            if requested > remaining:
                logger.warning(
                    f"Rejected {requested} attendee(s) for event {event_id}: {remaining} of {event.max_attendees} left"
                )
                if remaining == 0:
                    raise CapacityError("This event is full", remaining=0)
                raise CapacityError(f"Only {remaining} spot(s) remaining", remaining=remaining)
        return event

    def add(self, event_id: str, data: RegistrationCreate) -> RegistrationRecord:
        """Register for an event; the capacity check and insert are one atomic step"""
        with self.store.event_lock(event_id):
            self._reserve(event_id, data.number_of_attendees)
            record = RegistrationRecord(
                **data.model_dump(),
                id=str(uuid.uuid4()),
                event_id=event_id,
                created_at=datetime.utcnow(),
            )
            self.store.registrations.add(record)

        logger.info(f"Registration {record.id} for event {event_id} ({record.number_of_attendees} attendee(s))")
        return record

    def update(self, registration_id: str, changes: Dict[str, Any]) -> Optional[RegistrationRecord]:
        existing = self.store.registrations.get(registration_id)
        if existing is None:
            return None

        target_event = changes.get("event_id") or existing.event_id
        requested = changes.get("number_of_attendees") or existing.number_of_attendees
        seats_change = target_event != existing.event_id or requested > existing.number_of_attendees

        if not seats_change:
            return self.store.registrations.update(registration_id, changes)

        with self.store.event_lock(target_event):
            event = self.store.events.get(target_event)
            if not event:
                self.store.discard_event_lock(target_event)
                raise EventNotFoundError(f"Event {target_event} not found")
            if event.max_attendees:
                taken = count_attendees(self.store, target_event, exclude_registration_id=registration_id)
                if taken + requested > event.max_attendees:
                    remaining = max(0, event.max_attendees - taken)
                    raise CapacityError(f"Only {remaining} spot(s) remaining", remaining=remaining)
            return self.store.registrations.update(registration_id, changes)

    def delete(self, registration_id: str) -> bool:
        deleted = self.store.registrations.delete(registration_id)
        if deleted:
            logger.info(f"Registration {registration_id} deleted")
        return deleted
