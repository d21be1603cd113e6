"""
Church event service
"""

import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from church_site.schemas.event import EventCreate, EventDetail, EventRecord
from church_site.services.errors import CapacityError
from church_site.services.registration_service import count_attendees, remaining_for
from church_site.services.repositories import Store

logger = logging.getLogger(__name__)

class EventService:
    """Create, list, update and delete events. Listings are always in date order."""

    def __init__(self, store: Store):
        self.store = store

    def list(self) -> List[EventRecord]:
        return self.store.events.list()

    def list_upcoming(self, today: Optional[date] = None) -> List[EventRecord]:
        today = today or date.today()
        return [e for e in self.store.events.list() if e.date >= today]

    def get_by_id(self, event_id: str) -> Optional[EventRecord]:
        return self.store.events.get(event_id)

    def add(self, data: EventCreate) -> EventRecord:
        record = EventRecord(
            **data.model_dump(),
            id=str(uuid.uuid4()),
            created_at=datetime.utcnow(),
        )
        self.store.events.add(record)
        logger.info(f"Event {record.id} '{record.title}' created for {record.date.isoformat()}")
        return record

    def update(self, event_id: str, changes: Dict[str, Any]) -> Optional[EventRecord]:
        """Apply a partial update; a new cap may not drop below current attendance"""
        with self.store.event_lock(event_id):
            existing = self.store.events.get(event_id)
            if existing is None:
                self.store.discard_event_lock(event_id)
                return None

            new_max = changes.get("max_attendees", existing.max_attendees)
            if new_max:
                attendees = count_attendees(self.store, event_id)
                if new_max < attendees:
                    raise CapacityError(
                        f"Maximum attendees cannot be lower than the {attendees} already registered"
                    )

            updated = self.store.events.update(event_id, changes)

        logger.info(f"Event {event_id} updated: {', '.join(sorted(changes)) or 'no changes'}")
        return updated

    def delete(self, event_id: str) -> bool:
        with self.store.event_lock(event_id):
            deleted = self.store.events.delete(event_id)
            if not deleted:
                self.store.discard_event_lock(event_id)
                return False
            orphans = count_attendees(self.store, event_id)
            self.store.discard_event_lock(event_id)

        if orphans:
            # Registrations are kept when their event goes away
            logger.warning(f"Event {event_id} deleted with {orphans} registered attendee(s) left in place")
        else:
            logger.info(f"Event {event_id} deleted")
        return True

    def summary(self, event_id: str) -> Optional[EventDetail]:
        """Event plus its registration counts"""
        event = self.store.events.get(event_id)
        if not event:
            return None

        registrations = [r for r in self.store.registrations.list() if r.event_id == event_id]
        attendees = sum(r.number_of_attendees for r in registrations)
        return EventDetail(
            **event.model_dump(),
            registered_attendees=attendees,
            registration_count=len(registrations),
            remaining_capacity=remaining_for(event, attendees),
            is_full=bool(event.max_attendees) and attendees >= event.max_attendees,
        )
