"""
Calendar of member birthdays, anniversaries and church events
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from church_site.schemas.calendar import CalendarEntry
from church_site.schemas.event import EventRecord
from church_site.schemas.member import MemberContact, MemberRecord


def in_year(original: date, year: int) -> date:
    """Same month/day in another year; Feb 29 falls on Mar 1 in common years"""
    try:
        return original.replace(year=year)
    except ValueError:
        return date(year, 3, 1)


def next_occurrence(original: date, today: date) -> date:
    """This year's anniversary of ``original``, or next year's if it has passed"""
    candidate = in_year(original, today.year)
    if candidate < today:
        candidate = in_year(original, today.year + 1)
    return candidate


def _contact(member: MemberRecord) -> MemberContact:
    return MemberContact(id=member.id, name=member.full_name, email=member.email, phone=member.phone)


def _birthday(member: MemberRecord, on: date) -> CalendarEntry:
    return CalendarEntry(
        type="birthday",
        date=on,
        description=f"{member.first_name} {member.last_name}'s Birthday",
        member=_contact(member),
    )


def _anniversary(member: MemberRecord, on: date) -> CalendarEntry:
    return CalendarEntry(
        type="anniversary",
        date=on,
        description=f"{member.first_name} & {member.spouse_name or 'Spouse'} Anniversary",
        member=_contact(member),
    )


def _church_event(event: EventRecord) -> CalendarEntry:
    return CalendarEntry(
        type="event",
        date=event.date,
        description=event.title,
        details=f"{event.start_time} - {event.end_time} at {event.location}",
        event_id=event.id,
    )


def _sorted(entries: List[CalendarEntry]) -> List[CalendarEntry]:
    # Stable: same-day entries keep generation order, nothing is merged
    return sorted(entries, key=lambda entry: entry.date)


class CalendarService:
    """Builds calendar entries from the roster and the event list"""

    @staticmethod
    def upcoming_occurrences(
        members: Iterable[MemberRecord],
        today: date,
        church_events: Iterable[EventRecord] = (),
    ) -> List[CalendarEntry]:
        """One forward-looking occurrence per birthday and anniversary, plus future events"""
        entries: List[CalendarEntry] = []
        for member in members:
            if member.birth_date:
                entries.append(_birthday(member, next_occurrence(member.birth_date, today)))
            if member.anniversary_date:
                entries.append(_anniversary(member, next_occurrence(member.anniversary_date, today)))

        entries.extend(_church_event(e) for e in church_events if e.date >= today)
        return _sorted(entries)

    @staticmethod
    def calendar_occurrences(
        members: Iterable[MemberRecord],
        year: int,
        church_events: Iterable[EventRecord] = (),
    ) -> List[CalendarEntry]:
        """Occurrences in ``year`` and ``year + 1`` for the month view"""
        entries: List[CalendarEntry] = []
        for member in members:
            for y in (year, year + 1):
                if member.birth_date:
                    entries.append(_birthday(member, in_year(member.birth_date, y)))
                if member.anniversary_date:
                    entries.append(_anniversary(member, in_year(member.anniversary_date, y)))

        entries.extend(_church_event(e) for e in church_events if e.date.year in (year, year + 1))
        return _sorted(entries)

    @staticmethod
    def occurrences_on(entries: Iterable[CalendarEntry], day: date) -> List[CalendarEntry]:
        return [entry for entry in entries if entry.date == day]

    @staticmethod
    def within_window(entries: Iterable[CalendarEntry], today: date, days: int) -> List[CalendarEntry]:
        """Entries dated from ``today`` through ``today + days`` inclusive"""
        end = today + timedelta(days=days)
        return [entry for entry in entries if today <= entry.date <= end]

    @staticmethod
    def dashboard(
        members: List[MemberRecord],
        church_events: List[EventRecord],
        today: date,
        window_days: int,
        preview: Optional[int] = 5,
    ) -> dict:
        """Counts and a short preview for the admin dashboard"""
        upcoming = CalendarService.within_window(
            CalendarService.upcoming_occurrences(members, today, church_events),
            today,
            window_days,
        )
        return {
            "total_members": len(members),
            "window_days": window_days,
            "birthdays": sum(1 for e in upcoming if e.type == "birthday"),
            "anniversaries": sum(1 for e in upcoming if e.type == "anniversary"),
            "events": sum(1 for e in upcoming if e.type == "event"),
            "upcoming": [e.model_dump(mode="json") for e in upcoming[:preview]],
        }
