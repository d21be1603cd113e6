"""
Admin API routes - requires authentication
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from church_site.api.deps import get_event_service, get_member_service, get_registration_service
from church_site.core.config import settings
from church_site.schemas.common import AdminLogin
from church_site.schemas.event import EventCreate, EventUpdate
from church_site.schemas.member import MemberRecord, MemberResponse, MemberUpdate
from church_site.schemas.registration import RegistrationUpdate
from church_site.services.calendar_service import CalendarService
from church_site.services.errors import CapacityError, EventNotFoundError
from church_site.services.event_service import EventService
from church_site.services.excel_service import ExcelService
from church_site.services.member_service import MemberService
from church_site.services.registration_service import RegistrationService
from church_site.utils.responses import success_response, error_response, not_found_error, unauthorized_error
from church_site.utils.security import check_admin_credentials, verify_admin_token

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def _member_data(member: MemberRecord) -> dict:
    return MemberResponse.model_validate(member.model_dump()).model_dump(mode="json")

def _invalid_update(e: ValidationError):
    return error_response(
        message="Validation failed",
        details=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        status_code=422
    )

@router.post("/login")
async def admin_login(credentials: AdminLogin):
    """Exchange dashboard credentials for the admin token"""
    if not check_admin_credentials(credentials.username, credentials.password):
        logger.warning("Failed admin login attempt")
        unauthorized_error("Invalid username or password")

    return success_response(
        message="Signed in",
        data={"token": settings.ADMIN_TOKEN, "token_type": "bearer"}
    )

# -------- Dashboard & calendar --------

@router.get("/dashboard")
async def dashboard(
    today: Optional[date] = Query(None),
    members: MemberService = Depends(get_member_service),
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """Upcoming birthdays, anniversaries and events in the configured window"""
    data = CalendarService.dashboard(
        members=members.list(),
        church_events=events.list(),
        today=today or date.today(),
        window_days=settings.UPCOMING_WINDOW_DAYS,
    )
    return success_response(message="Dashboard retrieved", data=data)

@router.get("/calendar")
async def calendar(
    year: Optional[int] = Query(None, ge=1900, le=9998),
    members: MemberService = Depends(get_member_service),
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """All calendar entries for a year and the following one"""
    year = year or date.today().year
    entries = CalendarService.calendar_occurrences(members.list(), year, events.list())
    return success_response(
        message="Calendar retrieved",
        data=[e.model_dump(mode="json") for e in entries]
    )

@router.get("/calendar/day")
async def calendar_day(
    day: date = Query(..., alias="date"),
    members: MemberService = Depends(get_member_service),
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """Calendar entries on a single date"""
    entries = CalendarService.calendar_occurrences(members.list(), day.year, events.list())
    on_day = CalendarService.occurrences_on(entries, day)
    return success_response(
        message=f"{len(on_day)} {'event' if len(on_day) == 1 else 'events'} on this date",
        data=[e.model_dump(mode="json") for e in on_day]
    )

# -------- Members --------

@router.get("/members")
async def list_members(
    search: Optional[str] = Query(None),
    members: MemberService = Depends(get_member_service),
    token: str = Depends(verify_admin_token)
):
    """List members, optionally filtered by name, email or phone"""
    found = members.search(search)
    return success_response(
        message=f"{len(found)} {'member' if len(found) == 1 else 'members'} found",
        data=[_member_data(m) for m in found]
    )

@router.get("/members/export.xlsx")
async def export_members(
    members: MemberService = Depends(get_member_service),
    token: str = Depends(verify_admin_token)
):
    """Download the member roster"""
    content = ExcelService.export_members(members.list())
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=members.xlsx"}
    )

@router.post("/members/import")
async def import_members(
    file: UploadFile = File(...),
    members: MemberService = Depends(get_member_service),
    token: str = Depends(verify_admin_token)
):
    """Append members from a roster spreadsheet"""
    if not file.filename.endswith(('.xlsx', '.xls')):
        return error_response(
            message="Invalid file format. Please upload an Excel file (.xlsx or .xls)",
            status_code=400
        )

    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File is too large", status_code=413)

    success, errors, imported = ExcelService.parse_roster(file_content)
    if not success:
        return error_response(
            message="Roster file validation failed",
            details=errors,
            status_code=422
        )

    for member in imported:
        members.add(member)

    return success_response(
        message=f"Roster processed successfully. {len(imported)} members imported.",
        data={"processed_count": len(imported), "filename": file.filename}
    )

@router.get("/members/{member_id}")
async def get_member(
    member_id: str,
    members: MemberService = Depends(get_member_service),
    token: str = Depends(verify_admin_token)
):
    member = members.get_by_id(member_id)
    if not member:
        raise not_found_error("Member")
    return success_response(message="Member retrieved", data=_member_data(member))

@router.patch("/members/{member_id}")
async def update_member(
    member_id: str,
    member_update: MemberUpdate,
    members: MemberService = Depends(get_member_service),
    token: str = Depends(verify_admin_token)
):
    """Update member details"""
    try:
        member = members.update(member_id, member_update.model_dump(exclude_unset=True))
    except ValidationError as e:
        return _invalid_update(e)
    if not member:
        raise not_found_error("Member")
    return success_response(message="Member updated successfully", data=_member_data(member))

@router.delete("/members/{member_id}")
async def delete_member(
    member_id: str,
    members: MemberService = Depends(get_member_service),
    token: str = Depends(verify_admin_token)
):
    if not members.delete(member_id):
        raise not_found_error("Member")
    return success_response(
        message="Member deleted successfully",
        data={"deleted_member_id": member_id}
    )

# -------- Events --------

@router.get("/events")
async def list_events(
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """All events, past and future, with registration counts"""
    details = [events.summary(e.id) for e in events.list()]
    return success_response(
        message="Events retrieved",
        data=[d.model_dump(mode="json") for d in details if d is not None]
    )

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """Create a new event"""
    event = events.add(event_data)
    return success_response(
        message="Event created successfully",
        data=event.model_dump(mode="json"),
        status_code=201
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: str,
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """Get detailed event information"""
    detail = events.summary(event_id)
    if not detail:
        raise not_found_error("Event")
    return success_response(message="Event details retrieved", data=detail.model_dump(mode="json"))

@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """Update event information"""
    try:
        event = events.update(event_id, event_update.model_dump(exclude_unset=True))
    except CapacityError as e:
        return error_response(message=str(e), error_code="capacity", status_code=409)
    except ValidationError as e:
        return _invalid_update(e)
    if not event:
        raise not_found_error("Event")

    return success_response(message="Event updated successfully", data=event.model_dump(mode="json"))

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    events: EventService = Depends(get_event_service),
    token: str = Depends(verify_admin_token)
):
    """Delete an event; its registrations are left in place"""
    if not events.delete(event_id):
        raise not_found_error("Event")

    return success_response(
        message="Event deleted successfully",
        data={"deleted_event_id": event_id}
    )

# -------- Registrations --------

@router.get("/registrations")
async def list_registrations(
    registrations: RegistrationService = Depends(get_registration_service),
    token: str = Depends(verify_admin_token)
):
    found = registrations.list()
    return success_response(
        message="Registrations retrieved",
        data=[r.model_dump(mode="json") for r in found]
    )

@router.get("/events/{event_id}/registrations")
async def list_event_registrations(
    event_id: str,
    events: EventService = Depends(get_event_service),
    registrations: RegistrationService = Depends(get_registration_service),
    token: str = Depends(verify_admin_token)
):
    """Registrations for one event with totals"""
    event = events.get_by_id(event_id)
    if not event:
        raise not_found_error("Event")

    found = registrations.list_by_event(event_id)
    return success_response(
        message="Registrations retrieved",
        data={
            "event_id": event_id,
            "total_attendees": registrations.count_attendees_by_event(event_id),
            "max_attendees": event.max_attendees,
            "is_full": registrations.is_event_full(event_id),
            "registrations": [r.model_dump(mode="json") for r in found]
        }
    )

@router.get("/events/{event_id}/registrations/export.xlsx")
async def export_event_registrations(
    event_id: str,
    events: EventService = Depends(get_event_service),
    registrations: RegistrationService = Depends(get_registration_service),
    token: str = Depends(verify_admin_token)
):
    """Download the registration list for an event"""
    event = events.get_by_id(event_id)
    if not event:
        raise not_found_error("Event")

    content = ExcelService.export_registrations(event.title, registrations.list_by_event(event_id))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=registrations_{event_id}.xlsx"}
    )

@router.get("/registrations/{registration_id}")
async def get_registration(
    registration_id: str,
    registrations: RegistrationService = Depends(get_registration_service),
    token: str = Depends(verify_admin_token)
):
    registration = registrations.get_by_id(registration_id)
    if not registration:
        raise not_found_error("Registration")
    return success_response(message="Registration retrieved", data=registration.model_dump(mode="json"))

@router.patch("/registrations/{registration_id}")
async def update_registration(
    registration_id: str,
    registration_update: RegistrationUpdate,
    registrations: RegistrationService = Depends(get_registration_service),
    token: str = Depends(verify_admin_token)
):
    """Update a registration; seat changes are re-checked against capacity"""
    try:
        registration = registrations.update(registration_id, registration_update.model_dump(exclude_unset=True))
    except EventNotFoundError:
        raise not_found_error("Event")
    except CapacityError as e:
        return error_response(
            message=str(e),
            error_code="event_full",
            details={"remaining": e.remaining},
            status_code=409
        )
    except ValidationError as e:
        return _invalid_update(e)
    if not registration:
        raise not_found_error("Registration")

    return success_response(message="Registration updated successfully", data=registration.model_dump(mode="json"))

@router.delete("/registrations/{registration_id}")
async def delete_registration(
    registration_id: str,
    registrations: RegistrationService = Depends(get_registration_service),
    token: str = Depends(verify_admin_token)
):
    if not registrations.delete(registration_id):
        raise not_found_error("Registration")
    return success_response(
        message="Registration deleted successfully",
        data={"deleted_registration_id": registration_id}
    )
