"""
Public API routes - no authentication required
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from church_site.api.deps import get_event_service, get_member_service, get_registration_service
from church_site.schemas.member import MembershipApplication, MemberLogin, MemberResponse
from church_site.schemas.registration import RegistrationCreate
from church_site.services.errors import (
    CapacityError,
    EventNotFoundError,
    PasswordMismatchError,
    RegistrationClosedError,
)
from church_site.services.event_service import EventService
from church_site.services.member_service import MemberService
from church_site.services.qr_service import QRService
from church_site.services.registration_service import RegistrationService
from church_site.utils.responses import success_response, error_response, rate_limit_error, not_found_error
from church_site.utils.security import rate_limit_check, get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/events")
async def list_upcoming_events(
    today: Optional[date] = Query(None),
    events: EventService = Depends(get_event_service)
):
    """Upcoming events with availability"""
    upcoming = [events.summary(e.id) for e in events.list_upcoming(today)]
    return success_response(
        message="Upcoming events retrieved",
        data=[e.model_dump(mode="json") for e in upcoming if e is not None]
    )

@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Event details with registration availability"""
    detail = events.summary(event_id)
    if not detail:
        raise not_found_error("Event")

    return success_response(
        message="Event retrieved",
        data=detail.model_dump(mode="json")
    )

@router.get("/events/{event_id}/qr.png")
async def get_qr_code(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """QR code image linking to the event's registration page"""
    if not events.get_by_id(event_id):
        raise not_found_error("Event")

    qr_bytes = QRService.generate_event_qr(event_id)

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=qr_{event_id}.png"}
    )

@router.post("/events/{event_id}/register")
async def register_for_event(
    event_id: str,
    registration: RegistrationCreate,
    request: Request,
    registrations: RegistrationService = Depends(get_registration_service)
):
    """Submit an event registration"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        rate_limit_error()

    try:
        record = registrations.add(event_id, registration)
    except EventNotFoundError:
        raise not_found_error("Event")
    except RegistrationClosedError as e:
        return error_response(message=str(e), error_code="registration_closed", status_code=409)
    except CapacityError as e:
        return error_response(
            message=str(e),
            error_code="event_full",
            details={"remaining": e.remaining},
            status_code=409
        )

    return success_response(
        message="Registration received",
        data=record.model_dump(mode="json"),
        status_code=201
    )

@router.post("/membership")
def apply_for_membership(
    application: MembershipApplication,
    request: Request,
    members: MemberService = Depends(get_member_service)
):
    """Submit a membership application"""
    # Sync route: bcrypt hashing runs in the threadpool
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        rate_limit_error()

    try:
        member = members.apply(application)
    except PasswordMismatchError as e:
        return error_response(message=str(e), error_code="password_mismatch", status_code=422)

    return success_response(
        message="Membership application received",
        data=MemberResponse.model_validate(member.model_dump()).model_dump(mode="json"),
        status_code=201
    )

@router.post("/members/login")
def member_login(
    credentials: MemberLogin,
    request: Request,
    members: MemberService = Depends(get_member_service)
):
    """Check a member's email and password"""
    # Sync route: bcrypt check runs in the threadpool
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        rate_limit_error()

    member = members.authenticate(credentials.email, credentials.password)
    if not member:
        logger.warning(f"Failed member login from {client_ip}")
        return error_response(message="Invalid email or password", status_code=401)

    return success_response(
        message="Signed in",
        data=MemberResponse.model_validate(member.model_dump()).model_dump(mode="json")
    )
