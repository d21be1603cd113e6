"""
Service dependencies wired to the process store
"""

from fastapi import Depends

from church_site.services.event_service import EventService
from church_site.services.member_service import MemberService
from church_site.services.registration_service import RegistrationService
from church_site.services.repositories import Store, get_store

def get_member_service(store: Store = Depends(get_store)) -> MemberService:
    return MemberService(store)

def get_event_service(store: Store = Depends(get_store)) -> EventService:
    return EventService(store)

def get_registration_service(store: Store = Depends(get_store)) -> RegistrationService:
    return RegistrationService(store)
