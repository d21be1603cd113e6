"""
Pydantic schemas package
"""

from .common import *
from .member import *
from .event import *
from .registration import *
from .calendar import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "AdminLogin",
    "MembershipApplication",
    "MemberUpdate",
    "MemberResponse",
    "MemberRecord",
    "MemberContact",
    "MemberLogin",
    "EventCreate",
    "EventUpdate",
    "EventRecord",
    "EventDetail",
    "RegistrationCreate",
    "RegistrationUpdate",
    "RegistrationRecord",
    "CalendarEntry",
]
