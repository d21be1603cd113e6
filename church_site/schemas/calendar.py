"""
Calendar schemas
"""

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel

from .member import MemberContact

__all__ = ["CalendarEntry"]

class CalendarEntry(BaseModel):
    """A birthday, anniversary or church event on a given day"""
    type: Literal["birthday", "anniversary", "event"]
    date: date
    description: str
    details: Optional[str] = None
    member: Optional[MemberContact] = None
    event_id: Optional[str] = None
