"""
Event-related Pydantic schemas
"""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field, field_validator

__all__ = ["EventCreate", "EventUpdate", "EventRecord", "EventDetail"]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

def _zero_is_unlimited(value):
    # The admin form submits 0 for "no limit"
    if value == 0 and value is not False:
        return None
    return value

class EventBase(BaseModel):
    """Shared event fields"""
    title: str = Field(..., min_length=1)
    description: str = ""
    date: dt.date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    location: str
    image_url: Optional[str] = None
    registration_enabled: bool = False
    max_attendees: Optional[int] = Field(None, ge=1)

    @field_validator("max_attendees", mode="before")
    @classmethod
    def zero_is_unlimited(cls, value):
        return _zero_is_unlimited(value)

class EventCreate(EventBase):
    """Schema for creating an event"""

class EventUpdate(BaseModel):
    """Schema for updating an event; only fields that are sent get applied"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    location: Optional[str] = None
    image_url: Optional[str] = None
    registration_enabled: Optional[bool] = None
    max_attendees: Optional[int] = Field(None, ge=1)

    @field_validator("max_attendees", mode="before")
    @classmethod
    def zero_is_unlimited(cls, value):
        return _zero_is_unlimited(value)

class EventRecord(EventBase):
    """Stored event"""
    id: str
    created_at: dt.datetime
    
    class Config:
        from_attributes = True

class EventDetail(EventRecord):
    """Event with registration counts"""
    registered_attendees: int
    registration_count: int
    remaining_capacity: Optional[int] = None
    is_full: bool
