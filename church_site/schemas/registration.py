"""
Registration-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

__all__ = ["RegistrationCreate", "RegistrationUpdate", "RegistrationRecord"]

class RegistrationBase(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str
    number_of_attendees: int = Field(1, ge=1)
    special_requests: Optional[str] = None

class RegistrationCreate(RegistrationBase):
    """Event registration form submission"""

class RegistrationUpdate(BaseModel):
    """Schema for updating a registration"""
    event_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    number_of_attendees: Optional[int] = Field(None, ge=1)
    special_requests: Optional[str] = None

class RegistrationRecord(RegistrationBase):
    """Stored registration"""
    id: str
    event_id: str
    created_at: datetime
    
    class Config:
        from_attributes = True
