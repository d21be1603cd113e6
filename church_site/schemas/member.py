"""
Member-related Pydantic schemas
"""

from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

__all__ = [
    "MembershipApplication",
    "MemberUpdate",
    "MemberResponse",
    "MemberRecord",
    "MemberContact",
    "MemberLogin",
]

MembershipType = Literal["individual", "family"]

class MemberBase(BaseModel):
    """Fields collected by the membership form"""
    membership_type: MembershipType = "individual"
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    birth_date: date
    spouse_name: Optional[str] = None
    anniversary_date: Optional[date] = None
    children: Optional[str] = None
    ministry_interests: Optional[str] = None
    notes: Optional[str] = None

class MembershipApplication(MemberBase):
    """Membership form submission"""
    password: str = Field(..., min_length=6)
    confirm_password: str

class MemberUpdate(BaseModel):
    """Schema for updating a member"""
    membership_type: Optional[MembershipType] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    birth_date: Optional[date] = None
    spouse_name: Optional[str] = None
    anniversary_date: Optional[date] = None
    children: Optional[str] = None
    ministry_interests: Optional[str] = None
    notes: Optional[str] = None

class MemberResponse(MemberBase):
    """Member as returned by the API (never carries the password hash)"""
    id: str
    created_at: datetime
    
    class Config:
        from_attributes = True

class MemberRecord(MemberResponse):
    """Stored member"""
    password_hash: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

class MemberContact(BaseModel):
    """Contact card attached to calendar entries"""
    id: str
    name: str
    email: str
    phone: str

class MemberLogin(BaseModel):
    email: str
    password: str
