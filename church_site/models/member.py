"""
Member model
"""

from datetime import datetime
from sqlalchemy import Column, String, Date, DateTime, Text

from church_site.core.db import Base

class Member(Base):
    __tablename__ = "members"
    
    id = Column(String(36), primary_key=True, index=True)
    membership_type = Column(String(20), nullable=False, default="individual")  # individual, family
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)  # not unique, see DESIGN.md
    phone = Column(String(50), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(20), nullable=False)
    birth_date = Column(Date, nullable=False)
    password_hash = Column(String(255), nullable=True)
    spouse_name = Column(String(200), nullable=True)
    anniversary_date = Column(Date, nullable=True)
    children = Column(Text, nullable=True)
    ministry_interests = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
