"""
Registration model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text

from church_site.core.db import Base

class Registration(Base):
    __tablename__ = "registrations"
    
    id = Column(String(36), primary_key=True, index=True)
    # Plain column rather than a foreign key: deleting an event leaves its registrations in place
    event_id = Column(String(36), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    number_of_attendees = Column(Integer, nullable=False, default=1)
    special_requests = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
