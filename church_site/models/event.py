"""
Event model
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text

from church_site.core.db import Base

class Event(Base):
    __tablename__ = "events"
    
    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    location = Column(String(255), nullable=False)
    image_url = Column(String(500), nullable=True)
    registration_enabled = Column(Boolean, default=False)
    max_attendees = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
