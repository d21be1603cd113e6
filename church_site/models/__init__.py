"""
Database models package
"""

from .member import Member
from .event import Event
from .registration import Registration

__all__ = ["Member", "Event", "Registration"]
