"""
Database engine and session setup for the SQL storage backend
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from church_site.core.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def init_db(bind=None):
    """Create all tables on the given engine (defaults to the app engine)"""
    # Models must be imported so they register on Base.metadata
    from church_site import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
