"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""
    
    # Storage
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")  # memory | sql
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./church_site.db")
    SEED_SAMPLE_DATA: bool = os.getenv("SEED_SAMPLE_DATA", "true").lower() in ("1", "true", "yes")
    
    # Security
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "Mission")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "MFJ")
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")
    
    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # Calendar
    UPCOMING_WINDOW_DAYS: int = 30
    
    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]
    
    # File limits
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB
    
    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30
    
    class Config:
        env_file = ".env"

settings = Settings()
