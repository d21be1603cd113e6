"""
Church Site - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from church_site.core.config import settings
from church_site.api import routes_admin, routes_public
from church_site.services.repositories import get_store
from church_site.services.seed import seed_store

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    store = get_store()
    logger.info(f"Using {settings.STORAGE_BACKEND} storage")
    if settings.SEED_SAMPLE_DATA:
        seed_store(store)
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Church Site",
    description="Backend for the church website: membership, events and registrations",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
