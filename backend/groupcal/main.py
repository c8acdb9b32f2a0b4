"""
groupcal - calendar management for a groupware server
FastAPI Application Entry Point
"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from groupcal.config import settings
from groupcal.database import engine, Base
from groupcal.api import calendar
from groupcal.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging(settings.log_level, settings.log_file)
    # Create tables if they don't exist (for development)
    # In production, use Alembic migrations
    Base.metadata.create_all(bind=engine)
    yield
    # Shutdown
    engine.dispose()


app = FastAPI(
    title="groupcal API",
    description="Calendar management for a groupware server",
    version="1.0.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(calendar.router, prefix="/api/calendars", tags=["Calendars"])


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "healthy", "service": "groupcal API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected",
        "enabled_backends": sorted(settings.enabled_backends),
        "caldav_configured": bool(settings.caldav_url),
    }
