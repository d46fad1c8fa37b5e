"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from solowork.config import settings
from solowork.database import database
from solowork.logging_config import setup_logging
from solowork.routers import (
    auth,
    clients,
    export,
    invoices,
    projects,
    rates,
    tasks,
    themes,
    time_entries,
    timers,
)

logger = logging.getLogger("solowork")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    setup_logging(settings.log_level, settings.log_format)
    await database.connect()
    logger.info("Solowork API started")
    yield
    # Shutdown
    await database.disconnect()


app = FastAPI(
    title="Solowork API",
    description="Backend API for freelance time tracking and billing",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(projects.router)
app.include_router(tasks.router)
app.include_router(rates.router)
app.include_router(time_entries.router)
app.include_router(timers.router)
app.include_router(invoices.router)
app.include_router(export.router)
app.include_router(themes.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Solowork API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
