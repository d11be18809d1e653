"""
FastAPI application entry point for the event-log runtime.

Responsibilities:
- create the FastAPI app
- construct the shared EventLogger (file-backed under settings.data_dir)
- include log routes under /logs

Start it with:

    uvicorn runtime.api.server:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from runtime.event_logger import EventLogger
from . import log_routes


def create_app(event_logger: Optional[EventLogger] = None) -> FastAPI:
    """Build the app around `event_logger` (or one built from settings)."""
    if event_logger is None:
        event_logger = EventLogger.from_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Drain pending commits before the process exits.
        event_logger.close()

    app = FastAPI(title="Event Log Store", lifespan=lifespan)

    # Initialize the router module with our shared logger, then include it.
    log_routes.init_routes(event_logger=event_logger)
    app.include_router(log_routes.router, prefix="/logs")
    return app


# ---------------------------------------------------------------------------
# Shared singleton app
# ---------------------------------------------------------------------------

app = create_app()
