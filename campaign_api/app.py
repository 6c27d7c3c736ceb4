"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from campaign_api.config import SUPABASE_URL
from campaign_api.routers import campaign_sequences

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if not SUPABASE_URL:
        logger.warning("SUPABASE_URL not set, store queries will fail")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Campaign Sequences API",
        description="Read and replace the ordered outreach steps of a user's campaigns.",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get("/health", include_in_schema=False)
    async def health():
        return {"status": "ok"}

    app.include_router(campaign_sequences.router, tags=["Sequences"])

    return app
