"""
FastAPI application entrypoint.

Lifespan:
  • On startup: connect to Supabase, restore any existing session, and
    subscribe to auth changes.
  • On shutdown: unsubscribe the auth listener.

Routers:
  • /auth — sign-in / sign-out / session
  • /projects — the agency board (optimistic writes)
  • /pricing — smart pricing calculator
  • /analytics — dashboard stats
  • /reservations — read-only reservation list
  • /ai — shift briefing + manager chat (Gemini)
  • /health — shallow liveness probe
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from agency_hub.core.backend import SupabaseBackend
from agency_hub.core.config import settings
from agency_hub.core.state import DashboardState
from agency_hub.routers.analytics import router as analytics_router
from agency_hub.routers.assistant import router as assistant_router
from agency_hub.routers.auth import router as auth_router
from agency_hub.routers.pricing import router as pricing_router
from agency_hub.routers.projects import router as projects_router
from agency_hub.routers.reservations import router as reservations_router
from agency_hub.services import llm_client

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""

    # A pre-set state (tests, embedding) skips the Supabase connection.
    state: DashboardState | None = getattr(app.state, "dashboard", None)
    if state is None:
        backend = await SupabaseBackend.connect(
            settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY
        )
        state = DashboardState(backend)
        app.state.dashboard = state

    await state.start()
    logger.info("Dashboard state initialised ✓")

    if not llm_client.is_configured():
        logger.warning("GEMINI_API_KEY is not set; AI briefing and chat are disabled.")

    yield  # ← application runs here

    state.stop()


# ── App ─────────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        "Agency & restaurant management dashboard API — "
        "projects board, pricing calculator, analytics, AI assistant."
    ),
    lifespan=lifespan,
)

# Mount routers
app.include_router(auth_router, prefix="/auth")
app.include_router(projects_router, prefix="/projects")
app.include_router(pricing_router, prefix="/pricing")
app.include_router(analytics_router, prefix="/analytics")
app.include_router(reservations_router, prefix="/reservations")
app.include_router(assistant_router, prefix="/ai")


# ── Health check ────────────────────────────────────────────
@app.get(
    "/health",
    tags=["System"],
    summary="Liveness probe",
)
async def health_check() -> dict[str, str]:
    """Shallow health check — confirms the process is alive."""
    return {"status": "healthy"}
