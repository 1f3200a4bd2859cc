"""
Analytics router — headline numbers for the dashboard.

Computed from the board's current project list; no extra backend query
unless the board is stale.

GET /analytics/summary
"""

from fastapi import APIRouter

from agency_hub.auth.dependencies import CurrentSession, Dashboard
from agency_hub.schemas.analytics import DashboardStatsOut
from agency_hub.services.analytics import build_dashboard_stats

router = APIRouter(tags=["Analytics"])


@router.get(
    "/summary",
    response_model=DashboardStatsOut,
    summary="Pipeline, revenue, rating, and conversion stats",
    description=(
        "Revenue by service excludes Cancelled projects; "
        "average rating covers rated projects only."
    ),
)
async def get_summary(dashboard: Dashboard, session: CurrentSession) -> DashboardStatsOut:
    projects = await dashboard.board.current(session)
    stats = build_dashboard_stats(projects)
    return DashboardStatsOut.model_validate(stats, from_attributes=True)
