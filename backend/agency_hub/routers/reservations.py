"""
Reservations router — read-only list with status + text filters.

GET /reservations?status=confirmed&search=smith
"""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from agency_hub.auth.dependencies import CurrentSession, Dashboard
from agency_hub.core.backend import BackendError
from agency_hub.models.reservation import Reservation
from agency_hub.services.reservations import (
    ALL_STATUSES,
    filter_reservations,
    load_reservations,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reservations"])


@router.get("", response_model=list[Reservation], summary="List reservations")
async def list_reservations(
    dashboard: Dashboard,
    session: CurrentSession,
    status_filter: str = Query(default=ALL_STATUSES, alias="status"),
    search: str = Query(default=""),
) -> list[Reservation]:
    try:
        reservations = await load_reservations(dashboard.backend)
    except BackendError as exc:
        logger.error("Reservation fetch failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not load reservations: {exc}",
        ) from exc
    return filter_reservations(reservations, status_filter, search)
