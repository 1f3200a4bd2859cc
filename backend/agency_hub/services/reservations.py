"""
Reservation helpers — lenient row mapping plus the list filters.

Reservations are read-only in this app, so mapping is best-effort in the
same spirit as services/normalizer.py: a malformed row still yields a
Reservation rather than an error.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from agency_hub.core.backend import BackendGateway
from agency_hub.core.config import settings
from agency_hub.models.reservation import Reservation
from agency_hub.services.normalizer import coerce_number, temporary_id

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


def _text(row: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = row.get(key)
        if value:
            return value if isinstance(value, str) else str(value)
    return ""


def normalize_reservation(row: Mapping[str, Any]) -> Reservation:
    """Convert a raw `reservations` row into a Reservation. Never raises."""
    if not isinstance(row, Mapping):
        row = {}

    guests = coerce_number(row.get("guests") or row.get("party_size"))
    rating = coerce_number(row.get("rating"))
    special = _text(row, "special_requests", "notes")

    return Reservation(
        id=_text(row, "id") or temporary_id(),
        customer_name=_text(row, "customer_name", "name") or "Guest",
        email=_text(row, "email"),
        phone_number=_text(row, "phone_number", "phone"),
        date=_text(row, "date")[:10],
        time=_text(row, "time"),
        guests=int(guests) if guests is not None and guests >= 0 else 0,
        status=_text(row, "status").lower(),
        booked_by=_text(row, "booked_by", "source"),
        special_requests=special or None,
        rating=int(rating) if rating is not None and 1 <= rating <= 5 else None,
    )


def filter_reservations(
    reservations: Iterable[Reservation],
    status: str = ALL_STATUSES,
    search: str = "",
) -> list[Reservation]:
    """
    Apply the reservation list filters.

    `status` must match (case-insensitively) unless it is "all"; `search`
    is a case-insensitive substring of the customer name or email.
    """
    wanted = status.strip().lower()
    term = search.lower()
    return [
        r for r in reservations
        if (wanted == ALL_STATUSES or r.status == wanted)
        and (term in r.customer_name.lower() or term in r.email.lower())
    ]


def todays_reservations(
    reservations: Iterable[Reservation],
    today: datetime.date,
) -> list[Reservation]:
    """Reservations booked for `today` — the input of the shift briefing."""
    iso = today.isoformat()
    return [r for r in reservations if r.date == iso]


async def load_reservations(backend: BackendGateway, table: str | None = None) -> list[Reservation]:
    """Read every reservation row. Raises BackendError on failure."""
    rows = await backend.select_all(table or settings.RESERVATIONS_TABLE)
    logger.debug("Fetched %d reservation rows", len(rows))
    return [normalize_reservation(row) for row in rows]
