"""
Row ↔ Project mapping for the Supabase `projects` table.

The upstream schema is not controlled by this app: rows have been written
by several tools over time, each with its own column names. `normalize()`
is therefore lenient: every field has a total fallback and
the function never raises, whatever the row looks like.

Writes always use one convention (customer_name / service_name /
SERVICE_PRICE / phone_number / description), produced by
`to_insert_row()` and `to_update_row()`.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from agency_hub.models.project import (
    Project,
    ProjectDraft,
    ProjectStatus,
    ProjectUpdate,
    ServiceType,
)

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Unknown Client"

# ── Alternate column names, in priority order ───────────────
_SERVICE_FIELDS = ("service_name", "service_type", "booked_by", "SERVICE")
_STATUS_FIELDS = ("status", "state")
_PRICE_FIELDS = ("SERVICE_PRICE", "value")

# Substring rules, checked in order; first hit wins.
_SERVICE_KEYWORDS: tuple[tuple[tuple[str, ...], ServiceType], ...] = (
    (("web",), ServiceType.WEB_DEVELOPMENT),
    (("ai", "bot"), ServiceType.AI_SOLUTIONS),
    (("ad", "marketing"), ServiceType.AD_CAMPAIGN),
)

_STATUS_KEYWORDS: tuple[tuple[frozenset[str], ProjectStatus], ...] = (
    (frozenset({"active", "confirmed", "in progress", "ongoing", "pending"}), ProjectStatus.ACTIVE),
    (frozenset({"lead", "prospect", "new"}), ProjectStatus.LEAD),
    (frozenset({"completed", "delivered", "done", "finished"}), ProjectStatus.COMPLETED),
    (frozenset({"cancelled", "archived", "dropped"}), ProjectStatus.CANCELLED),
)


def temporary_id() -> str:
    """Session-local id for rows the backend has not numbered yet."""
    return f"tmp-{uuid.uuid4().hex[:12]}"


def _first_present(row: Mapping[str, Any], *keys: str) -> Any:
    """Return the first truthy value among `keys`, else None."""
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def coerce_number(value: Any) -> Decimal | None:
    """Best-effort numeric coercion; None for anything not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return number if number.is_finite() else None


def _resolve_value(row: Mapping[str, Any]) -> Decimal:
    # A zero price falls through to the next column, like an absent one.
    for key in _PRICE_FIELDS:
        number = coerce_number(row.get(key))
        if number:
            return number
    return Decimal("0")


def resolve_service_type(raw: Any) -> ServiceType:
    """
    Map a free-form service label onto a service line (default: Web Development).

    Substring rules only, so the stored label "Ad Campaign" reads back as
    AI Solutions ("c-ai-mpaign"); service type is lossy on round trip.
    """
    text = _text(raw).strip().lower() if raw else ""
    for keywords, service in _SERVICE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return service
    return ServiceType.WEB_DEVELOPMENT


def resolve_status(raw: Any, default: ProjectStatus = ProjectStatus.ACTIVE) -> ProjectStatus:
    """Map a free-form status onto a board column; unknown values keep `default`."""
    text = _text(raw).strip().lower() if raw else "active"
    for keywords, status in _STATUS_KEYWORDS:
        if text in keywords:
            return status
    return default


def _resolve_deadline(raw: Any) -> datetime.date:
    if isinstance(raw, datetime.datetime):
        return raw.date()
    if isinstance(raw, datetime.date):
        return raw
    if raw:
        try:
            return datetime.date.fromisoformat(_text(raw)[:10])
        except ValueError:
            pass
    return datetime.date.today()


def _resolve_rating(raw: Any) -> int | None:
    number = coerce_number(raw)
    if number is None or number != number.to_integral_value():
        return None
    rating = int(number)
    return rating if 1 <= rating <= 5 else None


def normalize(row: Mapping[str, Any]) -> Project:
    """
    Convert a raw backend row into a Project.

    Never raises: missing or malformed columns resolve to fixed defaults
    (Web Development, Active, value 0, "Unknown Client", today's date).
    """
    if not isinstance(row, Mapping):
        logger.warning("Skipping non-mapping row of type %s", type(row).__name__)
        row = {}

    raw_id = row.get("id")
    client_name = _first_present(row, "customer_name", "client_name")

    return Project(
        id=_text(raw_id) if raw_id else temporary_id(),
        client_name=_text(client_name) if client_name else UNKNOWN_CLIENT,
        email=_text(row.get("email") or ""),
        phone=_text(_first_present(row, "phone_number", "phone") or ""),
        deadline=_resolve_deadline(row.get("created_at")),
        value=_resolve_value(row),
        status=resolve_status(_first_present(row, *_STATUS_FIELDS)),
        service_type=resolve_service_type(_first_present(row, *_SERVICE_FIELDS)),
        notes=_text(row.get("description") or ""),
        rating=_resolve_rating(row.get("rating")),
    )


def _json_number(value: Decimal) -> int | float:
    """Supabase sends JSON; Decimal is not serializable there."""
    return int(value) if value == value.to_integral_value() else float(value)


def to_insert_row(draft: ProjectDraft) -> dict[str, Any]:
    """Map a new project onto the canonical column names for insert."""
    return {
        "customer_name": draft.client_name,
        "service_name": draft.service_type.value,
        "SERVICE_PRICE": _json_number(draft.value),
        "email": draft.email,
        "phone_number": draft.phone,
        "status": draft.status.value,
        "created_at": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "description": draft.notes,
    }


def to_update_row(updates: ProjectUpdate) -> dict[str, Any]:
    """
    Map a partial update onto column names.

    Only fields that carry a value are written; an empty dict means there
    is nothing to send.
    """
    row: dict[str, Any] = {}
    if updates.client_name:
        row["customer_name"] = updates.client_name
    if updates.status is not None:
        row["status"] = updates.status.value
    if updates.value is not None:
        row["SERVICE_PRICE"] = _json_number(updates.value)
    if updates.notes:
        row["description"] = updates.notes
    return row
