"""
AI assistant router — shift briefing and manager chat powered by Gemini.

Requires a signed-in session. A missing Gemini key or an LLM outage is not
an HTTP error: the reply carries a fixed message instead. A second request
while one of the same kind is still running gets 409.

POST /ai/shift-briefing
POST /ai/chat
"""

import datetime
import logging

from fastapi import APIRouter, HTTPException, status

from agency_hub.auth.dependencies import CurrentSession, Dashboard
from agency_hub.core.backend import BackendError
from agency_hub.models.reservation import Reservation
from agency_hub.schemas.assistant import AssistantReply, BriefingRequest, ChatRequest
from agency_hub.services.assistant import AssistantBusyError
from agency_hub.services.reservations import load_reservations

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI Assistant"])


async def _reservations(dashboard: Dashboard) -> list[Reservation]:
    try:
        return await load_reservations(dashboard.backend)
    except BackendError as exc:
        logger.error("Reservation fetch for assistant failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not load reservations: {exc}",
        ) from exc


def _busy(exc: AssistantBusyError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.post(
    "/shift-briefing",
    response_model=AssistantReply,
    summary="Pre-shift briefing for today's reservations",
)
async def post_shift_briefing(
    dashboard: Dashboard,
    session: CurrentSession,
    payload: BriefingRequest | None = None,
) -> AssistantReply:
    """
    1. Load reservations from the backend
    2. Keep the ones for the requested day and prompt the LLM
    3. Return its Markdown (or a fixed fallback message)
    """
    reservations = await _reservations(dashboard)
    day = (payload.date if payload else None) or datetime.date.today()
    try:
        text = await dashboard.assistant.shift_briefing(reservations, day)
    except AssistantBusyError as exc:
        raise _busy(exc) from exc
    return AssistantReply(text=text)


@router.post(
    "/chat",
    response_model=AssistantReply,
    summary="Ask the manager assistant",
)
async def post_chat(
    payload: ChatRequest,
    dashboard: Dashboard,
    session: CurrentSession,
) -> AssistantReply:
    reservations = await _reservations(dashboard)
    try:
        text = await dashboard.assistant.chat(payload.message, reservations)
    except AssistantBusyError as exc:
        raise _busy(exc) from exc
    return AssistantReply(text=text)
