"""
Restaurant-manager assistant: the shift briefing and the chat.

This service builds the prompts from reservation data and turns every
failure into a fixed user-visible message — the LLM is optional, so a
missing key or an outage must never surface as an exception.

Only one briefing and one chat request may be outstanding per dashboard;
a second concurrent request raises AssistantBusyError.
"""

from __future__ import annotations

import asyncio
import datetime
import json
import logging
from collections.abc import Sequence

from agency_hub.core.config import settings
from agency_hub.models.reservation import Reservation
from agency_hub.services import llm_client
from agency_hub.services.reservations import todays_reservations

logger = logging.getLogger(__name__)

BRIEFING_KEY_MISSING = "Error: API Key missing. Unable to generate briefing."
BRIEFING_FAILED = "Failed to generate shift briefing. Please check your connection or API key."
BRIEFING_EMPTY = "No briefing generated."

CHAT_KEY_MISSING = "Error: API Key missing."
CHAT_FAILED = "Sorry, I'm having trouble connecting to the brain."
CHAT_EMPTY = "I'm not sure how to answer that."

CHAT_SYSTEM_INSTRUCTION = """\
You are RestoBot, a helpful AI assistant for a restaurant owner.
You have access to the current reservations list.
Answer questions about the schedule, guests, or general restaurant management.
Be concise and helpful.\
"""

BRIEFING_TEMPLATE = """\
You are an expert Restaurant Manager Assistant.
Analyze the following list of reservations for today ({today}) and provide a "Pre-Shift Briefing" for the owner.

Data:
{data}

Structure your response in Markdown with these sections:
1. **Summary**: Total covers, peak time, and general vibe.
2. **Critical Alerts**: Large groups (6+), dietary restrictions, or VIPs.
3. **Kitchen Prep**: Specific dishes to prep based on requests or general volume.
4. **Staffing Advice**: Where to allocate servers (e.g., "Need strong server for Table 12").
5. **Action Items**: 3 bullet points of what the owner needs to do right now.

Tone: Professional, concise, and actionable.\
"""


class AssistantBusyError(RuntimeError):
    """A request of the same kind is already in flight."""


def _dump(reservations: Sequence[Reservation], indent: int | None = None) -> str:
    return json.dumps([r.model_dump() for r in reservations], indent=indent)


def build_briefing_prompt(reservations: Sequence[Reservation], today: datetime.date) -> str:
    todays = todays_reservations(reservations, today)
    return BRIEFING_TEMPLATE.format(today=today.isoformat(), data=_dump(todays, indent=2))


def build_chat_context(reservations: Sequence[Reservation], limit: int | None = None) -> str:
    """Serialize at most `limit` reservations (CHAT_CONTEXT_LIMIT by default)."""
    size = settings.CHAT_CONTEXT_LIMIT if limit is None else limit
    return f"Current Reservations Context: {_dump(reservations[:size])}"


class Assistant:
    """Briefing + chat with a one-in-flight guard per feature."""

    def __init__(self) -> None:
        self._briefing_lock = asyncio.Lock()
        self._chat_lock = asyncio.Lock()

    async def shift_briefing(
        self,
        reservations: Sequence[Reservation],
        today: datetime.date | None = None,
    ) -> str:
        if not llm_client.is_configured():
            return BRIEFING_KEY_MISSING
        if self._briefing_lock.locked():
            raise AssistantBusyError("A shift briefing is already being generated.")

        prompt = build_briefing_prompt(reservations, today or datetime.date.today())
        async with self._briefing_lock:
            try:
                text = await llm_client.generate_text(prompt)
            except llm_client.LLMError:
                logger.exception("Shift briefing failed")
                return BRIEFING_FAILED
        return text or BRIEFING_EMPTY

    async def chat(self, message: str, reservations: Sequence[Reservation]) -> str:
        if not llm_client.is_configured():
            return CHAT_KEY_MISSING
        if self._chat_lock.locked():
            raise AssistantBusyError("The assistant is still answering the previous message.")

        prompt = f"{build_chat_context(reservations)}\n\nUser: {message}"
        async with self._chat_lock:
            try:
                text = await llm_client.generate_text(
                    prompt, system_instruction=CHAT_SYSTEM_INSTRUCTION
                )
            except llm_client.LLMError:
                logger.exception("Assistant chat failed")
                return CHAT_FAILED
        return text or CHAT_EMPTY
