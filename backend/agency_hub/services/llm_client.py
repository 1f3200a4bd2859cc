"""
Gemini client for free-text generation.

Uses the Generative Language REST API (`models/{model}:generateContent`)
via httpx. One request per call: no retry, no streaming.

Configuration:
  GEMINI_API_KEY — server-side only (never exposed to clients)
  LLM_MODEL      — defaults to gemini-2.5-flash
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from agency_hub.core.config import settings

logger = logging.getLogger(__name__)

_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class LLMError(RuntimeError):
    """The LLM call failed or returned something unusable."""


def is_configured() -> bool:
    return bool(settings.GEMINI_API_KEY)


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts).strip()


async def generate_text(
    prompt: str,
    *,
    system_instruction: str | None = None,
) -> str:
    """
    Send one prompt to Gemini and return the reply text.

    Args:
        prompt:             User content for this turn.
        system_instruction: Optional persona/rules sent separately.

    Returns:
        The generated text ("" if the model returned no candidates).

    Raises:
        LLMError: If the key is missing, the HTTP call fails, or the
                  response cannot be parsed.
    """
    if not settings.GEMINI_API_KEY:
        raise LLMError("GEMINI_API_KEY is not configured")

    payload: dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
    }
    if system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

    headers = {
        "x-goog-api-key": settings.GEMINI_API_KEY,
        "Content-Type": "application/json",
    }

    try:
        async with httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS) as client:
            response = await client.post(
                f"{_GEMINI_BASE_URL}/models/{settings.LLM_MODEL}:generateContent",
                json=payload,
                headers=headers,
            )
    except httpx.HTTPError as exc:
        logger.error("Gemini request failed: %s", exc)
        raise LLMError("LLM service is unreachable") from exc

    if response.status_code != 200:
        logger.error(
            "Gemini API error: status=%d body=%s",
            response.status_code,
            response.text[:500],
        )
        raise LLMError("LLM service returned an error")

    try:
        return _extract_text(response.json())
    except (ValueError, AttributeError, TypeError) as exc:
        logger.error("Failed to parse Gemini response: %s", exc)
        raise LLMError("Could not parse LLM response") from exc
