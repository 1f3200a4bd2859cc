"""
Reservation model — a read-only booking record.

Reservations are only displayed, filtered, and handed verbatim to the
LLM as context; there is no validation logic beyond lenient row mapping.
"""

from __future__ import annotations

from pydantic import BaseModel


class Reservation(BaseModel):
    id: str
    customer_name: str
    email: str = ""
    phone_number: str = ""
    date: str = ""  # YYYY-MM-DD
    time: str = ""
    guests: int = 0
    status: str = ""
    booked_by: str = ""
    special_requests: str | None = None
    rating: int | None = None
