"""
Backend-neutral view of an authenticated session.

The Supabase SDK returns its own Session/User objects; the gateway
flattens them into this dataclass so the rest of the app never imports
SDK types.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionInfo:
    """Who is signed in.

    Attributes:
        user_id:      Backend user id.
        email:        Sign-in email (may be empty for anonymous roles).
        role:         Backend role, e.g. "authenticated".
        access_token: Bearer token for the session. Never logged.
    """

    user_id: str
    email: str
    role: str
    access_token: str = ""


class ConnectionStatus(str, enum.Enum):
    """Result of the last full reload from the backend."""

    CONNECTED = "connected"
    ERROR = "error"
    LOADING = "loading"
    EMPTY = "empty"
