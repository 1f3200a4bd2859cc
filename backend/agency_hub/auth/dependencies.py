"""
FastAPI dependencies for dashboard state and session checks.

Flow:
  1. Resolve the DashboardState stored on app.state by the lifespan
  2. Extract the Bearer token from the Authorization header
  3. Compare it with the access token of the signed-in session
  4. Return the SessionInfo so routers can log who did what

Security:
  • Generic 401 for ALL failure modes (missing header, non-Bearer scheme,
    nobody signed in, token mismatch)
  • Tokens are NEVER logged
  • Constant-time comparison of the presented token
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from agency_hub.core.state import DashboardState
from agency_hub.models.session import SessionInfo

_NOT_SIGNED_IN = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Sign-in required.",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_dashboard(request: Request) -> DashboardState:
    """Return the state built in the app lifespan."""
    return request.app.state.dashboard


Dashboard = Annotated[DashboardState, Depends(get_dashboard)]


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", maxsplit=1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


def get_optional_session(
    dashboard: Dashboard,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> SessionInfo | None:
    """The signed-in session if the request carries its token, else None."""
    session = dashboard.auth.session
    token = _bearer_token(authorization)
    if session is None or token is None or not session.access_token:
        return None
    if not hmac.compare_digest(token.encode(), session.access_token.encode()):
        return None
    return session


OptionalSession = Annotated[SessionInfo | None, Depends(get_optional_session)]


def get_current_session(session: OptionalSession) -> SessionInfo:
    """
    FastAPI dependency — the caller's signed-in session, or 401.

    Usage in routers:
        CurrentSession = Annotated[SessionInfo, Depends(get_current_session)]
    """
    if session is None:
        raise _NOT_SIGNED_IN
    return session


CurrentSession = Annotated[SessionInfo, Depends(get_current_session)]
