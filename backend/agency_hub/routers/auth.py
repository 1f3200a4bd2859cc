"""
Auth router — sign-in / sign-out against the backend's auth service.

The session itself is held by AuthSession (auth/session.py); these
routes only drive it. Sign-in hands the access token back once; every
protected route then expects it as `Authorization: Bearer <token>`.
Backend error messages are passed through so the login form can show them.

POST /auth/sign-in
POST /auth/sign-out   (requires the session token)
GET  /auth/session
"""

import logging

from fastapi import APIRouter, HTTPException, status

from agency_hub.auth.dependencies import CurrentSession, Dashboard, OptionalSession
from agency_hub.auth.errors import AuthenticationError
from agency_hub.core.backend import BackendError
from agency_hub.models.session import SessionInfo
from agency_hub.schemas.auth import SessionOut, SignInRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _session_out(session: SessionInfo | None, include_token: bool = False) -> SessionOut:
    if session is None:
        return SessionOut(authenticated=False)
    return SessionOut(
        authenticated=True,
        user_id=session.user_id,
        email=session.email,
        role=session.role,
        access_token=session.access_token if include_token else None,
    )


@router.post("/sign-in", response_model=SessionOut, summary="Sign in with email + password")
async def sign_in(payload: SignInRequest, dashboard: Dashboard) -> SessionOut:
    try:
        session = await dashboard.auth.sign_in(payload.email, payload.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
    except BackendError as exc:
        logger.error("Sign-in request failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Authentication service is unavailable.",
        ) from exc
    return _session_out(session, include_token=True)


@router.post("/sign-out", response_model=SessionOut, summary="Sign out")
async def sign_out(dashboard: Dashboard, session: CurrentSession) -> SessionOut:
    try:
        await dashboard.auth.sign_out()
    except BackendError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    logger.info("Signed out %s", session.email)
    return _session_out(None)


@router.get("/session", response_model=SessionOut, summary="Session for the presented token")
async def get_session(session: OptionalSession) -> SessionOut:
    return _session_out(session)
