"""
Persistence collaborator — the hosted Supabase backend.

Rules enforced:
  • Every backend call goes through a BackendGateway (no SDK calls in
    routers or services).
  • Rows are plain dicts; the gateway assumes no schema. Mapping to the
    domain model happens in services/normalizer.py.
  • No retry, backoff, or cancellation: a call either returns or raises
    BackendError / AuthenticationError for the caller to surface.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx
from postgrest import APIError
from supabase import AsyncClient, AuthError, acreate_client

from agency_hub.auth.errors import AuthenticationError
from agency_hub.models.session import SessionInfo

logger = logging.getLogger(__name__)

AuthListener = Callable[[str, SessionInfo | None], None]
Unsubscribe = Callable[[], None]


class BackendError(Exception):
    """A backend request failed (network, permissions, bad query)."""


class BackendGateway(Protocol):
    """Operations the dashboard consumes from the backend-as-a-service."""

    async def sign_in(self, email: str, password: str) -> SessionInfo: ...

    async def sign_out(self) -> None: ...

    async def get_session(self) -> SessionInfo | None: ...

    async def on_auth_change(self, listener: AuthListener) -> Unsubscribe: ...

    async def select_all(self, table: str) -> list[dict[str, Any]]: ...

    async def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]: ...

    async def update_row(self, table: str, row_id: str, row: dict[str, Any]) -> None: ...


def _session_info(session: Any) -> SessionInfo | None:
    """Flatten an SDK Session into SessionInfo."""
    if session is None or getattr(session, "user", None) is None:
        return None
    user = session.user
    return SessionInfo(
        user_id=str(user.id),
        email=user.email or "",
        role=user.role or "",
        access_token=session.access_token or "",
    )


class SupabaseBackend:
    """BackendGateway backed by the async supabase-py client."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    @classmethod
    async def connect(cls, url: str, key: str) -> SupabaseBackend:
        if not url or not key:
            raise BackendError("Missing SUPABASE_URL or SUPABASE_ANON_KEY")
        client = await acreate_client(url, key)
        return cls(client)

    # ── Auth ────────────────────────────────────────────────
    async def sign_in(self, email: str, password: str) -> SessionInfo:
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            # Never log the password; the email is fine.
            logger.warning("Sign-in rejected for %s: %s", email, exc)
            raise AuthenticationError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"Auth request failed: {exc}") from exc

        info = _session_info(response.session)
        if info is None:
            raise AuthenticationError("Sign-in returned no session")
        return info

    async def sign_out(self) -> None:
        try:
            await self._client.auth.sign_out()
        except (AuthError, httpx.HTTPError) as exc:
            raise BackendError(f"Sign-out failed: {exc}") from exc

    async def get_session(self) -> SessionInfo | None:
        try:
            session = await self._client.auth.get_session()
        except (AuthError, httpx.HTTPError) as exc:
            logger.warning("Could not read the current session: %s", exc)
            return None
        return _session_info(session)

    async def on_auth_change(self, listener: AuthListener) -> Unsubscribe:
        def _callback(event: Any, session: Any) -> None:
            listener(str(event), _session_info(session))

        subscription = self._client.auth.on_auth_state_change(_callback)
        if inspect.isawaitable(subscription):
            subscription = await subscription
        return subscription.unsubscribe

    # ── Data ────────────────────────────────────────────────
    async def select_all(self, table: str) -> list[dict[str, Any]]:
        try:
            response = await (
                self._client.table(table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise BackendError(_message(exc)) from exc
        return list(response.data or [])

    async def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored (with the backend-assigned id)."""
        try:
            response = await self._client.table(table).insert([row]).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise BackendError(_message(exc)) from exc
        if not response.data:
            raise BackendError(f"Insert into {table} returned no row")
        return dict(response.data[0])

    async def update_row(self, table: str, row_id: str, row: dict[str, Any]) -> None:
        try:
            await self._client.table(table).update(row).eq("id", row_id).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise BackendError(_message(exc)) from exc


def _message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)
