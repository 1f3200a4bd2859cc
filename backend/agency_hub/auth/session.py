"""
Authentication state for one running dashboard.

Contract:
  • start()  — read any existing session from the backend, then subscribe
               to auth changes. Called once from the app lifespan.
  • stop()   — unsubscribe the listener. Called on shutdown.

The instance lives on `app.state` and reaches routers through
FastAPI dependencies; there is no module-level session singleton.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from agency_hub.core.backend import BackendGateway, Unsubscribe
from agency_hub.models.session import SessionInfo

logger = logging.getLogger(__name__)


class AuthSession:
    """Holds the current session and mirrors backend auth events."""

    def __init__(
        self,
        backend: BackendGateway,
        on_signed_in: Callable[[], None] | None = None,
    ) -> None:
        self._backend = backend
        self._on_signed_in = on_signed_in
        self._unsubscribe: Unsubscribe | None = None
        self.session: SessionInfo | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    async def start(self) -> None:
        self.session = await self._backend.get_session()
        self._unsubscribe = await self._backend.on_auth_change(self._handle_change)
        if self.session:
            logger.info("Restored session for %s", self.session.email)
        else:
            logger.info("No existing session; sign-in required")

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_change(self, event: str, session: SessionInfo | None) -> None:
        logger.debug("Auth event %s", event)
        self.session = session
        # A fresh session means the board should be re-read with new rights.
        if session is not None and self._on_signed_in is not None:
            self._on_signed_in()

    async def sign_in(self, email: str, password: str) -> SessionInfo:
        """Raises AuthenticationError when the backend rejects the credentials."""
        session = await self._backend.sign_in(email, password)
        self._handle_change("SIGNED_IN", session)
        return session

    async def sign_out(self) -> None:
        await self._backend.sign_out()
        self._handle_change("SIGNED_OUT", None)
