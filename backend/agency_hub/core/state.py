"""
Per-application dashboard state.

Built once in the lifespan and stored on `app.state.dashboard`; routers
reach it through the dependencies in auth/dependencies.py.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from agency_hub.auth.session import AuthSession
from agency_hub.core.backend import BackendGateway
from agency_hub.services.assistant import Assistant
from agency_hub.services.project_board import ProjectBoard

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    backend: BackendGateway
    board: ProjectBoard = field(init=False)
    auth: AuthSession = field(init=False)
    assistant: Assistant = field(default_factory=Assistant)

    def __post_init__(self) -> None:
        self.board = ProjectBoard(self.backend)
        # Signing in invalidates the board so the next read reloads it.
        self.auth = AuthSession(self.backend, on_signed_in=self.board.invalidate)

    async def start(self) -> None:
        await self.auth.start()

    def stop(self) -> None:
        self.auth.stop()
        logger.info("Auth listener unsubscribed ✓")
