"""
Shared test fixtures for agency_hub.

Uses an in-memory BackendGateway (no live Supabase), the FastAPI app over
httpx's ASGITransport, and mocked LLM calls.
"""

import os
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("GEMINI_API_KEY", "")

from agency_hub.auth.errors import AuthenticationError  # noqa: E402
from agency_hub.core.backend import AuthListener, BackendError  # noqa: E402
from agency_hub.core.state import DashboardState  # noqa: E402
from agency_hub.main import app  # noqa: E402
from agency_hub.models.session import SessionInfo  # noqa: E402

ADMIN_EMAIL = "admin@nexgen.com"
ADMIN_PASSWORD = "correct-horse"


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------

class FakeBackend:
    """BackendGateway double: tables are lists of dicts, newest first."""

    def __init__(
        self,
        projects: list[dict[str, Any]] | None = None,
        reservations: list[dict[str, Any]] | None = None,
    ) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            "projects": [dict(r) for r in projects or []],
            "reservations": [dict(r) for r in reservations or []],
        }
        self.passwords = {ADMIN_EMAIL: ADMIN_PASSWORD}
        self.session: SessionInfo | None = None
        self.listeners: list[AuthListener] = []
        self.fail_select = False
        self.fail_insert = False
        self.fail_update = False
        self.select_calls = 0
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self._next_id = 1000

    def _notify(self, event: str) -> None:
        for listener in list(self.listeners):
            listener(event, self.session)

    async def sign_in(self, email: str, password: str) -> SessionInfo:
        if self.passwords.get(email) != password:
            raise AuthenticationError("Invalid login credentials")
        self.session = SessionInfo(
            user_id="user-1", email=email, role="authenticated", access_token="tok"
        )
        self._notify("SIGNED_IN")
        return self.session

    async def sign_out(self) -> None:
        self.session = None
        self._notify("SIGNED_OUT")

    async def get_session(self) -> SessionInfo | None:
        return self.session

    async def on_auth_change(self, listener: AuthListener):
        self.listeners.append(listener)
        return lambda: self.listeners.remove(listener)

    async def select_all(self, table: str) -> list[dict[str, Any]]:
        self.select_calls += 1
        if self.fail_select:
            raise BackendError("permission denied for table projects")
        return [dict(r) for r in self.tables.get(table, [])]

    async def insert_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        if self.fail_insert:
            raise BackendError("new row violates row-level security policy")
        self._next_id += 1
        stored = {"id": self._next_id, **row}
        self.tables.setdefault(table, []).insert(0, stored)
        return dict(stored)

    async def update_row(self, table: str, row_id: str, row: dict[str, Any]) -> None:
        if self.fail_update:
            raise BackendError("update blocked")
        self.updates.append((row_id, row))
        for existing in self.tables.get(table, []):
            if str(existing.get("id")) == row_id:
                existing.update(row)


SAMPLE_ROWS = [
    {
        "id": 3,
        "customer_name": "Acme Corp",
        "email": "ops@acme.com",
        "phone_number": "+1 555 0100",
        "service_name": "Web Development",
        "SERVICE_PRICE": 2500,
        "status": "Active",
        "created_at": "2026-10-01T09:30:00+00:00",
        "description": "Features: Mobile Responsive.",
        "rating": 5,
    },
    {
        "id": 2,
        "client_name": "Bistro Nova",
        "service_type": "marketing push",
        "value": "1200",
        "state": "prospect",
        "created_at": "2026-09-15T12:00:00Z",
    },
    {
        "id": 1,
        "customer_name": "Helix Labs",
        "SERVICE": "chatbot",
        "SERVICE_PRICE": "4000",
        "status": "archived",
        "created_at": "2026-08-01T08:00:00Z",
        "rating": 3,
    },
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend(projects=SAMPLE_ROWS)


@pytest_asyncio.fixture()
async def dashboard(fake_backend):
    """Started DashboardState over the fake backend (not signed in)."""
    state = DashboardState(fake_backend)
    await state.start()
    yield state
    state.stop()


@pytest_asyncio.fixture()
async def signed_in(dashboard):
    await dashboard.auth.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    return dashboard


@pytest_asyncio.fixture()
async def test_client(dashboard):
    """HTTP client against the app, with the fake dashboard state installed."""
    app.state.dashboard = dashboard
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    del app.state.dashboard


@pytest_asyncio.fixture()
async def auth_client(signed_in, test_client):
    """test_client carrying the signed-in session's Bearer token."""
    test_client.headers["Authorization"] = f"Bearer {signed_in.auth.session.access_token}"
    return test_client


@pytest_asyncio.fixture()
async def anonymous_client(auth_client):
    """A second caller without any token, while the dashboard is signed in."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture()
def gemini_key(monkeypatch):
    monkeypatch.setattr("agency_hub.core.config.settings.GEMINI_API_KEY", "gk-test")
    return "gk-test"


@pytest.fixture()
def no_gemini_key(monkeypatch):
    monkeypatch.setattr("agency_hub.core.config.settings.GEMINI_API_KEY", "")
