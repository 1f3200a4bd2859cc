"""HTTP tests for the FastAPI app over the in-memory backend."""

from decimal import Decimal

import pytest

from agency_hub.services.assistant import BRIEFING_KEY_MISSING, CHAT_KEY_MISSING
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD

RESERVATION_ROWS = [
    {"id": 11, "customer_name": "Maria Lopez", "email": "maria@example.com",
     "date": "2026-10-17", "time": "19:30", "guests": 6, "status": "confirmed"},
    {"id": 12, "customer_name": "Tom Baker", "email": "tom@example.com",
     "date": "2026-10-18", "time": "20:00", "guests": 2, "status": "pending"},
]


# ── System / auth ───────────────────────────────────────────
@pytest.mark.asyncio
async def test_health(test_client):
    resp = await test_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/projects"),
        ("get", "/analytics/summary"),
        ("get", "/reservations"),
        ("post", "/ai/shift-briefing"),
    ],
)
async def test_protected_routes_require_sign_in(test_client, method, path):
    resp = await getattr(test_client, method)(path)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Sign-in required."


@pytest.mark.asyncio
async def test_sign_in_and_session(test_client):
    resp = await test_client.post(
        "/auth/sign-in", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["authenticated"] is True
    assert body["email"] == ADMIN_EMAIL
    token = body["access_token"]
    assert token

    session = (
        await test_client.get("/auth/session", headers={"Authorization": f"Bearer {token}"})
    ).json()
    assert session["authenticated"] is True
    assert session["access_token"] is None

    assert (await test_client.get("/auth/session")).json()["authenticated"] is False
    projects = await test_client.get("/projects", headers={"Authorization": f"Bearer {token}"})
    assert projects.status_code == 200


@pytest.mark.asyncio
async def test_caller_without_token_is_rejected_while_signed_in(auth_client, anonymous_client):
    assert (await anonymous_client.get("/projects")).status_code == 401
    assert (await anonymous_client.post("/auth/sign-out")).status_code == 401

    # The signed-in caller is unaffected.
    assert (await auth_client.get("/projects")).status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["Bearer wrong-token", "Basic tok", "Bearer ", "tok"])
async def test_bad_authorization_header_is_rejected(auth_client, anonymous_client, header):
    resp = await anonymous_client.get("/projects", headers={"Authorization": header})

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_sign_in_bad_password(test_client):
    resp = await test_client.post(
        "/auth/sign-in", json={"email": ADMIN_EMAIL, "password": "nope"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid login credentials"


@pytest.mark.asyncio
async def test_sign_out(auth_client):
    resp = await auth_client.post("/auth/sign-out")
    assert resp.json() == {
        "authenticated": False,
        "user_id": None,
        "email": None,
        "role": None,
        "access_token": None,
    }
    assert (await auth_client.get("/projects")).status_code == 401


# ── Projects ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_projects(auth_client):
    resp = await auth_client.get("/projects")

    assert resp.status_code == 200
    body = resp.json()
    assert body["connection_status"] == "connected"
    assert body["count"] == 3
    first = body["projects"][0]
    assert first["client_name"] == "Acme Corp"
    assert first["value"] == "2500"
    assert [p["service_type"] for p in body["projects"]] == [
        "Web Development",
        "Ad Campaign",
        "AI Solutions",
    ]


@pytest.mark.asyncio
async def test_list_projects_search(auth_client):
    body = (await auth_client.get("/projects", params={"search": "acme.com"})).json()
    assert [p["client_name"] for p in body["projects"]] == ["Acme Corp"]


@pytest.mark.asyncio
async def test_refresh_reloads_from_backend(auth_client, fake_backend):
    await auth_client.get("/projects")
    calls = fake_backend.select_calls

    await auth_client.get("/projects")
    assert fake_backend.select_calls == calls

    await auth_client.get("/projects", params={"refresh": "true"})
    assert fake_backend.select_calls == calls + 1


@pytest.mark.asyncio
async def test_board_columns(auth_client):
    columns = (await auth_client.get("/projects/board")).json()["columns"]

    assert list(columns) == ["Lead", "Active", "Completed", "Cancelled"]
    assert [p["client_name"] for p in columns["Lead"]] == ["Bistro Nova"]
    assert [p["client_name"] for p in columns["Cancelled"]] == ["Helix Labs"]
    assert columns["Completed"] == []


@pytest.mark.asyncio
async def test_client_names(auth_client):
    resp = await auth_client.get("/projects/clients")
    assert resp.json() == ["Acme Corp", "Bistro Nova", "Helix Labs"]


@pytest.mark.asyncio
async def test_diagnostics_connected(auth_client):
    body = (await auth_client.get("/projects/diagnostics")).json()

    assert body["connection_status"] == "connected"
    assert body["debug_log"] == [
        f"Authenticated as: {ADMIN_EMAIL} (Role: authenticated)",
        "Attempting to fetch data...",
        "Success: Fetched 3 rows.",
    ]
    assert body["policy_sql"] is None


@pytest.mark.asyncio
async def test_diagnostics_suggests_policies_when_empty(auth_client, fake_backend):
    fake_backend.tables["projects"].clear()

    body = (await auth_client.get("/projects/diagnostics")).json()

    assert body["connection_status"] == "empty"
    assert body["debug_log"][-1] == "Success: No data found in table."
    assert "create policy" in body["policy_sql"]


@pytest.mark.asyncio
async def test_diagnostics_on_fetch_error(auth_client, fake_backend):
    fake_backend.fail_select = True

    body = (await auth_client.get("/projects/diagnostics")).json()

    assert body["connection_status"] == "error"
    assert body["debug_log"][-1].startswith("Error: permission denied")
    assert body["policy_sql"]


@pytest.mark.asyncio
async def test_create_project(auth_client, fake_backend):
    resp = await auth_client.post(
        "/projects",
        json={
            "client_name": "Northwind",
            "email": "hello@northwind.io",
            "service_type": "AI Solutions",
            "status": "Active",
            "value": "3200",
            "deadline": "2026-12-01",
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == "1001"
    assert body["client_name"] == "Northwind"
    assert Decimal(body["value"]) == Decimal("3200")

    inserted = fake_backend.tables["projects"][0]
    assert inserted["customer_name"] == "Northwind"
    assert inserted["service_name"] == "AI Solutions"
    assert inserted["SERVICE_PRICE"] == 3200

    listing = (await auth_client.get("/projects")).json()
    assert listing["count"] == 4
    assert listing["projects"][0] == body


@pytest.mark.asyncio
async def test_created_project_can_be_patched_by_returned_id(auth_client, fake_backend):
    created = (
        await auth_client.post("/projects/quick", json={"client_name": "Corner Cafe", "value": 900})
    ).json()

    resp = await auth_client.patch(f"/projects/{created['id']}", json={"status": "Active"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "Active"
    assert fake_backend.updates == [(created["id"], {"status": "Active"})]


@pytest.mark.asyncio
async def test_create_project_rejects_blank_name(auth_client):
    resp = await auth_client.post("/projects", json={"client_name": ""})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_quick_add(auth_client):
    resp = await auth_client.post(
        "/projects/quick",
        json={"client_name": "Corner Cafe", "value": "900", "service_type": "Ad Campaign"},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "Lead"
    assert body["notes"] == "Quick added from dashboard"


@pytest.mark.asyncio
async def test_create_from_quote_prices_server_side(auth_client, fake_backend):
    resp = await auth_client.post(
        "/projects/quote",
        json={
            "client_name": "Globex",
            "service_type": "Web Development",
            "feature_ids": ["responsive", "seo"],
            "rush": True,
            "manual_adjustment": -300,
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert Decimal(body["value"]) == Decimal("5000")
    assert body["notes"] == (
        "Features: Mobile Responsive, Advanced SEO Pack. "
        "Manual Adj: -300. [RUSH ORDER APPLIED]"
    )
    assert fake_backend.tables["projects"][0]["SERVICE_PRICE"] == 5000


@pytest.mark.asyncio
async def test_insert_failure_returns_502(auth_client, fake_backend):
    await auth_client.get("/projects")
    fake_backend.fail_insert = True

    resp = await auth_client.post("/projects/quick", json={"client_name": "Fail Co", "value": 10})

    assert resp.status_code == 502
    assert resp.json()["detail"].startswith("Failed to save to database:")
    # The optimistic row stays on the board until the next reload.
    listing = (await auth_client.get("/projects")).json()
    assert listing["projects"][0]["client_name"] == "Fail Co"


@pytest.mark.asyncio
async def test_patch_project(auth_client, fake_backend):
    resp = await auth_client.patch("/projects/3", json={"status": "Completed", "notes": "Shipped"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "Completed"
    assert body["notes"] == "Shipped"
    assert body["value"] == "2500"
    assert fake_backend.updates == [("3", {"status": "Completed", "description": "Shipped"})]


@pytest.mark.asyncio
async def test_patch_unknown_project(auth_client):
    resp = await auth_client.patch("/projects/999", json={"status": "Active"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_patch_failure_reverts(auth_client, fake_backend):
    fake_backend.fail_update = True

    resp = await auth_client.patch("/projects/2", json={"status": "Active"})

    assert resp.status_code == 502
    assert resp.json()["detail"] == "Failed to update project: update blocked"
    board = (await auth_client.get("/projects/board")).json()["columns"]
    assert [p["id"] for p in board["Lead"]] == ["2"]


# ── Pricing (no sign-in) ────────────────────────────────────
@pytest.mark.asyncio
async def test_pricing_catalog(test_client):
    body = (await test_client.get("/pricing/catalog")).json()

    assert {k: Decimal(v) for k, v in body["base_costs"].items()} == {
        "Web Development": Decimal("1500"),
        "AI Solutions": Decimal("2500"),
        "Ad Campaign": Decimal("1000"),
    }
    assert len(body["features"]) == 10


@pytest.mark.asyncio
async def test_pricing_catalog_for_category(test_client):
    body = (await test_client.get("/pricing/catalog", params={"service_type": "Ad Campaign"})).json()
    assert [f["id"] for f in body["features"]] == ["creatives", "ab_testing", "multi_platform"]
    assert {f["category"] for f in body["features"]} == {"Ad Campaign"}


@pytest.mark.asyncio
async def test_pricing_quote(test_client):
    resp = await test_client.post(
        "/pricing/quote",
        json={
            "service_type": "Web Development",
            "feature_ids": ["responsive", "seo", "rag"],
            "rush": False,
            "manual_adjustment": "-300",
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["total"]) == Decimal("2500")
    assert [f["id"] for f in body["features"]] == ["responsive", "seo"]
    assert body["notes"] == "Features: Mobile Responsive, Advanced SEO Pack. Manual Adj: -300."


@pytest.mark.asyncio
async def test_pricing_quote_non_numeric_adjustment(test_client):
    body = (
        await test_client.post(
            "/pricing/quote",
            json={"service_type": "Ad Campaign", "manual_adjustment": "abc"},
        )
    ).json()
    assert Decimal(body["total"]) == Decimal("1000")
    assert body["notes"] == "Features: Standard Package."


@pytest.mark.asyncio
async def test_pricing_quote_unknown_category(test_client):
    resp = await test_client.post("/pricing/quote", json={"service_type": "Catering"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_pricing_rescope(test_client):
    resp = await test_client.post(
        "/pricing/rescope",
        json={"service_type": "AI Solutions", "feature_ids": ["seo", "rag", "voice"]},
    )
    assert resp.json() == {"service_type": "AI Solutions", "feature_ids": ["rag", "voice"]}


# ── Analytics / reservations / AI ───────────────────────────
@pytest.mark.asyncio
async def test_analytics_summary(auth_client):
    body = (await auth_client.get("/analytics/summary")).json()

    assert body["total_projects"] == 3
    assert body["active_projects"] == 1
    assert body["new_leads"] == 1
    assert Decimal(body["pipeline_value"]) == Decimal("7700")
    assert Decimal(body["average_rating"]) == Decimal("4.0")
    assert body["conversion_rate"] == 33
    assert "AI Solutions" not in body["revenue_by_service"]
    assert body["service_distribution"]["AI Solutions"] == 1


@pytest.mark.asyncio
async def test_reservations_filters(auth_client, fake_backend):
    fake_backend.tables["reservations"] = [dict(r) for r in RESERVATION_ROWS]

    everything = (await auth_client.get("/reservations")).json()
    assert [r["id"] for r in everything] == ["11", "12"]

    confirmed = (await auth_client.get("/reservations", params={"status": "Confirmed"})).json()
    assert [r["customer_name"] for r in confirmed] == ["Maria Lopez"]

    searched = (await auth_client.get("/reservations", params={"search": "TOM"})).json()
    assert [r["id"] for r in searched] == ["12"]


@pytest.mark.asyncio
async def test_reservations_backend_failure(auth_client, fake_backend):
    fake_backend.fail_select = True
    resp = await auth_client.get("/reservations")
    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_ai_endpoints_without_key(auth_client, no_gemini_key):
    briefing = await auth_client.post("/ai/shift-briefing", json={"date": "2026-10-17"})
    assert briefing.status_code == 200
    assert briefing.json() == {"text": BRIEFING_KEY_MISSING}

    chat = await auth_client.post("/ai/chat", json={"message": "How busy is tonight?"})
    assert chat.json() == {"text": CHAT_KEY_MISSING}


@pytest.mark.asyncio
async def test_ai_chat_rejects_empty_message(auth_client):
    resp = await auth_client.post("/ai/chat", json={"message": ""})
    assert resp.status_code == 422
