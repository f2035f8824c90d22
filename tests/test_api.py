"""HTTP-level tests for the auth and visitors routers."""

from datetime import UTC, datetime, timedelta

import pytest

from visitor_dashboard.core.config import settings
from visitor_dashboard.core.security import create_access_token
from visitor_dashboard.models import Visitor

ADMIN_PASSWORD = "admin123"

VISITOR_ROUTES = [
    "/api/visitors",
    "/api/visitors/stats",
    "/api/visitors/chart-data",
    "/api/visitors/export",
    "/api/visitors/unique-hosts",
    "/api/visitors/unique-types",
]


class TestHealthCheck:
    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "OK"


class TestLogin:
    async def test_login_returns_token(self, client, admin):
        resp = await client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
        assert resp.status_code == 200
        token = resp.json()["token"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["username"] == "admin"

    async def test_wrong_password(self, client, admin):
        resp = await client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials."

    async def test_unknown_user(self, client, admin):
        resp = await client.post("/api/auth/login", json={"username": "ghost", "password": ADMIN_PASSWORD})
        assert resp.status_code == 401

    async def test_missing_fields(self, client):
        resp = await client.post("/api/auth/login", json={"username": "admin"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Username and password required."


class TestRateLimit:
    async def test_login_over_limit_is_429(self, client, admin, monkeypatch):
        monkeypatch.setattr(settings, "LOGIN_RATE_LIMIT", "2/minute")
        credentials = {"username": "admin", "password": ADMIN_PASSWORD}

        for _ in range(2):
            assert (await client.post("/api/auth/login", json=credentials)).status_code == 200

        resp = await client.post("/api/auth/login", json=credentials)
        assert resp.status_code == 429
        assert resp.json()["error"] == "Too many requests"

    async def test_failed_logins_count_toward_limit(self, client, admin, monkeypatch):
        monkeypatch.setattr(settings, "LOGIN_RATE_LIMIT", "3/minute")
        for _ in range(3):
            resp = await client.post("/api/auth/login", json={"username": "admin", "password": "guess"})
            assert resp.status_code == 401

        resp = await client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
        assert resp.status_code == 429

    async def test_other_routes_use_the_general_limit(self, client, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT", "2/minute")
        assert (await client.get("/api/health")).status_code == 200
        assert (await client.get("/api/health")).status_code == 200
        assert (await client.get("/api/health")).status_code == 429


class TestAuthRequired:
    @pytest.mark.parametrize("path", VISITOR_ROUTES)
    async def test_missing_token(self, client, path):
        resp = await client.get(path)
        assert resp.status_code == 401

    @pytest.mark.parametrize("path", VISITOR_ROUTES)
    async def test_garbage_token(self, client, path):
        resp = await client.get(path, headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    async def test_expired_token(self, client, admin):
        token = create_access_token(admin.id, admin.username, expires_delta=timedelta(minutes=-1))
        resp = await client.get("/api/visitors", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401


class TestListingEndpoint:
    async def test_example_listing(self, client, auth_headers, add_visitors):
        await add_visitors(
            {"id": "a" * 24, "type": "vendor", "host": "Alice", "purpose": "Delivery",
             "entry_time": datetime(2025, 1, 5, 10, tzinfo=UTC)},
            {"id": "b" * 24, "type": "guest", "host": "Bob", "purpose": "Meeting",
             "timestamp": datetime(2025, 1, 6, 9, tzinfo=UTC)},
        )

        resp = await client.get("/api/visitors", params={"page": 1, "limit": 20}, headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert [v["_id"] for v in data["visitors"]] == ["b" * 24, "a" * 24]
        assert data["visitors"][0]["Host"] == "Bob"
        assert data["visitors"][0]["Name"] == "Unknown"
        assert data["visitors"][0]["EntryTime"].startswith("2025-01-06T09:00:00")
        assert data["pagination"] == {"current": 1, "pages": 1, "total": 2, "hasNext": False, "hasPrev": False}

    async def test_bad_paging_parameters_fall_back_to_defaults(self, client, auth_headers, add_visitors):
        await add_visitors(*({"entry_time": datetime(2025, 1, 1, tzinfo=UTC)} for _ in range(60)))

        resp = await client.get("/api/visitors", params={"page": "abc", "limit": "-5"}, headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert len(data["visitors"]) == 50
        assert data["pagination"]["current"] == 1
        assert data["pagination"]["pages"] == 2

    @pytest.mark.parametrize(
        "params, returned",
        [
            ({"page": "99999999999999999999"}, 0),
            ({"limit": "99999999999999999999"}, 2),
            ({"page": "99999999999999999999", "limit": "99999999999999999999"}, 0),
        ],
    )
    async def test_huge_paging_values_are_a_normal_page(self, client, auth_headers, add_visitors, params, returned):
        await add_visitors({"entry_time": datetime(2025, 1, 1, tzinfo=UTC)}, {"entry_time": datetime(2025, 1, 2, tzinfo=UTC)})

        resp = await client.get("/api/visitors", params=params, headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert len(data["visitors"]) == returned
        assert data["pagination"]["total"] == 2

    async def test_filters_from_query_string(self, client, auth_headers, add_visitors):
        await add_visitors(
            {"id": "1" * 24, "host": "Acme Desk", "entry_time": datetime(2025, 1, 5, 12, tzinfo=UTC)},
            {"id": "2" * 24, "host": "Acme Desk", "entry_time": datetime(2025, 2, 5, 12, tzinfo=UTC)},
            {"id": "3" * 24, "host": "Globex", "entry_time": datetime(2025, 1, 5, 13, tzinfo=UTC)},
        )

        resp = await client.get(
            "/api/visitors",
            params={"search": "acme", "startDate": "2025-01-05", "endDate": "2025-01-05"},
            headers=auth_headers,
        )

        assert [v["_id"] for v in resp.json()["visitors"]] == ["1" * 24]

    async def test_malformed_dates_are_ignored(self, client, auth_headers, add_visitors):
        await add_visitors({"entry_time": datetime(2025, 1, 5, tzinfo=UTC)})
        resp = await client.get("/api/visitors", params={"startDate": "yesterday"}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["pagination"]["total"] == 1


class TestOtherEndpoints:
    async def test_stats(self, client, auth_headers, add_visitors):
        now = datetime.now(UTC)
        await add_visitors({"type": "guest", "entry_time": now}, {"type": "vendor", "host": "Bob"})

        resp = await client.get("/api/visitors/stats", headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()
        assert data["totalVisitors"] == 2
        assert data["todayVisitors"] == 1
        assert data["typeStats"] == [{"_id": "guest", "count": 1}, {"_id": "vendor", "count": 1}]
        assert data["topHosts"] == [{"_id": "Alice", "count": 1}, {"_id": "Bob", "count": 1}]

    async def test_chart_data(self, client, auth_headers, add_visitors):
        now = datetime.now(UTC)
        await add_visitors({"entry_time": now}, {"entry_time": now - timedelta(days=90)})

        resp = await client.get("/api/visitors/chart-data", params={"days": "nonsense"}, headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == [{"_id": now.date().isoformat(), "count": 1}]

    async def test_export(self, client, auth_headers, add_visitors):
        await add_visitors(*({"type": "vendor"} for _ in range(3)), {"type": "guest"})
        resp = await client.get("/api/visitors/export", params={"type": "vendor"}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["total"] == 3
        assert all(v["Type"] == "vendor" for v in resp.json()["visitors"])

    async def test_unique_values(self, client, auth_headers, add_visitors):
        await add_visitors({"type": "vendor", "host": "Zed"}, {"type": "guest", "host": "Alice"})
        hosts = await client.get("/api/visitors/unique-hosts", headers=auth_headers)
        types = await client.get("/api/visitors/unique-types", headers=auth_headers)
        assert hosts.json() == ["Alice", "Zed"]
        assert types.json() == ["guest", "vendor"]


class TestStoreFailure:
    @pytest.mark.parametrize(
        "path, error",
        [
            ("/api/visitors", "Failed to fetch visitors"),
            ("/api/visitors/stats", "Failed to fetch statistics"),
            ("/api/visitors/chart-data", "Failed to fetch chart data"),
            ("/api/visitors/export", "Failed to export visitors"),
            ("/api/visitors/unique-hosts", "Failed to fetch hosts"),
        ],
    )
    async def test_store_error_is_a_single_500(self, client, auth_headers, engine, path, error):
        async with engine.begin() as conn:
            await conn.run_sync(Visitor.__table__.drop)

        resp = await client.get(path, headers=auth_headers)

        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == error
        assert "visitors" in body["message"]
