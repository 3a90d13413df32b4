"""
API tests for the schools endpoints.
"""

import pytest

from mwalimu.core.rate_limit import RateLimiter
from mwalimu.modules.schools.service import SchoolRegistry
from mwalimu.modules.schools.store import SchoolRecord, StoreError, StorePolicyDenied

from .conftest import InMemorySchoolStore


@pytest.fixture
def store(api_app):
    store = InMemorySchoolStore(
        [
            SchoolRecord(id="1", name="Zeta", county="Nairobi"),
            SchoolRecord(id="2", name="Alpha Primary", county="Nairobi"),
            SchoolRecord(id="3", name="Mid", county="Kiambu"),
        ]
    )
    api_app.state.school_registry = SchoolRegistry(store)
    return store


class TestListSchoolsEndpoint:
    """Tests for GET /schools."""

    @pytest.mark.asyncio
    async def test_lists_schools_by_name(self, client, store):
        response = await client.get("/api/v1/schools", params={"county": "Nairobi"})

        assert response.status_code == 200
        body = response.json()
        assert body["county"] == "Nairobi"
        assert [school["name"] for school in body["schools"]] == ["Alpha Primary", "Zeta"]
        assert body["total"] == 2

    @pytest.mark.asyncio
    async def test_county_is_required(self, client, store):
        response = await client.get("/api/v1/schools")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_store_failure_is_503(self, client, store, api_app):
        store.list_by_county = _raise(StoreError("down"))

        response = await client.get("/api/v1/schools", params={"county": "Nairobi"})

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "STORE_UNAVAILABLE"


class TestResolveSchoolEndpoint:
    """Tests for POST /schools."""

    @pytest.mark.asyncio
    async def test_existing_school_is_resolved(self, client, store):
        response = await client.post(
            "/api/v1/schools", json={"name": "  alpha primary ", "county": "Nairobi"}
        )

        assert response.status_code == 200
        assert response.json() == {"id": "2", "name": "Alpha Primary", "county": "Nairobi"}
        assert store.insert_calls == 0

    @pytest.mark.asyncio
    async def test_new_school_is_created(self, client, store):
        response = await client.post(
            "/api/v1/schools", json={"name": "Beta Academy", "county": "Kiambu"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Beta Academy"
        assert body["id"]
        assert store.insert_calls == 1

    @pytest.mark.asyncio
    async def test_blank_name_is_422(self, client, store):
        response = await client.post("/api/v1/schools", json={"name": "   ", "county": "Kiambu"})

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "INVALID_INPUT"
        assert store.total_calls == 0

    @pytest.mark.asyncio
    async def test_unknown_county_is_422(self, client, store):
        response = await client.post(
            "/api/v1/schools", json={"name": "Ghost School", "county": "Atlantis"}
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error"] == "INVALID_INPUT"
        assert "Atlantis" in detail["message"]
        assert store.total_calls == 0
        assert all(record.county != "Atlantis" for record in store.records)

    @pytest.mark.asyncio
    async def test_county_match_is_exact(self, client, store):
        response = await client.post(
            "/api/v1/schools", json={"name": "Beta Academy", "county": "kiambu"}
        )

        assert response.status_code == 422
        assert store.insert_calls == 0

    @pytest.mark.asyncio
    async def test_policy_denial_is_403_with_hint(self, client, store):
        store.insert_error = StorePolicyDenied("row-level security", code="42501")

        response = await client.post(
            "/api/v1/schools", json={"name": "Beta Academy", "county": "Kiambu"}
        )

        assert response.status_code == 403
        detail = response.json()["detail"]
        assert detail["error"] == "WRITE_POLICY_DENIED"
        assert detail["hint"]

    @pytest.mark.asyncio
    async def test_rate_limit_applies(self, client, store, api_app, monkeypatch):
        limiter = RateLimiter()
        api_app.state.rate_limiter = limiter
        monkeypatch.setattr(limiter, "_check_memory", lambda key, limit, window: False)

        response = await client.post(
            "/api/v1/schools", json={"name": "Beta Academy", "county": "Kiambu"}
        )

        assert response.status_code == 429
        assert store.insert_calls == 0


class TestListCountiesEndpoint:
    """Tests for GET /schools/counties."""

    @pytest.mark.asyncio
    async def test_lists_all_counties_alphabetically(self, client):
        response = await client.get("/api/v1/schools/counties")

        assert response.status_code == 200
        counties = response.json()["counties"]
        assert len(counties) == 47
        assert counties[0] == {"name": "Baringo", "code": "01"}


def _raise(error):
    async def fail(*args, **kwargs):
        raise error

    return fail
