"""
Shared fixtures for API tests.
"""

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt

from mwalimu.api import api_router
from mwalimu.core.config import Settings, get_settings

TEST_JWT_SECRET = "test-secret-key-for-testing-only"


@pytest.fixture
def test_settings():
    """Settings with a known token secret and no assistant key."""
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        jwt_algorithm="HS256",
        jwt_audience="authenticated",
        gemini_api_key=None,
    )


@pytest.fixture
def api_app(test_settings):
    """
    The API routers mounted on a bare app.

    The lifespan is not run; tests put the services they need on app.state.
    """
    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_settings] = lambda: test_settings
    return app


@pytest_asyncio.fixture
async def client(api_app):
    """HTTP client for the test app."""
    async with AsyncClient(transport=ASGITransport(app=api_app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_token():
    """Build an access token like the identity provider issues."""

    def build(role: str | None = "STUDENT", sub: str = "user-1", **metadata) -> str:
        user_metadata = dict(metadata)
        if role is not None:
            user_metadata["role"] = role
        claims = {
            "sub": sub,
            "email": f"{sub}@example.com",
            "aud": "authenticated",
            "user_metadata": user_metadata,
        }
        return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")

    return build
