"""Per-IP throttling of the HTTP API."""

import httpx
import pytest

from propertypulse_backend.core.exceptions import ConfigurationError
from propertypulse_backend.core.rate_limit import RateLimitMiddleware
from propertypulse_backend.main import create_app


@pytest.fixture
async def limited_client(settings):
    settings = settings.model_copy(
        update={
            "rate_limit_enabled": True,
            "rate_limit_auth": "2/minute",
            "rate_limit_default": "3/minute",
        }
    )
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test/api") as client:
            yield client


LOGIN = {"email": "nobody@example.com", "password": "whatever-pass"}


async def test_auth_routes_have_a_stricter_window(limited_client):
    for _ in range(2):
        response = await limited_client.post("/auth/login", json=LOGIN)
        assert response.status_code == 401

    response = await limited_client.post("/auth/login", json=LOGIN)
    assert response.status_code == 429
    retry_after = int(response.headers["Retry-After"])
    assert 1 <= retry_after <= 60
    body = response.json()
    assert body["success"] is False
    assert body["data"] == {"retry_after": retry_after}

    # The general window is counted separately.
    assert (await limited_client.get("/health")).status_code == 200


async def test_limits_are_per_client_ip(limited_client):
    for _ in range(3):
        await limited_client.get("/health", headers={"X-Forwarded-For": "10.0.0.1"})
    blocked = await limited_client.get("/health", headers={"X-Forwarded-For": "10.0.0.1"})
    assert blocked.status_code == 429

    other = await limited_client.get("/health", headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.1"})
    assert other.status_code == 200


def test_invalid_limit_is_a_configuration_error(settings):
    settings = settings.model_copy(update={"rate_limit_default": "lots"})
    with pytest.raises(ConfigurationError):
        RateLimitMiddleware(app=None, settings=settings)
