"""Shared fixtures: settings, a repository factory per target and seed records."""

from datetime import timedelta
from decimal import Decimal

import pytest

from propertypulse_backend.config import Settings
from propertypulse_backend.core.repository_factory import RepositoryFactory
from propertypulse_backend.core.utils import utc_now

TARGETS = ["postgres", "json"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        app_env="test",
        app_debug=False,
        database_target="postgres",
        database_url="sqlite+aiosqlite:///:memory:",
        database_create_tables=True,
        document_store_enabled=True,
        document_store_path=None,
        rate_limit_enabled=False,
        jwt_secret_key="test-secret",
        log_level="WARNING",
        log_format="json",
    )


@pytest.fixture(params=TARGETS)
async def factory(request, settings):
    """A started factory whose active target is each backend in turn."""
    factory = RepositoryFactory(settings.model_copy(update={"database_target": request.param}))
    await factory.start()
    yield factory
    await factory.close()


@pytest.fixture
async def landlord(factory):
    return await factory.users().create(
        {
            "email": "Landlord@Example.com",
            "first_name": "Lena",
            "last_name": "Lord",
            "role": "LANDLORD",
            "password": "landlord-pass",
        }
    )


@pytest.fixture
async def tenant(factory):
    return await factory.users().create(
        {
            "email": "tenant@example.com",
            "first_name": "Theo",
            "last_name": "Tenant",
            "role": "TENANT",
            "password": "tenant-pass",
        }
    )


def property_data(landlord_id: str, **overrides) -> dict:
    data = {
        "landlord_id": landlord_id,
        "title": "Sunny two bedroom",
        "address_street": "1 Main St",
        "address_city": "Austin",
        "address_state": "TX",
        "address_zip": "73301",
        "bedrooms": 2,
        "bathrooms": Decimal("1.5"),
        "rent_amount": Decimal("1500.00"),
        "amenities": ["parking", "laundry"],
    }
    data.update(overrides)
    return data


@pytest.fixture
async def property_obj(factory, landlord):
    return await factory.properties().create(property_data(landlord.id))


@pytest.fixture
async def lease(factory, property_obj, tenant):
    now = utc_now()
    return await factory.leases().create(
        {
            "property_id": property_obj.id,
            "tenant_id": tenant.id,
            "start_date": now - timedelta(days=30),
            "end_date": now + timedelta(days=335),
            "monthly_rent": Decimal("1500.00"),
        }
    )
