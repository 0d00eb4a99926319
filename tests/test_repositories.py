"""Contract tests every repository satisfies on every target."""

from datetime import timedelta
from decimal import Decimal

import pytest

from propertypulse_backend.core.exceptions import (
    ConflictError,
    NotFoundError,
    RelatedResourceNotFoundError,
    ValidationError,
)
from propertypulse_backend.core.pagination import ListOptions
from propertypulse_backend.core.utils import new_id, utc_now

from .conftest import property_data

MISSING_ID = "00000000-0000-4000-8000-000000000000"


async def seed_all(factory, landlord, tenant, property_obj, lease):
    """One record of every entity, keyed by repository name."""
    now = utc_now()
    return {
        "users": landlord,
        "properties": property_obj,
        "leases": lease,
        "payments": await factory.payments().create(
            {
                "lease_id": lease.id,
                "tenant_id": tenant.id,
                "amount": Decimal("1500.00"),
                "due_date": now + timedelta(days=3),
            }
        ),
        "maintenance_tickets": await factory.maintenance_tickets().create(
            {
                "property_id": property_obj.id,
                "tenant_id": tenant.id,
                "title": "Leaking tap",
                "description": "Kitchen tap drips all night",
            }
        ),
        "applications": await factory.applications().create(
            {
                "property_id": property_obj.id,
                "applicant_id": tenant.id,
                "first_name": "Theo",
                "last_name": "Tenant",
                "email": "tenant@example.com",
            }
        ),
        "tenant_profiles": await factory.tenant_profiles().upsert_for_user(
            tenant.id, {"budget_max": Decimal("1800.00")}
        ),
        "property_match_profiles": await factory.property_match_profiles().upsert_for_property(
            property_obj.id, {"pets_allowed": True}
        ),
        "feedback": await factory.feedback().create(
            {
                "from_user_id": tenant.id,
                "to_user_id": landlord.id,
                "lease_id": lease.id,
                "thumbs_up": True,
            }
        ),
    }


async def test_create_then_find_returns_equal_value(factory, landlord, tenant, property_obj, lease):
    created = await seed_all(factory, landlord, tenant, property_obj, lease)
    for name, record in created.items():
        found = await factory.get(name).find_by_id(record.id)
        assert found == record, name


async def test_missing_ids(factory, landlord, tenant, property_obj, lease):
    await seed_all(factory, landlord, tenant, property_obj, lease)
    for name in factory.database_info()["repositories"]:
        repo = factory.get(name)
        assert await repo.find_by_id(MISSING_ID) is None
        assert await repo.update(MISSING_ID, {}) is None
        assert await repo.delete(MISSING_ID) is False


async def test_relations_are_populated(factory, landlord, property_obj):
    assert property_obj.landlord is not None
    assert property_obj.landlord.id == landlord.id
    assert property_obj.landlord.role == "LANDLORD"

    bare = await factory.properties().find_by_id(property_obj.id, populate=False)
    assert bare.landlord is None


async def test_ids_are_opaque_strings(factory, landlord):
    assert isinstance(landlord.id, str)
    assert len(landlord.id) == 36
    assert landlord.created_at.tzinfo is not None


async def test_list_pagination_metadata(factory, landlord):
    for i in range(7):
        await factory.properties().create(property_data(landlord.id, title=f"Unit {i}"))

    page = await factory.properties().list(ListOptions(skip=3, limit=3))
    assert page.total == 7
    assert page.page == 2
    assert page.total_pages == 3
    assert len(page.items) == 3
    assert page.has_next and page.has_previous

    last = await factory.properties().list({"skip": 6, "limit": 3})
    assert last.page == 3
    assert len(last.items) == 1
    assert not last.has_next


async def test_list_default_sort_is_newest_first(factory, landlord):
    first = await factory.properties().create(property_data(landlord.id, title="First"))
    second = await factory.properties().create(property_data(landlord.id, title="Second"))
    page = await factory.properties().list()
    assert [p.id for p in page.items[:2]] == [second.id, first.id]


async def test_list_rejects_bad_pagination(factory):
    with pytest.raises(ValidationError):
        await factory.properties().list(ListOptions(skip=-1))
    with pytest.raises(ValidationError):
        await factory.properties().list(ListOptions(limit=101))


async def test_list_rejects_unknown_filter_field(factory):
    with pytest.raises(ValidationError) as exc_info:
        await factory.properties().list(ListOptions(filters={"landlord": "x"}))
    assert exc_info.value.field == "landlord"


async def test_count_with_filters(factory, landlord):
    await factory.properties().create(property_data(landlord.id, bedrooms=1))
    await factory.properties().create(property_data(landlord.id, bedrooms=3))
    assert await factory.properties().count() == 2
    assert await factory.properties().count({"bedrooms": {"gte": 2}}) == 1


async def test_missing_foreign_key_is_reported(factory):
    with pytest.raises(RelatedResourceNotFoundError) as exc_info:
        await factory.properties().create(property_data(new_id()))
    error = exc_info.value
    assert isinstance(error, ConflictError)
    assert isinstance(error, NotFoundError)
    assert error.status == 404
    assert error.details["code"] == "P2003"


async def test_duplicate_email_conflicts(factory, landlord):
    with pytest.raises(ConflictError) as exc_info:
        await factory.users().create(
            {"email": "landlord@example.com", "first_name": "Dup", "last_name": "User"}
        )
    assert exc_info.value.status == 409
    assert exc_info.value.details["code"] == "P2002"


async def test_invalid_input_raises_validation_error(factory, landlord):
    with pytest.raises(ValidationError) as exc_info:
        await factory.properties().create(property_data(landlord.id, rent_amount=-5))
    assert exc_info.value.field == "rent_amount"
    assert exc_info.value.status == 400


async def test_update_applies_partial_patch(factory, property_obj):
    updated = await factory.properties().update(
        property_obj.id, {"rent_amount": Decimal("1650.00"), "amenities": ["pool"]}
    )
    assert updated.rent_amount == Decimal("1650.00")
    assert updated.amenities == ["pool"]
    assert updated.title == property_obj.title
    assert updated.updated_at >= property_obj.updated_at


async def test_delete_cascades_to_dependants(factory, landlord, tenant, property_obj, lease):
    created = await seed_all(factory, landlord, tenant, property_obj, lease)

    assert await factory.properties().delete(property_obj.id) is True

    for name in ("leases", "payments", "maintenance_tickets", "applications", "property_match_profiles"):
        assert await factory.get(name).find_by_id(created[name].id) is None, name
    # Feedback only loses its lease reference.
    feedback = await factory.feedback().find_by_id(created["feedback"].id)
    assert feedback is not None
    assert feedback.lease_id is None


async def test_deleting_user_nulls_application_applicant(factory, landlord, tenant, property_obj):
    application = await factory.applications().create(
        {
            "property_id": property_obj.id,
            "applicant_id": tenant.id,
            "first_name": "Theo",
            "last_name": "Tenant",
            "email": "tenant@example.com",
        }
    )
    await factory.users().delete(tenant.id)
    found = await factory.applications().find_by_id(application.id)
    assert found.applicant_id is None
    assert found.applicant is None
