"""Scoring of properties against tenant profiles."""

from decimal import Decimal

import pytest

from propertypulse_backend.core.utils import utc_now
from propertypulse_backend.modules.profiles.schemas import (
    PropertyMatchProfileResponse,
    TenantProfileResponse,
)
from propertypulse_backend.modules.profiles.services import (
    find_matches,
    meets_terms,
    score_property,
)
from propertypulse_backend.modules.properties.schemas import PropertyResponse

from .conftest import property_data


def stamped(**values):
    now = utc_now()
    return {"id": "x-1", "created_at": now, "updated_at": now, **values}


def tenant_profile(**values) -> TenantProfileResponse:
    return TenantProfileResponse(**stamped(user_id="u-1", **values))


def listing(**overrides) -> PropertyResponse:
    return PropertyResponse(**stamped(**property_data("l-1", **overrides)))


def terms(**values) -> PropertyMatchProfileResponse:
    return PropertyMatchProfileResponse(**stamped(property_id="p-1", **values))


def test_perfect_match_scores_100():
    profile = tenant_profile(
        budget_min=Decimal("1000"),
        budget_max=Decimal("1600"),
        bedrooms_min=2,
        preferred_cities=["austin"],
        amenities=["Parking"],
    )
    match = score_property(profile, listing())
    assert match.score == 100
    assert "Rent is within your budget" in match.reasons
    assert "Located in Austin" in match.reasons


def test_empty_profile_gives_neutral_score():
    match = score_property(tenant_profile(), listing())
    assert match.score == 50
    assert match.reasons == []


@pytest.mark.parametrize(
    "rent,points",
    [("1500.00", 40), ("1650.00", 32), ("2400.00", 0), ("800.00", 20)],
)
def test_budget_points(rent, points):
    profile = tenant_profile(budget_min=Decimal("1000"), budget_max=Decimal("1500"))
    match = score_property(profile, listing(rent_amount=Decimal(rent)))
    # Other criteria are unset and contribute half points each.
    assert match.score == points + 30


def test_partial_amenity_overlap():
    profile = tenant_profile(amenities=["parking", "pool", "gym", "laundry"])
    match = score_property(profile, listing())
    assert match.score == 20 + 10 + 10 + 10
    assert "Has 2 of 4 amenities you want" in match.reasons


def test_too_few_bedrooms_scores_zero_for_bedrooms():
    match = score_property(tenant_profile(bedrooms_min=3), listing(bedrooms=2))
    assert match.score == 20 + 0 + 10 + 10


def test_landlord_terms_are_hard_requirements():
    pet_owner = tenant_profile(has_pets=True, household_size=3, monthly_income=Decimal("5000"))

    assert meets_terms(pet_owner, None)
    assert not meets_terms(pet_owner, terms(pets_allowed=False))
    assert not meets_terms(pet_owner, terms(pets_allowed=True, max_occupants=2))
    assert not meets_terms(
        pet_owner, terms(pets_allowed=True, min_monthly_income=Decimal("6000"))
    )
    assert meets_terms(
        pet_owner,
        terms(pets_allowed=True, max_occupants=4, min_monthly_income=Decimal("4500")),
    )

    assert score_property(pet_owner, listing(), terms(pets_allowed=False)) is None
    match = score_property(pet_owner, listing(), terms(pets_allowed=True))
    assert "Pets allowed" in match.reasons


def test_unknown_income_fails_income_requirement():
    assert not meets_terms(tenant_profile(), terms(min_monthly_income=Decimal("1")))


async def test_find_matches_keeps_one_backend_when_target_switches(factory, landlord, monkeypatch):
    home = await factory.properties().create(property_data(landlord.id))
    await factory.property_match_profiles().upsert_for_property(home.id, {"pets_allowed": False})
    other = next(t for t in factory.configured_targets if t != factory.active_target)

    repo = factory.properties()
    find_available = repo.find_available

    async def find_then_switch(*args, **kwargs):
        page = await find_available(*args, **kwargs)
        await factory.switch_database(other)
        return page

    monkeypatch.setattr(repo, "find_available", find_then_switch)

    pet_owner = tenant_profile(has_pets=True)
    assert await find_matches(factory, pet_owner) == []
    assert factory.active_target == other
