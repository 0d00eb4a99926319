"""
Property matching for tenants.

Available properties are scored from 0 to 100 against a tenant profile.
Landlord terms from the property's match profile (pets, minimum income,
maximum occupants) are hard requirements; budget, bedrooms, city and
amenities add up to the score.
"""

import logging
from decimal import Decimal

from ...core.pagination import MAX_LIMIT, ListOptions
from ..properties.schemas import PropertyResponse
from .schemas import PropertyMatch, PropertyMatchProfileResponse, TenantProfileResponse

logger = logging.getLogger(__name__)

BUDGET_POINTS = 40
BEDROOM_POINTS = 20
CITY_POINTS = 20
AMENITY_POINTS = 20


def _budget_points(profile: TenantProfileResponse, rent: Decimal) -> tuple[int, str | None]:
    low, high = profile.budget_min, profile.budget_max
    if high is not None and rent > high:
        # Lose points in proportion to how far over budget the rent is.
        overshoot = (rent - high) / high if high else Decimal(1)
        return max(0, round(BUDGET_POINTS * (1 - 2 * float(overshoot)))), None
    if low is not None and rent < low:
        return BUDGET_POINTS // 2, None
    if low is None and high is None:
        return BUDGET_POINTS // 2, None
    return BUDGET_POINTS, "Rent is within your budget"


def _bedroom_points(profile: TenantProfileResponse, bedrooms: int) -> tuple[int, str | None]:
    if profile.bedrooms_min is None:
        return BEDROOM_POINTS // 2, None
    if bedrooms >= profile.bedrooms_min:
        return BEDROOM_POINTS, f"{bedrooms} bedroom(s) meets your minimum"
    return 0, None


def _city_points(profile: TenantProfileResponse, city: str) -> tuple[int, str | None]:
    preferred = {c.strip().lower() for c in profile.preferred_cities}
    if not preferred:
        return CITY_POINTS // 2, None
    if city.strip().lower() in preferred:
        return CITY_POINTS, f"Located in {city}"
    return 0, None


def _amenity_points(
    profile: TenantProfileResponse, amenities: list[str]
) -> tuple[int, str | None]:
    wanted = {a.strip().lower() for a in profile.amenities}
    if not wanted:
        return AMENITY_POINTS // 2, None
    offered = {a.strip().lower() for a in amenities}
    shared = wanted & offered
    if not shared:
        return 0, None
    points = round(AMENITY_POINTS * len(shared) / len(wanted))
    return points, f"Has {len(shared)} of {len(wanted)} amenities you want"


def meets_terms(
    profile: TenantProfileResponse, terms: PropertyMatchProfileResponse | None
) -> bool:
    """Whether the tenant satisfies the landlord's hard requirements."""
    if terms is None:
        return True
    if profile.has_pets and not terms.pets_allowed:
        return False
    if terms.max_occupants is not None and profile.household_size > terms.max_occupants:
        return False
    if terms.min_monthly_income is not None:
        if profile.monthly_income is None or profile.monthly_income < terms.min_monthly_income:
            return False
    return True


def score_property(
    profile: TenantProfileResponse,
    property_obj: PropertyResponse,
    terms: PropertyMatchProfileResponse | None = None,
) -> PropertyMatch | None:
    """Score one property, or None when the landlord's terms exclude the tenant."""
    if not meets_terms(profile, terms):
        return None

    parts = [
        _budget_points(profile, property_obj.rent_amount),
        _bedroom_points(profile, property_obj.bedrooms),
        _city_points(profile, property_obj.address_city),
        _amenity_points(profile, property_obj.amenities),
    ]
    reasons = [reason for _, reason in parts if reason]
    if terms is not None and profile.has_pets and terms.pets_allowed:
        reasons.append("Pets allowed")
    return PropertyMatch(
        property=property_obj,
        score=min(100, sum(points for points, _ in parts)),
        reasons=reasons,
    )


async def find_matches(
    factory, profile: TenantProfileResponse, limit: int = 10, min_score: int = 0
) -> list[PropertyMatch]:
    """Best-scoring available properties for ``profile``, highest first."""
    property_repo = factory.properties()
    terms_repo = factory.property_match_profiles()

    properties: list[PropertyResponse] = []
    skip = 0
    while True:
        page = await property_repo.find_available(
            ListOptions(skip=skip, limit=MAX_LIMIT)
        )
        properties.extend(page.items)
        if not page.has_next:
            break
        skip += MAX_LIMIT

    terms_by_property: dict[str, PropertyMatchProfileResponse] = {}
    ids = [p.id for p in properties]
    for start in range(0, len(ids), MAX_LIMIT):
        chunk = ids[start : start + MAX_LIMIT]
        page = await terms_repo.list(
            ListOptions(filters={"property_id": {"in": chunk}}, limit=MAX_LIMIT, populate=False)
        )
        terms_by_property.update({terms.property_id: terms for terms in page.items})

    matches = []
    for property_obj in properties:
        match = score_property(profile, property_obj, terms_by_property.get(property_obj.id))
        if match is not None and match.score >= min_score:
            matches.append(match)

    matches.sort(key=lambda m: (-m.score, m.property.rent_amount))
    logger.debug(
        "Scored properties for tenant",
        extra={"user_id": profile.user_id, "candidates": len(properties), "matches": len(matches)},
    )
    return matches[:limit]
