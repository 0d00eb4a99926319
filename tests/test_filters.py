"""Filter language, sorting and pagination helpers."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from propertypulse_backend.core.exceptions import ValidationError
from propertypulse_backend.core.filters import (
    FilterCondition,
    SortDirection,
    SortField,
    matches,
    parse_filters,
    parse_sort,
    sort_documents,
)
from propertypulse_backend.core.pagination import (
    MAX_LIMIT,
    ListOptions,
    Page,
    validate_pagination_params,
)

FIELDS = {"status", "rent", "city", "amenities", "due"}


def test_parse_filters_drops_none_and_expands_operators():
    conditions = parse_filters(
        {"status": "ACTIVE", "city": None, "rent": {"gte": 100, "lte": None}}, FIELDS
    )
    assert conditions == [
        FilterCondition("status", "eq", "ACTIVE"),
        FilterCondition("rent", "gte", 100),
    ]


@pytest.mark.parametrize(
    "filters",
    [{"owner": 1}, {"rent": {"between": [1, 2]}}, {"status": {"in": "ACTIVE"}}],
)
def test_parse_filters_rejects_bad_input(filters):
    with pytest.raises(ValidationError):
        parse_filters(filters, FIELDS)


def test_parse_sort():
    assert parse_sort({"rent": "ASC"}, FIELDS) == [SortField("rent", SortDirection.ASC)]
    with pytest.raises(ValidationError):
        parse_sort({"rent": "sideways"}, FIELDS)
    with pytest.raises(ValidationError):
        parse_sort({"owner": "asc"}, FIELDS)


def test_matches_operators():
    document = {
        "status": "ACTIVE",
        "rent": Decimal("1200.00"),
        "city": "Austin",
        "amenities": ["pool", "gym"],
        "due": datetime(2026, 1, 1, tzinfo=timezone.utc),
    }

    def check(filters):
        return matches(document, parse_filters(filters, FIELDS))

    assert check({"status": {"in": ["ACTIVE", "RENTED"]}})
    assert check({"rent": {"gt": 1000.5, "lt": 1300}})
    assert not check({"rent": {"lte": Decimal("1000")}})
    assert check({"city": {"icontains": "aus"}})
    assert not check({"city": {"contains": "aus"}})
    assert check({"amenities": {"contains": "pool"}})
    assert not check({"amenities": {"contains": "sauna"}})
    assert check({"status": {"ne": "RENTED"}})
    assert check({"due": {"lt": datetime(2026, 6, 1)}})


def test_range_operators_never_match_missing_values():
    assert not matches({"rent": None}, [FilterCondition("rent", "gt", 0)])
    assert matches({}, [FilterCondition("rent", "ne", 5)])


def test_sort_documents_puts_missing_values_last():
    documents = [{"rent": 3}, {"rent": None}, {"rent": 1}, {"rent": 2}]
    ascending = sort_documents(documents, [SortField("rent", SortDirection.ASC)])
    descending = sort_documents(documents, [SortField("rent", SortDirection.DESC)])
    assert [d["rent"] for d in ascending] == [1, 2, 3, None]
    assert [d["rent"] for d in descending] == [3, 2, 1, None]


def test_sort_documents_multiple_keys():
    documents = [
        {"city": "B", "rent": 1},
        {"city": "A", "rent": 2},
        {"city": "A", "rent": 1},
    ]
    ordered = sort_documents(
        documents,
        [SortField("city", SortDirection.ASC), SortField("rent", SortDirection.DESC)],
    )
    assert ordered == [{"city": "A", "rent": 2}, {"city": "A", "rent": 1}, {"city": "B", "rent": 1}]


def test_page_metadata():
    page = Page.create(items=[1, 2], total=25, skip=20, limit=10)
    assert page.page == 3
    assert page.total_pages == 3
    assert not page.has_next
    assert page.has_previous

    empty = Page.create(items=[], total=0, skip=0, limit=10)
    assert empty.page == 1
    assert empty.total_pages == 0


@pytest.mark.parametrize("skip,limit", [(-1, 10), (0, 0), (0, MAX_LIMIT + 1)])
def test_validate_pagination_params_rejects(skip, limit):
    with pytest.raises(ValidationError):
        validate_pagination_params(skip, limit)


def test_list_options_helpers():
    options = ListOptions(filters={"status": "ACTIVE"})
    extended = options.with_filters(city="Austin")
    assert extended.filters == {"status": "ACTIVE", "city": "Austin"}
    assert options.filters == {"status": "ACTIVE"}

    assert options.with_sort(rent="asc").sort == {"rent": "asc"}
    chosen = ListOptions(sort={"city": "desc"})
    assert chosen.with_sort(rent="asc").sort == {"city": "desc"}
