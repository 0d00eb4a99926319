"""
Backend-neutral filter and sort language used by repository ``list`` calls.

A filter mapping pairs a field with either a scalar (equality) or an
operator mapping, e.g. ``{"status": "PENDING", "due_date": {"lt": now}}``.
``None`` values are dropped. Each backend turns the parsed conditions into
its own query form.
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from .exceptions import ValidationError
from .utils import ensure_utc

OPERATORS = frozenset(
    {"eq", "ne", "gt", "gte", "lt", "lte", "in", "contains", "icontains"}
)


class SortDirection(str, enum.Enum):
    """Sort direction enum."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class FilterCondition:
    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class SortField:
    field: str
    direction: SortDirection


def parse_filters(
    filters: dict[str, Any] | None, allowed_fields: Iterable[str]
) -> list[FilterCondition]:
    """Turn a filter mapping into a flat list of conditions.

    Raises:
        ValidationError: On unknown fields or operators
    """
    if not filters:
        return []

    allowed = set(allowed_fields)
    conditions: list[FilterCondition] = []
    for field, value in filters.items():
        if value is None:
            continue
        if field not in allowed:
            raise ValidationError("unknown filter field", field=field)

        if isinstance(value, dict):
            for op, operand in value.items():
                if op not in OPERATORS:
                    raise ValidationError(f"unknown filter operator '{op}'", field=field)
                if operand is None:
                    continue
                if op == "in" and not isinstance(operand, (list, tuple, set, frozenset)):
                    raise ValidationError("'in' expects a list", field=field)
                conditions.append(FilterCondition(field, op, operand))
        else:
            conditions.append(FilterCondition(field, "eq", value))
    return conditions


def parse_sort(
    sort: dict[str, str] | None, allowed_fields: Iterable[str]
) -> list[SortField]:
    """Validate a ``{field: "asc" | "desc"}`` mapping."""
    if not sort:
        return []

    allowed = set(allowed_fields)
    result = []
    for field, direction in sort.items():
        if field not in allowed:
            raise ValidationError("unknown sort field", field=field)
        try:
            result.append(SortField(field, SortDirection(str(direction).lower())))
        except ValueError:
            raise ValidationError(
                f"sort direction must be 'asc' or 'desc', got '{direction}'",
                field=field,
            ) from None
    return result


def _comparable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def matches(document: dict[str, Any], conditions: list[FilterCondition]) -> bool:
    """Evaluate conditions against an in-memory document."""
    for condition in conditions:
        actual = _comparable(document.get(condition.field))
        expected = condition.value
        op = condition.op

        if op == "in":
            if actual not in {_comparable(v) for v in expected}:
                return False
            continue

        if op in ("contains", "icontains"):
            if actual is None:
                return False
            if isinstance(actual, (list, tuple)):
                if expected not in actual:
                    return False
                continue
            haystack, needle = str(actual), str(expected)
            if op == "icontains":
                haystack, needle = haystack.lower(), needle.lower()
            if needle not in haystack:
                return False
            continue

        expected = _comparable(expected)
        if op == "eq":
            if actual != expected:
                return False
        elif op == "ne":
            if actual == expected:
                return False
        else:
            if actual is None:
                return False
            if op == "gt" and not actual > expected:
                return False
            if op == "gte" and not actual >= expected:
                return False
            if op == "lt" and not actual < expected:
                return False
            if op == "lte" and not actual <= expected:
                return False
    return True


def sort_documents(
    documents: list[dict[str, Any]], sort_fields: list[SortField]
) -> list[dict[str, Any]]:
    """Stable multi-key sort; ``None`` sorts last in either direction."""
    ordered = list(documents)
    for sort_field in reversed(sort_fields):
        present = [d for d in ordered if d.get(sort_field.field) is not None]
        missing = [d for d in ordered if d.get(sort_field.field) is None]
        present.sort(
            key=lambda d: _comparable(d[sort_field.field]),
            reverse=sort_field.direction == SortDirection.DESC,
        )
        ordered = present + missing
    return ordered
