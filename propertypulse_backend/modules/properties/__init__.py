"""Rental properties for PropertyPulse."""

from .models import Property, PropertyStatus, PropertyType
from .schemas import PropertyCreate, PropertyResponse, PropertyUpdate

__all__ = [
    "Property",
    "PropertyStatus",
    "PropertyType",
    "PropertyCreate",
    "PropertyResponse",
    "PropertyUpdate",
]
