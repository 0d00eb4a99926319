"""Rental applications for PropertyPulse."""

from .models import Application, ApplicationStatus
from .schemas import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationReview,
    ApplicationUpdate,
)

__all__ = [
    "Application",
    "ApplicationStatus",
    "ApplicationCreate",
    "ApplicationResponse",
    "ApplicationReview",
    "ApplicationUpdate",
]
