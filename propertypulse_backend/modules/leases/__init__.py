"""Leases for PropertyPulse."""

from .models import Lease, LeaseStatus
from .schemas import LeaseCreate, LeaseResponse, LeaseUpdate

__all__ = ["Lease", "LeaseStatus", "LeaseCreate", "LeaseResponse", "LeaseUpdate"]
