"""Maintenance tickets for PropertyPulse."""

from .models import MaintenanceTicket, TicketPriority, TicketStatus
from .schemas import TicketCreate, TicketResponse, TicketUpdate

__all__ = [
    "MaintenanceTicket",
    "TicketPriority",
    "TicketStatus",
    "TicketCreate",
    "TicketResponse",
    "TicketUpdate",
]
