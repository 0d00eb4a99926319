"""Rent payments for PropertyPulse."""

from .models import Payment, PaymentMethod, PaymentStatus
from .schemas import PaymentCreate, PaymentResponse, PaymentUpdate

__all__ = [
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentCreate",
    "PaymentResponse",
    "PaymentUpdate",
]
