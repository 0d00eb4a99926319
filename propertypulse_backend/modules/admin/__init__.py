"""Administrative endpoints for PropertyPulse."""

from .routers import router

__all__ = ["router"]
