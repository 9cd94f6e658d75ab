"""API route modules."""

from .health import router as health_router
from .matching import router as matching_router
from .negotiation import router as negotiation_router

__all__ = ["health_router", "matching_router", "negotiation_router"]
