"""Core building blocks shared by the matching and negotiation paths."""

from .errors import CollaboratorUnavailable, NotFound, SourcingError, ValidationError

__all__ = [
    "SourcingError",
    "ValidationError",
    "CollaboratorUnavailable",
    "NotFound",
]
