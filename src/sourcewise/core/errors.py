"""Error taxonomy for the sourcing engine.

- ValidationError: a malformed input entity. Fatal for that single item,
  never for the batch it belongs to.
- CollaboratorUnavailable: an external market/history call failed or timed
  out. Recovered locally with a documented fallback value.
- NotFound: an RFQ or supplier identifier is absent from the store.
  Surfaced to the caller.
"""

from typing import Any


class SourcingError(Exception):
    """Base class for all sourcing engine errors."""


class ValidationError(SourcingError):
    """Raised when an input entity is missing a required field or is invalid."""

    def __init__(self, field: str, message: str, entity: str | None = None):
        self.field = field
        self.message = message
        self.entity = entity
        prefix = f"{entity}." if entity else ""
        super().__init__(f"{prefix}{field}: {message}")

    @classmethod
    def from_pydantic(cls, exc: Any, entity: str | None = None) -> "ValidationError":
        """Build from a pydantic ValidationError, naming its first failing field."""
        errors = exc.errors()
        if not errors:
            return cls(field="__root__", message=str(exc), entity=entity)
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "__root__"
        return cls(field=field, message=first.get("msg", "invalid value"), entity=entity)


class CollaboratorUnavailable(SourcingError):
    """Raised when an external collaborator cannot answer in time."""

    def __init__(self, collaborator: str, reason: str):
        self.collaborator = collaborator
        self.reason = reason
        super().__init__(f"{collaborator} unavailable: {reason}")


class NotFound(SourcingError):
    """Raised when an RFQ or supplier identifier does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")
