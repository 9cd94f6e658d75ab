"""Pydantic schemas for API request/response validation."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

# ============================================================================
# Request Schemas
# ============================================================================


class MatchRequest(BaseModel):
    """Rank suppliers for one requirement.

    Records are validated by the engine so that a malformed supplier is
    reported as skipped instead of failing the whole request.
    """

    requirement: dict[str, Any] = Field(..., description="Buyer requirement")
    suppliers: list[dict[str, Any]] | None = Field(
        None, description="Catalog to rank (defaults to the supplier directory)"
    )
    as_of: date | None = Field(None, description="Reference date for lead-time scoring")

    model_config = {
        "json_schema_extra": {
            "example": {
                "requirement": {
                    "id": "RFQ-1001",
                    "title": "Structural steel beams",
                    "category": "Steel",
                    "quantity": "120 tonnes",
                    "target_price": "₹12,00,000",
                    "deadline": "2026-12-01",
                    "location": "Pune, Maharashtra, India",
                    "urgency": "medium",
                },
                "suppliers": None,
            }
        }
    }


class AnalyzeRequest(BaseModel):
    """Analyze a multi-item RFQ."""

    rfq: dict[str, Any] = Field(..., description="Multi-item RFQ")

    model_config = {
        "json_schema_extra": {
            "example": {
                "rfq": {
                    "id": "CRFQ-2001",
                    "products": [
                        {
                            "name": "HR steel coils",
                            "quantity": 200,
                            "specifications": {"grade": "IS 2062"},
                            "budget": 900000,
                        }
                    ],
                    "suppliers": ["SUP-001", "SUP-002"],
                    "timeline": "2026-12-15",
                    "priority": "high",
                }
            }
        }
    }


# ============================================================================
# Health Schemas
# ============================================================================


class ServiceHealth(BaseModel):
    """Health status of a collaborator."""

    name: str
    status: str  # "healthy", "degraded", "unhealthy"
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy", "degraded"
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)
    services: list[ServiceHealth] = Field(default_factory=list)


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    checks: dict[str, bool] = Field(default_factory=dict)


# ============================================================================
# Error Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Error detail."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    details: list[ErrorDetail] = Field(default_factory=list)
    request_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
