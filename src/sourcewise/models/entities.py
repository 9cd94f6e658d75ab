"""Input entities read by the engine: requirements, RFQs and suppliers."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ValidationError
from ..utils.helpers import parse_price


class Urgency(str, Enum):
    """Urgency tier of a single-item requirement."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Priority(str, Enum):
    """Priority tier of a multi-item RFQ."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class VerificationLevel(str, Enum):
    """Supplier verification level."""

    BASIC = "basic"
    VERIFIED = "verified"
    PREMIUM = "premium"


class Coordinates(BaseModel):
    """Geographic coordinates."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Location(BaseModel):
    """A city/state/country location. Any part may be unknown."""

    model_config = ConfigDict(frozen=True)

    city: str | None = None
    state: str | None = None
    country: str | None = None
    coordinates: Coordinates | None = None

    @model_validator(mode="before")
    @classmethod
    def _split_string(cls, value: Any) -> Any:
        # "Pune, Maharashtra, India" -> city/state/country; "Pune, India" -> city/country
        if isinstance(value, str):
            parts = [p.strip() for p in value.split(",") if p.strip()]
            if len(parts) == 2:
                return {"city": parts[0], "country": parts[1]}
            keys = ("city", "state", "country")
            return dict(zip(keys, parts, strict=False))
        return value

    @property
    def is_specified(self) -> bool:
        return any((self.city, self.state, self.country))

    def text(self) -> str:
        """Joined location text used for lexical search."""
        return " ".join(p for p in (self.city, self.state, self.country) if p)


class RFQRequirement(BaseModel):
    """One buyer request for one product or category."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    category: str = Field(..., min_length=1)
    quantity: str = ""
    target_price: str
    deadline: date
    location: Location | None = None
    urgency: Urgency = Urgency.MEDIUM

    @field_validator("title", "category")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("target_price", mode="before")
    @classmethod
    def _coerce_target_price(cls, value: Any) -> Any:
        if isinstance(value, int | float):
            return str(value)
        return value

    @field_validator("target_price")
    @classmethod
    def _check_target_price(cls, value: str) -> str:
        if parse_price(value) is None:
            raise ValueError(f"cannot read an amount from {value!r}")
        return value

    @property
    def budget(self) -> float:
        """Numeric budget parsed from the target price."""
        return parse_price(self.target_price) or 0.0


class LineItem(BaseModel):
    """A single product line of a multi-item RFQ."""

    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    specifications: dict[str, Any] = Field(default_factory=dict)
    budget: float = Field(..., ge=0)


class ComplexRFQ(BaseModel):
    """A multi-line RFQ, used by the negotiation path."""

    id: str
    products: list[LineItem] = Field(..., min_length=1)
    suppliers: list[str] = Field(default_factory=list)
    timeline: str = ""
    location: Location | None = None
    priority: Priority = Priority.MEDIUM

    @property
    def total_budget(self) -> float:
        return sum(p.budget for p in self.products)


class PriceRange(BaseModel):
    """Supplier price range."""

    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    currency: str = "INR"

    @model_validator(mode="after")
    def _check_order(self) -> PriceRange:
        if self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class Supplier(BaseModel):
    """A supplier catalog entry. Read-only to this engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    categories: list[str] = Field(default_factory=list)
    rating: float = Field(..., ge=0, le=5)
    location: Location | None = None
    price_range: PriceRange
    compliance_score: float = Field(..., ge=0, le=100)
    on_time_delivery_rate: float = Field(..., ge=0, le=100)
    quality_rating: float = Field(..., ge=0, le=5)
    financial_rating: float = Field(0.0, ge=0, le=5)
    verification_level: VerificationLevel = VerificationLevel.BASIC
    years_of_experience: int = Field(0, ge=0)
    capacity: float = Field(..., ge=0)
    lead_time_days: int = Field(..., ge=0)

    @property
    def is_verified(self) -> bool:
        return self.verification_level != VerificationLevel.BASIC


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_entity(model: type[ModelT], record: ModelT | Mapping[str, Any]) -> ModelT:
    """Turn a raw record into a typed entity.

    Args:
        model: Target model class.
        record: Either an instance of the model or a raw mapping.

    Returns:
        The validated entity.

    Raises:
        ValidationError: Naming the first missing or invalid field.
    """
    if isinstance(record, model):
        return record
    if not isinstance(record, Mapping):
        raise ValidationError(
            field="__root__",
            message=f"expected a mapping, got {type(record).__name__}",
            entity=model.__name__,
        )
    try:
        return model.model_validate(dict(record))
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, entity=model.__name__) from e


def parse_supplier(record: Supplier | Mapping[str, Any]) -> Supplier:
    return parse_entity(Supplier, record)


def parse_requirement(record: RFQRequirement | Mapping[str, Any]) -> RFQRequirement:
    return parse_entity(RFQRequirement, record)


def parse_complex_rfq(record: ComplexRFQ | Mapping[str, Any]) -> ComplexRFQ:
    return parse_entity(ComplexRFQ, record)
