"""Interfaces for external collaborators - supplier directory, market data, RFQ store."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from sourcewise.models import (
    CompetitorPrices,
    ComplexRFQ,
    DemandForecast,
    PriceBand,
    RFQRequirement,
    Supplier,
)


# ============================================================================
# Data Transfer Objects (DTOs)
# ============================================================================

class RFQResponseRecord(BaseModel):
    """One historical response of a supplier to an RFQ."""
    rfq_id: str
    created_at: datetime
    responded_at: datetime | None = None  # None while still open


class SupplierHistory(BaseModel):
    """Historical activity of a supplier."""
    supplier_id: str
    responses: list[RFQResponseRecord] = Field(default_factory=list)
    transaction_count: int = Field(0, ge=0)
    verified: bool = False


class SupplierFilter(BaseModel):
    """Optional filter for listing suppliers."""
    category: str | None = None
    country: str | None = None
    min_rating: float | None = None
    limit: int | None = None


# ============================================================================
# Collaborator Interfaces
# ============================================================================

@runtime_checkable
class ISupplierDirectory(Protocol):
    """
    Supplier catalog and history.

    Implementations:
    - InMemorySupplierDirectory: In-memory catalog (development/testing)
    """

    async def list_suppliers(
        self, supplier_filter: SupplierFilter | None = None
    ) -> list[Supplier | dict[str, Any]]:
        """
        List catalog entries.

        Raw records may be returned as mappings; the ranker validates them
        and reports malformed ones individually.
        """
        ...

    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        """Get a supplier by id, or None if absent."""
        ...

    async def get_supplier_history(self, supplier_id: str) -> SupplierHistory | None:
        """Get responses, transactions and verification of a supplier."""
        ...


@runtime_checkable
class IMarketDataService(Protocol):
    """
    Market data for a product line.

    Implementations:
    - MockMarketDataService: Deterministic simulated market (development/testing)
    - HTTPMarketDataService: REST market-data backend (production)
    """

    async def get_price_band(self, product: str, specs: dict[str, Any]) -> PriceBand | None:
        """Current market price band for a product."""
        ...

    async def get_demand_forecast(self, product: str) -> DemandForecast | None:
        """Demand trend and multiplier for a product."""
        ...

    async def get_competitor_prices(self, product: str) -> CompetitorPrices | None:
        """Competitor quotes for a product."""
        ...


@runtime_checkable
class IRFQStore(Protocol):
    """Read-only access to stored RFQs."""

    async def get_requirement(self, rfq_id: str) -> RFQRequirement | None:
        ...

    async def get_complex_rfq(self, rfq_id: str) -> ComplexRFQ | None:
        ...


# ============================================================================
# Abstract Base Classes (for implementations that want inheritance)
# ============================================================================

class BaseSupplierDirectory(ABC):
    """Abstract base class for supplier directories."""

    @abstractmethod
    async def list_suppliers(
        self, supplier_filter: SupplierFilter | None = None
    ) -> list[Supplier | dict[str, Any]]:
        pass

    @abstractmethod
    async def get_supplier(self, supplier_id: str) -> Supplier | None:
        pass

    @abstractmethod
    async def get_supplier_history(self, supplier_id: str) -> SupplierHistory | None:
        pass


class BaseMarketDataService(ABC):
    """Abstract base class for market data services."""

    @abstractmethod
    async def get_price_band(self, product: str, specs: dict[str, Any]) -> PriceBand | None:
        pass

    @abstractmethod
    async def get_demand_forecast(self, product: str) -> DemandForecast | None:
        pass

    @abstractmethod
    async def get_competitor_prices(self, product: str) -> CompetitorPrices | None:
        pass

    async def close(self) -> None:
        """Release any held resources."""


class BaseRFQStore(ABC):
    """Abstract base class for RFQ stores."""

    @abstractmethod
    async def get_requirement(self, rfq_id: str) -> RFQRequirement | None:
        pass

    @abstractmethod
    async def get_complex_rfq(self, rfq_id: str) -> ComplexRFQ | None:
        pass
