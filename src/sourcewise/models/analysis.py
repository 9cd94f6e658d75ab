"""Result models produced by the matching and negotiation paths."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .entities import Supplier


class RecommendationTier(str, Enum):
    """Discrete recommendation bucket for a match."""

    HIGHLY_RECOMMENDED = "highly_recommended"
    RECOMMENDED = "recommended"
    CONSIDER = "consider"
    NOT_SUITABLE = "not_suitable"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DemandTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


# =============================================================================
# Matching
# =============================================================================


class FactorBreakdown(BaseModel):
    """Weighted points contributed by each scoring factor."""

    category_match: float = 0.0
    budget_compatibility: float = 0.0
    rating: float = 0.0
    location_proximity: float = 0.0
    compliance: float = 0.0
    delivery_history: float = 0.0
    quality: float = 0.0
    capacity: float = 0.0
    lead_time: float = 0.0

    @property
    def total(self) -> float:
        return sum(self.model_dump().values())


class MatchResult(BaseModel):
    """Evaluation of one supplier against one requirement."""

    supplier: Supplier
    score: float = Field(..., ge=0, le=100)
    breakdown: FactorBreakdown
    confidence: float = Field(..., ge=0, le=1)
    match_reasons: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    estimated_price: str
    estimated_delivery: str
    risk_level: RiskLevel
    recommendation: RecommendationTier

    @property
    def supplier_id(self) -> str:
        return self.supplier.id


class SkippedSupplier(BaseModel):
    """A supplier record that could not be scored."""

    supplier_id: str | None = None
    field: str
    message: str


class RankingReport(BaseModel):
    """Ordered matches plus the suppliers skipped as partial failures."""

    requirement_id: str
    matches: list[MatchResult] = Field(default_factory=list)
    skipped: list[SkippedSupplier] = Field(default_factory=list)
    candidates_considered: int = 0


# =============================================================================
# Negotiation
# =============================================================================


class FallbackNotice(BaseModel):
    """Records a value that was substituted instead of computed."""

    source: str  # e.g. market_data.price_band, supplier_directory.history
    subject: str  # product name or supplier id
    reason: str
    substituted: str
    fallback: bool = True


class PriceBand(BaseModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    avg: float = Field(..., ge=0)


class DemandForecast(BaseModel):
    trend: DemandTrend = DemandTrend.STABLE
    factor: float = Field(1.0, ge=0)


class CompetitorPrices(BaseModel):
    prices: list[float] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)


class LineAnalysis(BaseModel):
    """Market analysis of a single product line."""

    product: str
    price_band: PriceBand | None = None
    demand: DemandForecast = Field(default_factory=DemandForecast)
    competitors: CompetitorPrices = Field(default_factory=CompetitorPrices)
    price_volatility: float = 0.0
    risk_score: float  # not clamped; see NegotiationStrategist
    diagnostics: list[FallbackNotice] = Field(default_factory=list)


class SupplierRisk(BaseModel):
    """Counterparty risk of one supplier. Higher is worse."""

    supplier_id: str
    risk_score: float = Field(..., ge=0, le=1)
    rating: float | None = None
    response_count: int = 0
    transaction_count: int = 0
    verified: bool = False
    average_response_hours: float
    diagnostics: list[FallbackNotice] = Field(default_factory=list)


class AggregatedRisk(BaseModel):
    score: float = Field(..., ge=0, le=1)
    factors: list[str] = Field(default_factory=list)


class RFQAnalysis(BaseModel):
    """Output of the negotiation path for a multi-item RFQ."""

    rfq_id: str
    market_price: PriceBand | None = None
    supplier_risk: AggregatedRisk
    competitor_prices: CompetitorPrices
    demand_forecast: DemandForecast
    negotiation_suggestions: list[str] = Field(default_factory=list)
    success_probability: float = Field(..., ge=0, le=1)
    line_analyses: list[LineAnalysis] = Field(default_factory=list)
    supplier_risks: list[SupplierRisk] = Field(default_factory=list)
    diagnostics: list[FallbackNotice] = Field(default_factory=list)


class NegotiationReport(BaseModel):
    rfq_id: str
    analysis: RFQAnalysis
    recommendations: list[str] = Field(default_factory=list)
    success_probability: float = Field(..., ge=0, le=1)
    next_steps: list[str] = Field(default_factory=list)
