"""Data models for the sourcing engine."""

from .analysis import (
    AggregatedRisk,
    CompetitorPrices,
    DemandForecast,
    DemandTrend,
    FactorBreakdown,
    FallbackNotice,
    LineAnalysis,
    MatchResult,
    NegotiationReport,
    PriceBand,
    RankingReport,
    RecommendationTier,
    RFQAnalysis,
    RiskLevel,
    SkippedSupplier,
    SupplierRisk,
)
from .config import Settings, get_settings, load_policy
from .entities import (
    ComplexRFQ,
    Coordinates,
    LineItem,
    Location,
    PriceRange,
    Priority,
    RFQRequirement,
    Supplier,
    Urgency,
    VerificationLevel,
    parse_complex_rfq,
    parse_requirement,
    parse_supplier,
)
from .policy import FactorWeights, NegotiationPolicy, PolicyConfig, ScoringPolicy, TierRule

__all__ = [
    # Entities
    "Coordinates",
    "Location",
    "RFQRequirement",
    "LineItem",
    "ComplexRFQ",
    "PriceRange",
    "Supplier",
    "Urgency",
    "Priority",
    "VerificationLevel",
    "parse_requirement",
    "parse_supplier",
    "parse_complex_rfq",
    # Results
    "FactorBreakdown",
    "MatchResult",
    "SkippedSupplier",
    "RankingReport",
    "RecommendationTier",
    "RiskLevel",
    "DemandTrend",
    "PriceBand",
    "DemandForecast",
    "CompetitorPrices",
    "FallbackNotice",
    "LineAnalysis",
    "SupplierRisk",
    "AggregatedRisk",
    "RFQAnalysis",
    "NegotiationReport",
    # Policy / settings
    "FactorWeights",
    "TierRule",
    "ScoringPolicy",
    "NegotiationPolicy",
    "PolicyConfig",
    "Settings",
    "get_settings",
    "load_policy",
]
