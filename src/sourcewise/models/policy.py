"""Business policy: factor weights, thresholds and advisory limits.

Every number that shapes a score lives here as a named, overridable value.
Defaults reproduce the production policy; overrides come from
``config/scoring-policy.yaml`` (see ``models.config.load_policy``).
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, model_validator

from .analysis import RecommendationTier

# =============================================================================
# Matching policy
# =============================================================================


class FactorWeights(BaseModel):
    """Maximum points per factor. Must sum to 100."""

    category_match: float = 25
    budget_compatibility: float = 20
    rating: float = 15
    location_proximity: float = 10
    compliance: float = 10
    delivery_history: float = 8
    quality: float = 7
    capacity: float = 3
    lead_time: float = 2

    @model_validator(mode="after")
    def _check_total(self) -> FactorWeights:
        total = sum(self.model_dump().values())
        if not math.isclose(total, 100.0, abs_tol=1e-6):
            raise ValueError(f"factor weights must sum to 100, got {total}")
        return self


class TierRule(BaseModel):
    """One row of the recommendation decision table."""

    min_score: float
    max_concerns: int | None = None
    tier: RecommendationTier


def _default_tier_table() -> list[TierRule]:
    return [
        TierRule(min_score=85, max_concerns=1, tier=RecommendationTier.HIGHLY_RECOMMENDED),
        TierRule(min_score=70, max_concerns=2, tier=RecommendationTier.RECOMMENDED),
        TierRule(min_score=50, tier=RecommendationTier.CONSIDER),
    ]


class AdvisoryThresholds(BaseModel):
    """Raw-value thresholds that turn factors into reasons and concerns."""

    excellent_rating: float = 4.5
    low_rating: float = 3.0
    min_compliance: float = 80
    strong_on_time: float = 95
    weak_on_time: float = 75
    low_quality: float = 3.5


class ScoringPolicy(BaseModel):
    """Policy for the single-requirement matching path."""

    weights: FactorWeights = Field(default_factory=FactorWeights)

    category_partial_ratio: float = Field(0.6, ge=0, le=1)
    category_mismatch_ratio: float = Field(0.0, ge=0, le=1)

    budget_near_ratio: float = 0.8  # supplier max >= 80% of budget
    budget_near_credit: float = Field(0.75, ge=0, le=1)
    budget_far_ratio: float = 0.6  # supplier max >= 60% of budget
    budget_far_credit: float = Field(0.5, ge=0, le=1)

    same_city_credit: float = Field(1.0, ge=0, le=1)
    same_state_credit: float = Field(0.7, ge=0, le=1)
    same_country_credit: float = Field(0.5, ge=0, le=1)
    unspecified_location_credit: float = Field(0.5, ge=0, le=1)

    capacity_budget_ratio: float = Field(0.1, ge=0)
    lead_time_grace_factor: float = Field(1.5, ge=1)
    lead_time_grace_credit: float = Field(0.5, ge=0, le=1)

    tier_table: list[TierRule] = Field(default_factory=_default_tier_table)
    advisory: AdvisoryThresholds = Field(default_factory=AdvisoryThresholds)

    # confidence = base_weight * score/100 (+bonus / -penalty), clamped to [0, 1]
    confidence_base_weight: float = 0.7
    confidence_reason_bonus: float = 0.1
    confidence_concern_penalty: float = 0.15
    confidence_count_threshold: int = 2

    # Risk level from the average of compliance, delivery and quality points
    low_risk_critical_points: float = 7
    low_risk_financial_rating: float = 4
    medium_risk_critical_points: float = 5
    medium_risk_financial_rating: float = 3

    delivery_days_by_urgency: dict[str, int] = Field(
        default_factory=lambda: {"high": 7, "medium": 21, "low": 45}
    )

    # Lexical pre-filter for large catalogs
    index_fields: dict[str, float] = Field(
        default_factory=lambda: {"name": 0.3, "categories": 0.4, "location": 0.1}
    )
    prefilter_threshold: int = Field(2000, ge=0)
    max_candidates: int = Field(500, ge=1)


# =============================================================================
# Negotiation policy
# =============================================================================


class NegotiationPolicy(BaseModel):
    """Policy for the multi-item RFQ negotiation path."""

    # Market analyzer
    stable_demand_risk: float = 0.1
    shifting_demand_risk: float = 0.3
    competition_quote_threshold: int = 3
    high_competition_risk: float = 0.2
    low_competition_risk: float = 0.1
    default_price_volatility: float = 0.2

    # Risk aggregator
    default_response_hours: float = 24.0
    experience_response_cap: int = Field(10, ge=1)
    no_transactions_penalty: float = 0.3
    transactions_penalty: float = 0.1
    unverified_penalty: float = 0.2
    verified_penalty: float = 0.1
    default_supplier_risk: float = Field(0.5, ge=0, le=1)

    # Strategist
    high_risk_threshold: float = 0.7
    large_order_threshold: float = 1_000_000
    high_demand_factor: float = 1.1
    urgent_multiplier: float = 0.8
    suggestion_bonus: float = 1.1
    proceed_threshold: float = 0.8
    adjust_threshold: float = 0.6


class PolicyConfig(BaseModel):
    """Complete policy document."""

    matching: ScoringPolicy = Field(default_factory=ScoringPolicy)
    negotiation: NegotiationPolicy = Field(default_factory=NegotiationPolicy)
