"""Negotiation strategy for a multi-item RFQ."""

from ..infrastructure.logging_config import get_logger
from ..models import (
    AggregatedRisk,
    CompetitorPrices,
    ComplexRFQ,
    DemandForecast,
    DemandTrend,
    FallbackNotice,
    LineAnalysis,
    NegotiationPolicy,
    PriceBand,
    Priority,
    RFQAnalysis,
    SupplierRisk,
)
from ..utils import clamp, mean

logger = get_logger(__name__)

BULK_DISCOUNT = "Consider bulk discount of 5-10% for large order"
DELIVERY_PREMIUM = "Offer premium for faster delivery"
REQUEST_GUARANTEES = "Request additional guarantees from high-risk suppliers"
LOCK_PRICES = "Market demand is high - consider locking prices early"


class NegotiationStrategist:
    """
    Combines line-level market analyses and supplier risks into one RFQ view.

    Suggestions are emitted in a fixed order: bulk discount, delivery premium,
    supplier guarantees, early price lock. The success probability is the
    mean of supplier reliability, market stability, an urgency factor and a
    strategy bonus; it is clamped to [0, 1] only after averaging.
    """

    def __init__(self, policy: NegotiationPolicy | None = None):
        self.policy = policy or NegotiationPolicy()

    def strategize(
        self,
        rfq: ComplexRFQ,
        line_analyses: list[LineAnalysis],
        supplier_risks: list[SupplierRisk],
    ) -> RFQAnalysis:
        policy = self.policy
        diagnostics: list[FallbackNotice] = []
        for line in line_analyses:
            diagnostics.extend(line.diagnostics)
        for risk in supplier_risks:
            diagnostics.extend(risk.diagnostics)

        if supplier_risks:
            risk_scores = [r.risk_score for r in supplier_risks]
        else:
            risk_scores = [policy.default_supplier_risk]
            diagnostics.append(
                FallbackNotice(
                    source="supplier_directory",
                    subject=rfq.id,
                    reason="no suppliers on the RFQ",
                    substituted=f"supplier risk {policy.default_supplier_risk:g}",
                )
            )

        supplier_risk = self.aggregate_supplier_risk(supplier_risks, risk_scores)
        demand = self.aggregate_demand(line_analyses)
        suggestions = self.suggestions(rfq, risk_scores, demand)
        probability = self.success_probability(rfq, risk_scores, line_analyses, suggestions)

        logger.info(
            "rfq_strategized",
            rfq_id=rfq.id,
            lines=len(line_analyses),
            suppliers=len(supplier_risks),
            suggestions=len(suggestions),
            success_probability=round(probability, 4),
            fallbacks=len(diagnostics),
        )

        return RFQAnalysis(
            rfq_id=rfq.id,
            market_price=self.aggregate_market_price(line_analyses),
            supplier_risk=supplier_risk,
            competitor_prices=self.aggregate_competitors(line_analyses),
            demand_forecast=demand,
            negotiation_suggestions=suggestions,
            success_probability=probability,
            line_analyses=line_analyses,
            supplier_risks=supplier_risks,
            diagnostics=diagnostics,
        )

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    @staticmethod
    def aggregate_market_price(line_analyses: list[LineAnalysis]) -> PriceBand | None:
        """Pool every min, max and avg figure of every line band."""
        figures: list[float] = []
        for line in line_analyses:
            if line.price_band is not None:
                band = line.price_band
                figures.extend([band.min, band.max, band.avg])
        if not figures:
            return None
        return PriceBand(min=min(figures), max=max(figures), avg=mean(figures))

    def aggregate_supplier_risk(
        self, supplier_risks: list[SupplierRisk], risk_scores: list[float]
    ) -> AggregatedRisk:
        factors = [
            f"Supplier {r.supplier_id}: High risk due to limited history"
            for r in supplier_risks
            if r.risk_score > self.policy.high_risk_threshold
        ]
        return AggregatedRisk(score=clamp(mean(risk_scores)), factors=factors)

    @staticmethod
    def aggregate_competitors(line_analyses: list[LineAnalysis]) -> CompetitorPrices:
        prices: list[float] = []
        sources: list[str] = []
        for line in line_analyses:
            prices.extend(line.competitors.prices)
            sources.extend(line.competitors.sources)
        return CompetitorPrices(prices=prices, sources=sources)

    @staticmethod
    def aggregate_demand(line_analyses: list[LineAnalysis]) -> DemandForecast:
        """Strict-majority trend vote and mean demand factor."""
        if not line_analyses:
            return DemandForecast()
        trends = [line.demand.trend for line in line_analyses]
        half = len(trends) / 2
        if trends.count(DemandTrend.UP) > half:
            trend = DemandTrend.UP
        elif trends.count(DemandTrend.DOWN) > half:
            trend = DemandTrend.DOWN
        else:
            trend = DemandTrend.STABLE
        return DemandForecast(
            trend=trend, factor=mean([line.demand.factor for line in line_analyses])
        )

    # -------------------------------------------------------------------------
    # Strategy
    # -------------------------------------------------------------------------

    def suggestions(
        self, rfq: ComplexRFQ, risk_scores: list[float], demand: DemandForecast
    ) -> list[str]:
        policy = self.policy
        suggestions = []
        if rfq.total_budget > policy.large_order_threshold:
            suggestions.append(BULK_DISCOUNT)
        if rfq.priority == Priority.URGENT:
            suggestions.append(DELIVERY_PREMIUM)
        if any(score > policy.high_risk_threshold for score in risk_scores):
            suggestions.append(REQUEST_GUARANTEES)
        if demand.factor > policy.high_demand_factor:
            suggestions.append(LOCK_PRICES)
        return suggestions

    def success_probability(
        self,
        rfq: ComplexRFQ,
        risk_scores: list[float],
        line_analyses: list[LineAnalysis],
        suggestions: list[str],
    ) -> float:
        policy = self.policy
        supplier_reliability = mean([1 - score for score in risk_scores])
        if line_analyses:
            market_stability = mean([1 - line.risk_score for line in line_analyses])
        else:
            market_stability = 1.0
        urgency = policy.urgent_multiplier if rfq.priority == Priority.URGENT else 1.0
        strategy = policy.suggestion_bonus if suggestions else 1.0
        # The strategy bonus can push the raw mean above 1.
        return clamp(mean([supplier_reliability, market_stability, urgency, strategy]))

    def next_steps(self, success_probability: float) -> list[str]:
        if success_probability > self.policy.proceed_threshold:
            return ["Proceed with current strategy - high success probability"]
        if success_probability > self.policy.adjust_threshold:
            return ["Consider adjusting pricing strategy", "Request additional supplier quotes"]
        return [
            "Review market conditions",
            "Consider alternative suppliers",
            "Adjust timeline if possible",
        ]
