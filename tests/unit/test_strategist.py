"""Tests for the negotiation strategist."""

import pytest

from sourcewise.models import (
    CompetitorPrices,
    ComplexRFQ,
    DemandForecast,
    DemandTrend,
    LineAnalysis,
    LineItem,
    PriceBand,
    Priority,
    SupplierRisk,
)
from sourcewise.negotiation import NegotiationStrategist
from sourcewise.negotiation.strategist import (
    BULK_DISCOUNT,
    DELIVERY_PREMIUM,
    LOCK_PRICES,
    REQUEST_GUARANTEES,
)


def line(product="steel", band=None, trend=DemandTrend.STABLE, factor=1.0, risk=0.4, quotes=()):
    return LineAnalysis(
        product=product,
        price_band=band,
        demand=DemandForecast(trend=trend, factor=factor),
        competitors=CompetitorPrices(
            prices=list(quotes), sources=[f"Q{i}" for i in range(len(quotes))]
        ),
        risk_score=risk,
    )


def supplier_risk(supplier_id, score):
    return SupplierRisk(supplier_id=supplier_id, risk_score=score, average_response_hours=12)


def rfq(budgets=(400_000,), priority=Priority.MEDIUM, suppliers=("SUP-1",)):
    return ComplexRFQ(
        id="CRFQ-9",
        products=[LineItem(name=f"item-{i}", quantity=1, budget=b) for i, b in enumerate(budgets)],
        suppliers=list(suppliers),
        priority=priority,
    )


@pytest.fixture
def strategist(negotiation_policy):
    return NegotiationStrategist(negotiation_policy)


class TestAggregation:
    """Tests for cross-line aggregation."""

    def test_market_band_pools_all_figures(self, strategist):
        lines = [
            line(band=PriceBand(min=90, max=110, avg=100)),
            line(band=PriceBand(min=180, max=220, avg=200)),
            line(band=None),
        ]
        band = strategist.aggregate_market_price(lines)
        assert band.min == 90
        assert band.max == 220
        assert band.avg == pytest.approx((90 + 110 + 100 + 180 + 220 + 200) / 6)

    def test_no_bands_gives_no_market_price(self, strategist):
        assert strategist.aggregate_market_price([line()]) is None

    @pytest.mark.parametrize(
        "trends, expected",
        [
            ([DemandTrend.UP, DemandTrend.UP, DemandTrend.DOWN], DemandTrend.UP),
            ([DemandTrend.DOWN, DemandTrend.DOWN], DemandTrend.DOWN),
            ([DemandTrend.UP, DemandTrend.DOWN], DemandTrend.STABLE),
            ([DemandTrend.UP, DemandTrend.DOWN, DemandTrend.STABLE], DemandTrend.STABLE),
        ],
    )
    def test_demand_majority_vote(self, strategist, trends, expected):
        forecast = strategist.aggregate_demand([line(trend=t) for t in trends])
        assert forecast.trend == expected

    def test_demand_factor_is_mean(self, strategist):
        forecast = strategist.aggregate_demand([line(factor=1.0), line(factor=1.3)])
        assert forecast.factor == pytest.approx(1.15)

    def test_competitor_prices_concatenated(self, strategist):
        prices = strategist.aggregate_competitors([line(quotes=(1, 2)), line(quotes=(3,))])
        assert prices.prices == [1, 2, 3]
        assert len(prices.sources) == 3

    def test_high_risk_suppliers_listed(self, strategist):
        analysis = strategist.strategize(
            rfq(), [line()], [supplier_risk("SUP-1", 0.2), supplier_risk("SUP-2", 0.8)]
        )
        assert analysis.supplier_risk.score == pytest.approx(0.5)
        assert analysis.supplier_risk.factors == [
            "Supplier SUP-2: High risk due to limited history"
        ]


class TestSuggestions:
    """Tests for suggestion rules and their order."""

    def test_bulk_discount_above_threshold(self, strategist):
        analysis = strategist.strategize(
            rfq(budgets=(600_000, 400_001)), [line()], [supplier_risk("SUP-1", 0.2)]
        )
        assert analysis.negotiation_suggestions == [BULK_DISCOUNT]

    def test_no_bulk_discount_at_threshold(self, strategist):
        analysis = strategist.strategize(
            rfq(budgets=(600_000, 400_000)), [line()], [supplier_risk("SUP-1", 0.2)]
        )
        assert BULK_DISCOUNT not in analysis.negotiation_suggestions

    def test_all_suggestions_in_order(self, strategist):
        analysis = strategist.strategize(
            rfq(budgets=(2_000_000,), priority=Priority.URGENT),
            [line(factor=1.2)],
            [supplier_risk("SUP-1", 0.9)],
        )
        assert analysis.negotiation_suggestions == [
            BULK_DISCOUNT,
            DELIVERY_PREMIUM,
            REQUEST_GUARANTEES,
            LOCK_PRICES,
        ]

    def test_no_suggestions(self, strategist):
        analysis = strategist.strategize(rfq(), [line()], [supplier_risk("SUP-1", 0.3)])
        assert analysis.negotiation_suggestions == []


class TestSuccessProbability:
    """Tests for the success probability."""

    def test_mean_of_factors(self, strategist):
        analysis = strategist.strategize(
            rfq(), [line(risk=0.4)], [supplier_risk("SUP-1", 0.2)]
        )
        # reliability 0.8, stability 0.6, no urgency, no suggestions
        assert analysis.success_probability == pytest.approx((0.8 + 0.6 + 1.0 + 1.0) / 4)

    def test_bonus_is_clamped_after_averaging(self, strategist):
        analysis = strategist.strategize(
            rfq(budgets=(5_000_000,)), [line(risk=0.0)], [supplier_risk("SUP-1", 0.0)]
        )
        # (1 + 1 + 1 + 1.1) / 4 > 1
        assert analysis.success_probability == 1.0

    def test_unclamped_line_risk_floors_at_zero(self, strategist):
        analysis = strategist.strategize(
            rfq(priority=Priority.URGENT), [line(risk=6.0)], [supplier_risk("SUP-1", 1.0)]
        )
        assert analysis.success_probability == 0.0

    def test_no_suppliers_uses_default_risk(self, strategist):
        analysis = strategist.strategize(rfq(suppliers=()), [line(risk=0.4)], [])
        assert analysis.supplier_risk.score == 0.5
        assert analysis.success_probability == pytest.approx((0.5 + 0.6 + 1.0 + 1.0) / 4)
        assert any(n.reason == "no suppliers on the RFQ" for n in analysis.diagnostics)

    def test_diagnostics_collected_from_inputs(self, strategist):
        analysis = strategist.strategize(rfq(), [line()], [supplier_risk("SUP-1", 0.2)])
        assert analysis.diagnostics == []


class TestNextSteps:
    """Tests for next-step guidance."""

    def test_proceed(self, strategist):
        assert strategist.next_steps(0.85) == [
            "Proceed with current strategy - high success probability"
        ]

    def test_adjust(self, strategist):
        assert len(strategist.next_steps(0.8)) == 2

    def test_review(self, strategist):
        assert strategist.next_steps(0.6) == [
            "Review market conditions",
            "Consider alternative suppliers",
            "Adjust timeline if possible",
        ]
