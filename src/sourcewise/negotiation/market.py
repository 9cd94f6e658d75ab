"""Market analysis of a single product line."""

import asyncio
from typing import Any

from ..data.interfaces import IMarketDataService
from ..infrastructure.fallback import CollaboratorGuard
from ..infrastructure.logging_config import get_logger
from ..models import (
    CompetitorPrices,
    DemandForecast,
    DemandTrend,
    FallbackNotice,
    LineAnalysis,
    NegotiationPolicy,
    PriceBand,
)

logger = get_logger(__name__)


class MarketAnalyzer:
    """Derives price band, demand and competition signals for a product line.

    Line risk = price volatility + demand instability + competition
    intensity. It is not clamped; only the final success probability is.
    """

    def __init__(
        self,
        market_data: IMarketDataService,
        policy: NegotiationPolicy | None = None,
        guard: CollaboratorGuard | None = None,
    ):
        self.market_data = market_data
        self.policy = policy or NegotiationPolicy()
        self.guard = guard or CollaboratorGuard()

    async def analyze(self, product: str, specifications: dict[str, Any]) -> LineAnalysis:
        """Fetch market data for one product concurrently and score its risk."""
        policy = self.policy
        (band, band_notice), (demand, demand_notice), (competitors, comp_notice) = (
            await asyncio.gather(
                self.guard.call(
                    "market_data.price_band",
                    product,
                    lambda: self.market_data.get_price_band(product, specifications),
                    None,
                    f"no price band, volatility {policy.default_price_volatility:g}",
                ),
                self.guard.call(
                    "market_data.demand_forecast",
                    product,
                    lambda: self.market_data.get_demand_forecast(product),
                    None,
                    "stable demand, factor 1.0",
                ),
                self.guard.call(
                    "market_data.competitor_prices",
                    product,
                    lambda: self.market_data.get_competitor_prices(product),
                    None,
                    "no competitor quotes",
                ),
            )
        )

        diagnostics = [n for n in (band_notice, demand_notice, comp_notice) if n is not None]

        # A collaborator answering "no data" is a fallback too.
        if band is None and band_notice is None:
            diagnostics.append(
                self._no_data(
                    "market_data.price_band",
                    product,
                    f"no price band, volatility {policy.default_price_volatility:g}",
                )
            )
        if demand is None and demand_notice is None:
            diagnostics.append(
                self._no_data("market_data.demand_forecast", product, "stable demand, factor 1.0")
            )
        if competitors is None and comp_notice is None:
            diagnostics.append(
                self._no_data("market_data.competitor_prices", product, "no competitor quotes")
            )

        demand = demand or DemandForecast()
        competitors = competitors or CompetitorPrices()

        volatility = self.price_volatility(band)
        if band is not None and volatility is None:
            diagnostics.append(
                FallbackNotice(
                    source="market_data.price_band",
                    subject=product,
                    reason="non-positive average price",
                    substituted=f"volatility {policy.default_price_volatility:g}",
                )
            )
        if volatility is None:
            volatility = policy.default_price_volatility

        risk = volatility + self.demand_risk(demand) + self.competition_risk(competitors)
        logger.debug(
            "line_analyzed",
            product=product,
            volatility=round(volatility, 4),
            trend=demand.trend.value,
            competitor_quotes=len(competitors.prices),
            risk_score=round(risk, 4),
            fallbacks=len(diagnostics),
        )

        return LineAnalysis(
            product=product,
            price_band=band,
            demand=demand,
            competitors=competitors,
            price_volatility=volatility,
            risk_score=risk,
            diagnostics=diagnostics,
        )

    @staticmethod
    def price_volatility(band: PriceBand | None) -> float | None:
        """(max - min) / avg, or None when it cannot be computed."""
        if band is None or band.avg <= 0:
            return None
        return (band.max - band.min) / band.avg

    def demand_risk(self, demand: DemandForecast) -> float:
        if demand.trend == DemandTrend.STABLE:
            return self.policy.stable_demand_risk
        return self.policy.shifting_demand_risk

    def competition_risk(self, competitors: CompetitorPrices) -> float:
        if len(competitors.prices) > self.policy.competition_quote_threshold:
            return self.policy.high_competition_risk
        return self.policy.low_competition_risk

    @staticmethod
    def _no_data(source: str, product: str, substituted: str) -> FallbackNotice:
        logger.info("market_data_missing", source=source, product=product)
        return FallbackNotice(
            source=source, subject=product, reason="no data returned", substituted=substituted
        )
