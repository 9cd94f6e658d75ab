"""Sourcing engine: the entry point wiring matching and negotiation."""

import asyncio
import time
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from .core.errors import NotFound
from .data.factory import Collaborators, build_collaborators
from .infrastructure.fallback import CollaboratorGuard
from .infrastructure.logging_config import get_logger
from .infrastructure.metrics import analysis_duration_seconds
from .matching import MatchRanker
from .models import (
    ComplexRFQ,
    NegotiationReport,
    PolicyConfig,
    RankingReport,
    RFQAnalysis,
    RFQRequirement,
    Settings,
    Supplier,
    SupplierRisk,
    get_settings,
    parse_complex_rfq,
)
from .negotiation import MarketAnalyzer, NegotiationStrategist, RiskAggregator

logger = get_logger(__name__)


class SourcingEngine:
    """
    Supplier matching and RFQ negotiation analysis.

    Matching is a pure in-memory computation over the catalog. Negotiation
    analysis fans out one market analysis per line item and one risk
    assessment per supplier; every collaborator call runs under the guard, so
    a slow or failing collaborator degrades to a flagged fallback value.
    """

    def __init__(
        self,
        collaborators: Collaborators,
        policy: PolicyConfig | None = None,
        guard: CollaboratorGuard | None = None,
    ):
        self.collaborators = collaborators
        self.policy = policy or PolicyConfig()
        self.guard = guard or CollaboratorGuard()

        self.ranker = MatchRanker(self.policy.matching)
        self.market_analyzer = MarketAnalyzer(
            collaborators.market_data, self.policy.negotiation, self.guard
        )
        self.risk_aggregator = RiskAggregator(self.policy.negotiation)
        self.strategist = NegotiationStrategist(self.policy.negotiation)

    async def find_matches(
        self,
        requirement: RFQRequirement | Mapping[str, Any],
        suppliers: Sequence[Supplier | Mapping[str, Any]] | None = None,
        as_of: date | None = None,
    ) -> RankingReport:
        """Rank suppliers for a requirement.

        When ``suppliers`` is None the whole directory catalog is ranked.
        """
        if suppliers is None:
            suppliers = await self.collaborators.directory.list_suppliers()
        return self.ranker.rank(requirement, suppliers, as_of)

    async def analyze_complex_rfq(self, rfq: ComplexRFQ | Mapping[str, Any]) -> RFQAnalysis:
        """Market, risk and strategy analysis of a multi-item RFQ."""
        rfq = parse_complex_rfq(rfq)
        start = time.perf_counter()

        line_analyses, supplier_risks = await asyncio.gather(
            asyncio.gather(
                *(
                    self.market_analyzer.analyze(item.name, item.specifications)
                    for item in rfq.products
                )
            ),
            asyncio.gather(*(self.assess_supplier(sid) for sid in rfq.suppliers)),
        )
        analysis = self.strategist.strategize(rfq, list(line_analyses), list(supplier_risks))

        duration = time.perf_counter() - start
        analysis_duration_seconds.observe(duration)
        logger.info(
            "rfq_analyzed",
            rfq_id=rfq.id,
            products=len(rfq.products),
            suppliers=len(rfq.suppliers),
            success_probability=round(analysis.success_probability, 4),
            fallbacks=len(analysis.diagnostics),
            duration_ms=round(duration * 1000, 2),
        )
        return analysis

    async def assess_supplier(self, supplier_id: str) -> SupplierRisk:
        """Fetch a supplier and its history concurrently and score its risk."""
        directory = self.collaborators.directory
        (supplier, supplier_notice), (history, history_notice) = await asyncio.gather(
            self.guard.call(
                "supplier_directory.supplier",
                supplier_id,
                lambda: directory.get_supplier(supplier_id),
                None,
                "no supplier profile",
            ),
            self.guard.call(
                "supplier_directory.history",
                supplier_id,
                lambda: directory.get_supplier_history(supplier_id),
                None,
                "no supplier history",
            ),
        )
        risk = self.risk_aggregator.assess(supplier_id, supplier, history)
        notices = [n for n in (supplier_notice, history_notice) if n is not None]
        if notices:
            risk = risk.model_copy(update={"diagnostics": notices + risk.diagnostics})
        return risk

    async def generate_negotiation_report(self, rfq_id: str) -> NegotiationReport:
        """Analyze a stored RFQ and derive recommendations and next steps.

        Raises:
            NotFound: If the RFQ store has no multi-item RFQ with this id.
        """
        rfq = await self.collaborators.rfq_store.get_complex_rfq(rfq_id)
        if rfq is None:
            raise NotFound("rfq", rfq_id)

        analysis = await self.analyze_complex_rfq(rfq)
        return NegotiationReport(
            rfq_id=rfq_id,
            analysis=analysis,
            recommendations=list(analysis.negotiation_suggestions),
            success_probability=analysis.success_probability,
            next_steps=self.strategist.next_steps(analysis.success_probability),
        )

    async def close(self) -> None:
        """Release collaborator resources such as HTTP connections."""
        close = getattr(self.collaborators.market_data, "close", None)
        if close is not None:
            await close()


def create_engine(settings: Settings | None = None) -> SourcingEngine:
    """Build a fresh engine from settings and the policy file."""
    settings = settings or get_settings()
    guard = CollaboratorGuard(
        timeout_seconds=settings.collaborator_timeout_seconds,
        failure_threshold=settings.circuit_breaker_threshold,
        breaker_timeout_seconds=settings.circuit_breaker_timeout_seconds,
    )
    return SourcingEngine(
        collaborators=build_collaborators(settings),
        policy=settings.get_policy(),
        guard=guard,
    )
