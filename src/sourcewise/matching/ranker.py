"""Match ranking: factor scores -> scored, explained, tiered results."""

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from ..core.errors import ValidationError
from ..infrastructure.logging_config import get_logger
from ..infrastructure.metrics import record_match_run
from ..models import (
    FactorBreakdown,
    MatchResult,
    RankingReport,
    RecommendationTier,
    RFQRequirement,
    RiskLevel,
    ScoringPolicy,
    SkippedSupplier,
    Supplier,
    VerificationLevel,
    parse_requirement,
    parse_supplier,
)
from ..utils.helpers import clamp, format_duration_days, format_price
from .factor_scorer import FactorScorer
from .lexical_index import LexicalIndex

logger = get_logger(__name__)


class MatchRanker:
    """Ranks suppliers for a requirement.

    Results are ordered by descending score with ties broken by supplier id,
    so equal inputs always produce identical output. A supplier record that
    fails validation is skipped and reported; it never aborts the ranking.
    """

    def __init__(self, policy: ScoringPolicy | None = None, scorer: FactorScorer | None = None):
        self.policy = policy or ScoringPolicy()
        self.scorer = scorer or FactorScorer(self.policy)

    def rank(
        self,
        requirement: RFQRequirement | Mapping[str, Any],
        suppliers: Sequence[Supplier | Mapping[str, Any]],
        as_of: date | None = None,
    ) -> RankingReport:
        """Score and order suppliers against a requirement.

        Args:
            requirement: The buyer requirement. A malformed requirement is
                fatal for the whole call since every score depends on it.
            suppliers: Catalog entries, typed or raw.
            as_of: Reference date for lead-time scoring (defaults to today).

        Returns:
            RankingReport with ordered matches and skipped suppliers.
        """
        requirement = parse_requirement(requirement)
        as_of = as_of or date.today()

        valid: list[Supplier] = []
        skipped: list[SkippedSupplier] = []
        for record in suppliers:
            try:
                valid.append(parse_supplier(record))
            except ValidationError as e:
                skipped.append(
                    SkippedSupplier(
                        supplier_id=_record_id(record), field=e.field, message=e.message
                    )
                )
                logger.warning(
                    "supplier_skipped",
                    requirement_id=requirement.id,
                    supplier_id=_record_id(record),
                    field=e.field,
                    error=e.message,
                )

        candidates = self.narrow(requirement, valid)
        matches = [self.evaluate(requirement, supplier, as_of) for supplier in candidates]
        matches.sort(key=lambda m: (-m.score, m.supplier.id))

        record_match_run(matched=len(matches), skipped=len(skipped))
        logger.info(
            "ranking_complete",
            requirement_id=requirement.id,
            catalog_size=len(suppliers),
            candidates=len(candidates),
            matches=len(matches),
            skipped=len(skipped),
        )

        return RankingReport(
            requirement_id=requirement.id,
            matches=matches,
            skipped=skipped,
            candidates_considered=len(candidates),
        )

    def narrow(self, requirement: RFQRequirement, suppliers: list[Supplier]) -> list[Supplier]:
        """Pre-filter large catalogs through the lexical index.

        Small catalogs are returned unchanged so every supplier is scored.
        """
        if len(suppliers) <= self.policy.prefilter_threshold:
            return suppliers

        index = LexicalIndex(suppliers, self.policy.index_fields)
        hits: dict[str, tuple[Supplier, float]] = {}
        for query in (requirement.category, requirement.title):
            for supplier, raw_score in index.search(query):
                best = hits.get(supplier.id)
                if best is None or raw_score < best[1]:
                    hits[supplier.id] = (supplier, raw_score)

        ordered = sorted(hits.values(), key=lambda item: (item[1], item[0].id))
        return [supplier for supplier, _ in ordered[: self.policy.max_candidates]]

    def evaluate(
        self, requirement: RFQRequirement, supplier: Supplier, as_of: date
    ) -> MatchResult:
        """Build the full match result for one supplier."""
        breakdown = self.scorer.score(requirement, supplier, as_of)
        score = clamp(breakdown.total, 0.0, 100.0)
        reasons, concerns = self.explain(requirement, supplier, breakdown)

        return MatchResult(
            supplier=supplier,
            score=score,
            breakdown=breakdown,
            confidence=self.confidence(score, reasons, concerns),
            match_reasons=reasons,
            concerns=concerns,
            estimated_price=self.estimate_price(requirement, supplier),
            estimated_delivery=self.estimate_delivery(requirement, supplier),
            risk_level=self.risk_level(breakdown, supplier),
            recommendation=self.tier(score, len(concerns)),
        )

    # -------------------------------------------------------------------------
    # Explanations
    # -------------------------------------------------------------------------

    def explain(
        self, requirement: RFQRequirement, supplier: Supplier, breakdown: FactorBreakdown
    ) -> tuple[list[str], list[str]]:
        """Derive advisory reasons and concerns from factor outcomes."""
        limits = self.policy.advisory
        weights = self.policy.weights
        reasons: list[str] = []
        concerns: list[str] = []

        category_ratio, category = self.scorer.category_fit(requirement, supplier)
        if category_ratio >= 1.0:
            reasons.append(f"Exact category match: {category}")
        elif category is None:
            concerns.append("Different category specialization")

        if breakdown.budget_compatibility >= weights.budget_compatibility:
            reasons.append("Price range fits the target budget")
        elif breakdown.budget_compatibility == 0:
            concerns.append("Price range is outside the target budget")

        if supplier.rating >= limits.excellent_rating:
            reasons.append(f"Excellent rating: {supplier.rating}/5")
        elif supplier.rating < limits.low_rating:
            concerns.append(f"Low rating: {supplier.rating}/5")

        _, proximity = self.scorer.location_fit(requirement, supplier)
        if proximity == "city":
            reasons.append("Same city as delivery location")
        elif proximity == "state":
            reasons.append("Same state as delivery location")
        elif proximity == "different":
            concerns.append("Different location from delivery point")

        if supplier.compliance_score < limits.min_compliance:
            concerns.append(f"Compliance score below {limits.min_compliance:g}")

        if supplier.on_time_delivery_rate >= limits.strong_on_time:
            reasons.append(f"Strong on-time delivery: {supplier.on_time_delivery_rate:g}%")
        elif supplier.on_time_delivery_rate < limits.weak_on_time:
            concerns.append(f"Weak on-time delivery: {supplier.on_time_delivery_rate:g}%")

        if supplier.quality_rating < limits.low_quality:
            concerns.append(f"Quality rating below {limits.low_quality:g}")

        if breakdown.capacity == 0:
            concerns.append("Production capacity may be insufficient for this order")

        if breakdown.lead_time == 0:
            concerns.append(f"Lead time of {supplier.lead_time_days} days misses the deadline")

        if supplier.verification_level == VerificationLevel.PREMIUM:
            reasons.append("Premium verified supplier")

        return reasons, concerns

    def confidence(self, score: float, reasons: list[str], concerns: list[str]) -> float:
        policy = self.policy
        value = policy.confidence_base_weight * score / 100
        if len(reasons) > policy.confidence_count_threshold:
            value += policy.confidence_reason_bonus
        if len(concerns) > policy.confidence_count_threshold:
            value -= policy.confidence_concern_penalty
        return clamp(value)

    def tier(self, score: float, concern_count: int) -> RecommendationTier:
        """Apply the recommendation decision table."""
        for rule in self.policy.tier_table:
            if score >= rule.min_score and (
                rule.max_concerns is None or concern_count <= rule.max_concerns
            ):
                return rule.tier
        return RecommendationTier.NOT_SUITABLE

    def risk_level(self, breakdown: FactorBreakdown, supplier: Supplier) -> RiskLevel:
        policy = self.policy
        critical = (breakdown.compliance + breakdown.delivery_history + breakdown.quality) / 3
        if (
            critical >= policy.low_risk_critical_points
            and supplier.financial_rating >= policy.low_risk_financial_rating
        ):
            return RiskLevel.LOW
        if (
            critical >= policy.medium_risk_critical_points
            and supplier.financial_rating >= policy.medium_risk_financial_rating
        ):
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    # -------------------------------------------------------------------------
    # Estimates
    # -------------------------------------------------------------------------

    def estimate_price(self, requirement: RFQRequirement, supplier: Supplier) -> str:
        price_range = supplier.price_range
        if price_range.max <= 0:
            return "Price on request"
        estimated = min(max(requirement.budget, price_range.min), price_range.max)
        return format_price(round(estimated, 2), price_range.currency)

    def estimate_delivery(self, requirement: RFQRequirement, supplier: Supplier) -> str:
        target = self.policy.delivery_days_by_urgency.get(requirement.urgency.value, 21)
        return format_duration_days(max(target, supplier.lead_time_days))


def _record_id(record: Any) -> str | None:
    if isinstance(record, Supplier):
        return record.id
    if isinstance(record, Mapping):
        value = record.get("id")
        return str(value) if value is not None else None
    return None
