"""Per-factor scoring of one supplier against one requirement."""

from collections.abc import Mapping
from datetime import date
from typing import Any

from ..models import (
    FactorBreakdown,
    RFQRequirement,
    ScoringPolicy,
    Supplier,
    parse_requirement,
    parse_supplier,
)
from ..utils.helpers import clamp


class FactorScorer:
    """Computes the weighted points of each scoring factor.

    Pure and deterministic: the only time-dependent factor (lead time) is
    evaluated against ``as_of``, which callers pin once per ranking.
    """

    def __init__(self, policy: ScoringPolicy | None = None):
        self.policy = policy or ScoringPolicy()

    def score(
        self,
        requirement: RFQRequirement | Mapping[str, Any],
        supplier: Supplier | Mapping[str, Any],
        as_of: date | None = None,
    ) -> FactorBreakdown:
        """Score a supplier against a requirement.

        Args:
            requirement: The requirement, typed or as a raw record.
            supplier: The supplier, typed or as a raw record.
            as_of: Reference date for the lead-time factor (defaults to today).

        Returns:
            Weighted points for each factor.

        Raises:
            ValidationError: If either record is missing a required field.
        """
        requirement = parse_requirement(requirement)
        supplier = parse_supplier(supplier)
        ratios = self.ratios(requirement, supplier, as_of or date.today())
        weights = self.policy.weights.model_dump()
        return FactorBreakdown(**{name: weights[name] * ratio for name, ratio in ratios.items()})

    def ratios(
        self, requirement: RFQRequirement, supplier: Supplier, as_of: date
    ) -> dict[str, float]:
        """Fraction of each factor's weight earned, each bounded to [0, 1]."""
        raw = {
            "category_match": self.category_fit(requirement, supplier)[0],
            "budget_compatibility": self.budget_fit(requirement, supplier),
            "rating": supplier.rating / 5,
            "location_proximity": self.location_fit(requirement, supplier)[0],
            "compliance": supplier.compliance_score / 100,
            "delivery_history": supplier.on_time_delivery_rate / 100,
            "quality": supplier.quality_rating / 5,
            "capacity": self.capacity_fit(requirement, supplier),
            "lead_time": self.lead_time_fit(requirement, supplier, as_of),
        }
        return {name: clamp(value) for name, value in raw.items()}

    # -------------------------------------------------------------------------
    # Individual factors
    # -------------------------------------------------------------------------

    def category_fit(
        self, requirement: RFQRequirement, supplier: Supplier
    ) -> tuple[float, str | None]:
        """Return (ratio, matched supplier category)."""
        wanted = requirement.category.strip().lower()

        for category in supplier.categories:
            if category.strip().lower() == wanted:
                return 1.0, category

        for category in supplier.categories:
            offered = category.strip().lower()
            if offered and (wanted in offered or offered in wanted):
                return self.policy.category_partial_ratio, category

        return self.policy.category_mismatch_ratio, None

    def budget_fit(self, requirement: RFQRequirement, supplier: Supplier) -> float:
        budget = requirement.budget
        price_range = supplier.price_range
        if price_range.min <= budget <= price_range.max:
            return 1.0
        if price_range.max >= budget * self.policy.budget_near_ratio:
            return self.policy.budget_near_credit
        if price_range.max >= budget * self.policy.budget_far_ratio:
            return self.policy.budget_far_credit
        return 0.0

    def location_fit(self, requirement: RFQRequirement, supplier: Supplier) -> tuple[float, str]:
        """Return (ratio, label) where label names the level of proximity."""
        wanted = requirement.location
        offered = supplier.location
        if wanted is None or offered is None or not (wanted.is_specified and offered.is_specified):
            return self.policy.unspecified_location_credit, "unspecified"

        if _same(wanted.city, offered.city):
            return self.policy.same_city_credit, "city"
        if _same(wanted.state, offered.state):
            return self.policy.same_state_credit, "state"
        if _same(wanted.country, offered.country):
            return self.policy.same_country_credit, "country"
        return 0.0, "different"

    def capacity_fit(self, requirement: RFQRequirement, supplier: Supplier) -> float:
        threshold = requirement.budget * self.policy.capacity_budget_ratio
        return 1.0 if supplier.capacity >= threshold else 0.0

    def lead_time_fit(self, requirement: RFQRequirement, supplier: Supplier, as_of: date) -> float:
        window = (requirement.deadline - as_of).days
        if supplier.lead_time_days <= window:
            return 1.0
        if supplier.lead_time_days <= window * self.policy.lead_time_grace_factor:
            return self.policy.lead_time_grace_credit
        return 0.0


def _same(a: str | None, b: str | None) -> bool:
    return bool(a and b) and a.strip().lower() == b.strip().lower()
