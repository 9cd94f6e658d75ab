"""Supplier counterparty risk."""

from datetime import datetime

from ..data.interfaces import SupplierHistory
from ..infrastructure.logging_config import get_logger
from ..models import FallbackNotice, NegotiationPolicy, Supplier, SupplierRisk
from ..utils import clamp, mean

logger = get_logger(__name__)


class RiskAggregator:
    """Scores a supplier's counterparty risk from its profile and history.

    The score is the mean of four terms: rating / 5, response experience
    (capped at ``experience_response_cap`` responses), a transaction penalty
    and a verification penalty. Higher is worse.
    """

    def __init__(self, policy: NegotiationPolicy | None = None):
        self.policy = policy or NegotiationPolicy()

    def assess(
        self,
        supplier_id: str,
        supplier: Supplier | None,
        history: SupplierHistory | None,
        now: datetime | None = None,
    ) -> SupplierRisk:
        policy = self.policy

        if supplier is None and history is None:
            logger.warning("supplier_unknown", supplier_id=supplier_id)
            return SupplierRisk(
                supplier_id=supplier_id,
                risk_score=policy.default_supplier_risk,
                average_response_hours=policy.default_response_hours,
                diagnostics=[
                    FallbackNotice(
                        source="supplier_directory",
                        subject=supplier_id,
                        reason="supplier and history not found",
                        substituted=f"risk {policy.default_supplier_risk:g}",
                    )
                ],
            )

        diagnostics: list[FallbackNotice] = []
        history = history or SupplierHistory(supplier_id=supplier_id)
        verified = history.verified or (supplier is not None and supplier.is_verified)
        responses = len(history.responses)

        if supplier is not None:
            rating = supplier.rating
            rating_term = rating / 5
        else:
            rating = None
            rating_term = policy.default_supplier_risk
            diagnostics.append(
                FallbackNotice(
                    source="supplier_directory.supplier",
                    subject=supplier_id,
                    reason="no supplier profile",
                    substituted=f"rating risk {policy.default_supplier_risk:g}",
                )
            )

        terms = [
            rating_term,
            min(1.0, responses / policy.experience_response_cap),
            policy.transactions_penalty if history.transaction_count > 0
            else policy.no_transactions_penalty,
            policy.verified_penalty if verified else policy.unverified_penalty,
        ]

        hours = self.average_response_hours(history, now)
        if hours is None:
            hours = policy.default_response_hours
            diagnostics.append(
                FallbackNotice(
                    source="supplier_directory.history",
                    subject=supplier_id,
                    reason="no recorded responses",
                    substituted=f"average response {policy.default_response_hours:g}h",
                )
            )

        score = clamp(mean(terms))
        logger.debug(
            "supplier_risk_assessed",
            supplier_id=supplier_id,
            risk_score=round(score, 4),
            responses=responses,
            transactions=history.transaction_count,
            verified=verified,
        )
        return SupplierRisk(
            supplier_id=supplier_id,
            risk_score=score,
            rating=rating,
            response_count=responses,
            transaction_count=history.transaction_count,
            verified=verified,
            average_response_hours=hours,
            diagnostics=diagnostics,
        )

    @staticmethod
    def average_response_hours(
        history: SupplierHistory, now: datetime | None = None
    ) -> float | None:
        """Mean hours from RFQ creation to response; open RFQs count up to now."""
        if not history.responses:
            return None
        hours = []
        for response in history.responses:
            end = response.responded_at or now or datetime.now(response.created_at.tzinfo)
            hours.append((end - response.created_at).total_seconds() / 3600)
        return mean(hours)
