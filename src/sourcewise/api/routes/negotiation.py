"""Negotiation analysis endpoints."""

from fastapi import APIRouter, Depends

from sourcewise.engine import SourcingEngine
from sourcewise.models import NegotiationReport, RFQAnalysis

from ..schemas import AnalyzeRequest
from .deps import get_engine

router = APIRouter(prefix="/api/v1/rfqs", tags=["Negotiation"])


@router.post("/analyze", response_model=RFQAnalysis)
async def analyze_rfq(
    request: AnalyzeRequest, engine: SourcingEngine = Depends(get_engine)
) -> RFQAnalysis:
    """Market, supplier-risk and strategy analysis of a multi-item RFQ."""
    return await engine.analyze_complex_rfq(request.rfq)


@router.get("/{rfq_id}/negotiation-report", response_model=NegotiationReport)
async def negotiation_report(
    rfq_id: str, engine: SourcingEngine = Depends(get_engine)
) -> NegotiationReport:
    """Negotiation report for a stored RFQ."""
    return await engine.generate_negotiation_report(rfq_id)
