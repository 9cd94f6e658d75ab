"""Supplier matching endpoints."""

from fastapi import APIRouter, Depends

from sourcewise.engine import SourcingEngine
from sourcewise.models import RankingReport

from ..schemas import MatchRequest
from .deps import get_engine

router = APIRouter(prefix="/api/v1", tags=["Matching"])


@router.post("/matches", response_model=RankingReport)
async def find_matches(
    request: MatchRequest, engine: SourcingEngine = Depends(get_engine)
) -> RankingReport:
    """
    Rank suppliers for a requirement.

    Suppliers that fail validation are listed under ``skipped``; a malformed
    requirement is rejected with 422.
    """
    return await engine.find_matches(request.requirement, request.suppliers, request.as_of)
