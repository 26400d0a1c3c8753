"""Stateless risk scoring endpoints."""

import logging

from fastapi import APIRouter

from app.schemas import RiskBandTable, RiskScoreResponse, VitalSigns
from app.services.risk_scorer import BAND_TABLE_VERSION, get_risk_scorer_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/risk", tags=["Risk Scoring"])


@router.post(
    "/score",
    response_model=RiskScoreResponse,
    summary="Score vital signs",
    description="Compute the risk score for a set of vital signs without storing anything.",
)
async def score_vitals(vitals: VitalSigns) -> RiskScoreResponse:
    """Score a reading without persisting it.

    Args:
        vitals: Vital-sign values; every field is optional.

    Returns:
        RiskScoreResponse with score, severity, recommendation and factors.
    """
    result = get_risk_scorer_service().assess(vitals)

    return RiskScoreResponse(
        risk_score=result.risk_score,
        severity=result.severity,
        recommendation=result.recommendation,
        risk_factors=result.risk_factors,
        band_version=result.band_version,
    )


@router.get(
    "/bands",
    response_model=RiskBandTable,
    summary="Get the scoring band table",
    description="Return the penalty bands used for scoring, most severe first per parameter.",
)
async def get_risk_bands() -> RiskBandTable:
    """Return the band table with its version."""
    return RiskBandTable(
        version=BAND_TABLE_VERSION,
        parameters=get_risk_scorer_service().get_band_table(),
    )
