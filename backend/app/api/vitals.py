"""Vital-sign logging, history and trend endpoints."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.patients import get_patient_or_404
from app.core.audit import log_data_access
from app.core.config import settings
from app.core.database import get_db
from app.models import RiskAssessment as RiskAssessmentModel
from app.models import VitalSignReading as VitalSignReadingModel
from app.schemas import (
    RangeFlag,
    RiskAssessment,
    VitalSignReading,
    VitalSignReadingCreate,
    VitalsLogResponse,
    VitalTrendsResponse,
)
from app.services.reference_ranges import get_reference_range_service
from app.services.vital_trends import analyze_trends
from app.services.vitals_recorder import VitalsRecorderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Vitals"])

DbSession = Annotated[AsyncSession, Depends(get_db)]


@router.post(
    "/{patient_id}/vitals",
    response_model=VitalsLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log vital signs",
    description="Append a vital-sign reading for a patient and return its risk assessment.",
)
async def log_vitals(
    patient_id: UUID,
    vitals: VitalSignReadingCreate,
    db: DbSession,
) -> VitalsLogResponse:
    """Log a new vital-sign reading.

    The reading is scored, stored with its score, and a risk assessment
    entry is appended. The deterioration pattern compares against the
    patient's previous reading. Age-range flags use the reading's age,
    falling back to the patient's age.

    Args:
        patient_id: The patient identifier.
        vitals: The reading.
        db: Database session.

    Returns:
        VitalsLogResponse with score, severity, factors and flags.

    Raises:
        HTTPException: 404 if the patient does not exist.
    """
    patient = await get_patient_or_404(db, patient_id)
    age = vitals.age_years if vitals.age_years is not None else patient.age

    recorder = VitalsRecorderService(db)
    recorded = await recorder.record(
        str(patient_id),
        vitals,
        recorded_by=vitals.recorded_by,
        age_years=vitals.age_years,
        weight_kg=vitals.weight_kg,
        height_cm=vitals.height_cm,
        symptoms=vitals.symptoms,
        notes=vitals.notes,
    )

    flags = get_reference_range_service().flag_out_of_range(vitals.model_dump(), age=age)

    return VitalsLogResponse(
        reading_id=UUID(recorded.reading.id),
        risk_score=recorded.assessment.risk_score,
        severity=recorded.assessment.severity,
        recommendation=recorded.assessment.recommendation,
        risk_factors=recorded.assessment.risk_factors,
        deterioration_pattern=recorded.deterioration_pattern,
        age_range_flags=[RangeFlag.model_validate(f) for f in flags],
    )


@router.get(
    "/{patient_id}/vitals",
    response_model=list[VitalSignReading],
    summary="Get vital-sign history",
    description="Retrieve a patient's readings, newest first.",
)
async def get_vital_history(
    patient_id: UUID,
    db: DbSession,
    limit: Annotated[int, Query(ge=1, le=100, description="Max readings to return")] = settings.vitals_history_limit,
    offset: Annotated[int, Query(ge=0, description="Offset for pagination")] = 0,
) -> list[VitalSignReading]:
    """Get vital-sign history for a patient."""
    await get_patient_or_404(db, patient_id)

    stmt = (
        select(VitalSignReadingModel)
        .where(VitalSignReadingModel.patient_id == str(patient_id))
        .order_by(VitalSignReadingModel.recorded_at.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    readings = result.scalars().all()

    log_data_access("vital_sign_reading", patient_id=str(patient_id))
    logger.info(f"Found {len(readings)} readings for patient_id={patient_id}")

    return [VitalSignReading.model_validate(r) for r in readings]


@router.get(
    "/{patient_id}/vitals/latest",
    response_model=VitalSignReading | None,
    summary="Get latest vital signs",
    description="Retrieve the most recent reading for a patient, or null if none exist.",
)
async def get_latest_vitals(
    patient_id: UUID,
    db: DbSession,
) -> VitalSignReading | None:
    """Get the latest reading for a patient."""
    await get_patient_or_404(db, patient_id)

    stmt = (
        select(VitalSignReadingModel)
        .where(VitalSignReadingModel.patient_id == str(patient_id))
        .order_by(VitalSignReadingModel.recorded_at.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    latest = result.scalar_one_or_none()

    if latest is None:
        return None

    log_data_access("vital_sign_reading", resource_id=latest.id, patient_id=str(patient_id))
    return VitalSignReading.model_validate(latest)


@router.get(
    "/{patient_id}/vitals/trends",
    response_model=VitalTrendsResponse | None,
    summary="Get vital-sign trends",
    description="Compare the first and last readings within the last N hours.",
)
async def get_vital_trends(
    patient_id: UUID,
    db: DbSession,
    hours: Annotated[int, Query(ge=1, le=24 * 30, description="Window size in hours")] = 24,
) -> VitalTrendsResponse | None:
    """Get trend analysis for a patient's readings.

    Returns null when there are no readings in the window.
    """
    await get_patient_or_404(db, patient_id)

    cutoff = datetime.now(UTC) - timedelta(hours=hours)
    stmt = (
        select(VitalSignReadingModel)
        .where(
            VitalSignReadingModel.patient_id == str(patient_id),
            VitalSignReadingModel.recorded_at >= cutoff,
        )
        .order_by(VitalSignReadingModel.recorded_at.asc())
    )
    result = await db.execute(stmt)
    readings = result.scalars().all()

    trends = analyze_trends(readings, hours)

    if trends is None:
        return None

    return VitalTrendsResponse(
        vitals=[VitalSignReading.model_validate(r) for r in trends.readings],
        trends=trends.deltas,
        risk_score_delta=trends.risk_score_delta,
        deterioration_pattern=trends.deterioration_pattern,
        timespan=trends.timespan,
    )


@router.get(
    "/{patient_id}/risk-history",
    response_model=list[RiskAssessment],
    summary="Get risk score history",
    description="Retrieve stored risk assessments for a patient, newest first.",
)
async def get_risk_history(
    patient_id: UUID,
    db: DbSession,
    limit: Annotated[int, Query(ge=1, le=200, description="Max entries to return")] = 20,
) -> list[RiskAssessment]:
    """Get risk assessment history for a patient."""
    await get_patient_or_404(db, patient_id)

    stmt = (
        select(RiskAssessmentModel)
        .where(RiskAssessmentModel.patient_id == str(patient_id))
        .order_by(RiskAssessmentModel.calculated_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    entries = result.scalars().all()

    log_data_access("risk_assessment", patient_id=str(patient_id))

    return [RiskAssessment.model_validate(e) for e in entries]
