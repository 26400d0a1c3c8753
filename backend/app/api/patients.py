"""Patient API endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.audit import AuditAction, log_data_access
from app.core.config import settings
from app.core.database import get_db
from app.models import Patient as PatientModel
from app.models import VitalSignReading as VitalSignReadingModel
from app.schemas import (
    PatientCreate,
    PatientCreateResponse,
    PatientDetail,
    PatientSummary,
    VitalSignReading,
)
from app.services.risk_scorer import classify_severity, get_risk_scorer_service
from app.services.vitals_recorder import VitalsRecorderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])

# Type alias for database session dependency (avoids B008 linting issue)
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_patient_or_404(db: AsyncSession, patient_id: UUID) -> PatientModel:
    """Load a patient by ID or raise 404."""
    stmt = select(PatientModel).where(PatientModel.id == str(patient_id))
    result = await db.execute(stmt)
    patient = result.scalar_one_or_none()

    if patient is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient {patient_id} not found",
        )
    return patient


@router.post(
    "",
    response_model=PatientCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a patient",
    description="Register a patient with optional initial vitals. Returns the risk score for the submitted vitals.",
)
async def create_patient(
    patient: PatientCreate,
    db: DbSession,
) -> PatientCreateResponse:
    """Register a patient and score any vitals submitted with the form.

    An initial reading is stored only when at least one vital sign is
    provided. The risk score is returned either way (0 with no vitals).

    Args:
        patient: Patient demographics and optional vitals.
        db: Database session.

    Returns:
        PatientCreateResponse with patient_id, risk score and recommendation.
    """
    db_patient = PatientModel(
        provider_id=patient.provider_id,
        name=patient.name,
        age=patient.age,
        gender=patient.gender,
        diagnosis=patient.diagnosis,
    )
    db.add(db_patient)
    await db.flush()  # Get the ID without committing

    log_data_access(
        "patient",
        resource_id=db_patient.id,
        patient_id=db_patient.id,
        user_id=patient.provider_id,
        action=AuditAction.CREATE,
    )

    reading_id = None
    if patient.has_any_vital:
        recorder = VitalsRecorderService(db)
        recorded = await recorder.record(
            db_patient.id,
            patient,
            recorded_by=patient.provider_id,
            age_years=patient.age,
            symptoms=patient.symptoms,
            is_first_reading=True,
        )
        assessment = recorded.assessment
        reading_id = UUID(recorded.reading.id)
    else:
        assessment = get_risk_scorer_service().assess(patient)

    logger.info(
        f"Registered patient {db_patient.id} for provider {patient.provider_id}: "
        f"risk_score={assessment.risk_score}"
    )

    return PatientCreateResponse(
        patient_id=UUID(db_patient.id),
        name=patient.name,
        reading_id=reading_id,
        risk_score=assessment.risk_score,
        severity=assessment.severity,
        recommendation=assessment.recommendation,
        risk_factors=assessment.risk_factors,
    )


@router.get(
    "",
    response_model=list[PatientSummary],
    summary="List a provider's patients",
    description="List patients for a provider, newest first, with their latest reading and risk score.",
)
async def list_patients(
    provider_id: Annotated[str, Query(min_length=1, description="Recording provider")],
    db: DbSession,
) -> list[PatientSummary]:
    """List patients for a provider.

    The risk score is recomputed from the latest reading with the
    current band table. Patients without readings score 0.

    Args:
        provider_id: Provider whose patients to list.
        db: Database session.

    Returns:
        List of PatientSummary objects.
    """
    stmt = (
        select(PatientModel)
        .where(PatientModel.provider_id == provider_id)
        .order_by(PatientModel.created_at.desc())
    )
    result = await db.execute(stmt)
    patients = result.scalars().all()

    scorer = get_risk_scorer_service()
    summaries = []
    for p in patients:
        latest_stmt = (
            select(VitalSignReadingModel)
            .where(VitalSignReadingModel.patient_id == p.id)
            .order_by(VitalSignReadingModel.recorded_at.desc())
            .limit(1)
        )
        latest = (await db.execute(latest_stmt)).scalar_one_or_none()
        risk_score = scorer.score(latest) if latest is not None else 0

        summaries.append(
            PatientSummary(
                id=UUID(p.id),
                name=p.name,
                age=p.age,
                gender=p.gender,
                diagnosis=p.diagnosis,
                latest_vitals=VitalSignReading.model_validate(latest) if latest is not None else None,
                risk_score=risk_score,
                severity=classify_severity(risk_score),
            )
        )

    log_data_access("patient_list", user_id=provider_id)
    logger.info(f"Listed {len(summaries)} patients for provider {provider_id}")

    return summaries


@router.get(
    "/{patient_id}",
    response_model=PatientDetail,
    summary="Get a patient",
    description="Retrieve a patient with their most recent vital-sign readings.",
)
async def get_patient(
    patient_id: UUID,
    db: DbSession,
    provider_id: Annotated[str | None, Query(description="Restrict to this provider's patients")] = None,
) -> PatientDetail:
    """Get a patient with recent vitals history.

    Args:
        patient_id: The patient identifier.
        db: Database session.
        provider_id: When given, the patient must belong to this provider.

    Returns:
        PatientDetail with the latest readings, newest first.

    Raises:
        HTTPException: 404 if the patient does not exist or belongs to
            another provider.
    """
    patient = await get_patient_or_404(db, patient_id)

    if provider_id is not None and patient.provider_id != provider_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient {patient_id} not found",
        )

    stmt = (
        select(VitalSignReadingModel)
        .where(VitalSignReadingModel.patient_id == str(patient_id))
        .order_by(VitalSignReadingModel.recorded_at.desc())
        .limit(settings.vitals_history_limit)
    )
    result = await db.execute(stmt)
    readings = result.scalars().all()

    log_data_access("patient", resource_id=str(patient_id), patient_id=str(patient_id), user_id=provider_id)

    return PatientDetail(
        id=UUID(patient.id),
        provider_id=patient.provider_id,
        name=patient.name,
        age=patient.age,
        gender=patient.gender,
        diagnosis=patient.diagnosis,
        created_at=patient.created_at,
        vitals_history=[VitalSignReading.model_validate(r) for r in readings],
    )
