"""Database-backed vital-sign recorder.

Appends vital-sign readings, scores them with the canonical risk scorer
and stores the matching risk assessment. Readings are never updated.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.audit import log_risk_assessment
from app.models.vitals import RiskAssessment, VitalSignReading
from app.schemas.base import DeteriorationPattern
from app.schemas.vitals import VitalSigns
from app.services.risk_scorer import RiskAssessmentResult, get_risk_scorer_service
from app.services.vital_trends import classify_deterioration

logger = logging.getLogger(__name__)


@dataclass
class RecordedReading:
    """Outcome of recording a reading."""

    reading: VitalSignReading
    assessment: RiskAssessmentResult
    deterioration_pattern: DeteriorationPattern


class VitalsRecorderService:
    """Persist vital-sign readings together with their risk assessment.

    Usage:
        recorder = VitalsRecorderService(session)
        recorded = await recorder.record(patient_id, vitals, recorded_by="prov-1")
        recorded.assessment.risk_score
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the recorder.

        Args:
            session: Async SQLAlchemy session.
        """
        self._session = session
        self._scorer = get_risk_scorer_service()

    async def get_previous_score(self, patient_id: str) -> int | None:
        """Risk score of the patient's most recent reading, if any."""
        stmt = (
            select(VitalSignReading.risk_score)
            .where(VitalSignReading.patient_id == patient_id)
            .order_by(VitalSignReading.recorded_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def record(
        self,
        patient_id: str,
        vitals: VitalSigns,
        *,
        recorded_by: str | None = None,
        age_years: int | None = None,
        weight_kg: float | None = None,
        height_cm: float | None = None,
        symptoms: list[str] | None = None,
        notes: str | None = None,
        is_first_reading: bool = False,
    ) -> RecordedReading:
        """Append a reading and its risk assessment.

        Args:
            patient_id: Patient the reading belongs to.
            vitals: Vital-sign values.
            recorded_by: Provider who captured the reading.
            age_years: Age at time of reading.
            weight_kg: Weight at time of reading.
            height_cm: Height at time of reading.
            symptoms: Presenting symptoms.
            notes: Free-text notes.
            is_first_reading: Skip the previous-score lookup for a new patient.

        Returns:
            RecordedReading with the stored reading and the assessment.
        """
        previous_score = None if is_first_reading else await self.get_previous_score(patient_id)

        assessment = self._scorer.assess(vitals)
        pattern = classify_deterioration(previous_score, assessment.risk_score)

        reading = VitalSignReading(
            patient_id=patient_id,
            recorded_by=recorded_by,
            heart_rate=vitals.heart_rate,
            respiratory_rate=vitals.respiratory_rate,
            oxygen_saturation=vitals.oxygen_saturation,
            temperature=Decimal(str(vitals.temperature)) if vitals.temperature is not None else None,
            systolic_bp=vitals.systolic_bp,
            diastolic_bp=vitals.diastolic_bp,
            weight_kg=weight_kg,
            height_cm=height_cm,
            age_years=age_years,
            symptoms=symptoms,
            notes=notes,
            risk_score=assessment.risk_score,
            severity=assessment.severity,
            recorded_at=datetime.now(UTC),
        )
        self._session.add(reading)
        await self._session.flush()  # Assigns the reading ID

        self._session.add(
            RiskAssessment(
                patient_id=patient_id,
                reading_id=reading.id,
                risk_score=assessment.risk_score,
                severity=assessment.severity,
                band_version=assessment.band_version,
                risk_factors=assessment.risk_factors,
                recommendations=assessment.recommendations,
                deterioration_pattern=pattern,
                calculated_at=reading.recorded_at,
            )
        )
        await self._session.flush()

        log_risk_assessment(
            patient_id=patient_id,
            reading_id=reading.id,
            risk_score=assessment.risk_score,
            severity=assessment.severity.value,
            user_id=recorded_by,
        )
        logger.info(
            f"Recorded reading {reading.id} for patient_id={patient_id}: "
            f"risk_score={assessment.risk_score} severity={assessment.severity.value} "
            f"pattern={pattern.value}"
        )

        return RecordedReading(
            reading=reading,
            assessment=assessment,
            deterioration_pattern=pattern,
        )
