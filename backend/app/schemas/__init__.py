"""Pydantic schemas for the Pediatric Vitals Risk Service."""

from app.schemas.base import (
    DeteriorationPattern,
    Gender,
    Severity,
)
from app.schemas.patient import (
    PatientCreate,
    PatientCreateResponse,
    PatientDetail,
    PatientSummary,
)
from app.schemas.vitals import (
    RangeFlag,
    ReferenceRange,
    RiskAssessment,
    RiskBandTable,
    RiskScoreResponse,
    VitalSignReading,
    VitalSignReadingCreate,
    VitalSigns,
    VitalsLogResponse,
    VitalTrendsResponse,
)

__all__ = [
    # Enums
    "DeteriorationPattern",
    "Gender",
    "Severity",
    # Patient
    "PatientCreate",
    "PatientCreateResponse",
    "PatientDetail",
    "PatientSummary",
    # Vitals
    "RangeFlag",
    "ReferenceRange",
    "RiskAssessment",
    "RiskBandTable",
    "RiskScoreResponse",
    "VitalSignReading",
    "VitalSignReadingCreate",
    "VitalSigns",
    "VitalsLogResponse",
    "VitalTrendsResponse",
]
