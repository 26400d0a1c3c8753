"""Patient schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.base import Gender, Severity
from app.schemas.vitals import VitalSignReading, VitalSigns


class PatientCreate(VitalSigns):
    """Schema for registering a patient, optionally with initial vitals."""

    provider_id: str = Field(..., min_length=1, description="Recording provider identifier")
    name: str = Field(..., min_length=1, max_length=255, description="Patient name")
    age: int | None = Field(None, ge=0, le=18, description="Age in years")
    gender: Gender | None = Field(None, description="Gender")
    diagnosis: str | None = Field(None, description="Working diagnosis")
    symptoms: list[str] | None = Field(None, description="Presenting symptoms")


class PatientCreateResponse(BaseModel):
    """Response after registering a patient."""

    patient_id: UUID
    name: str
    reading_id: UUID | None = Field(None, description="Initial reading, if vitals were given")
    risk_score: int = Field(..., ge=0, le=100)
    severity: Severity
    recommendation: str
    risk_factors: list[str] = Field(default_factory=list)


class PatientSummary(BaseModel):
    """Patient list entry with the latest reading and its score."""

    id: UUID
    name: str
    age: int | None = None
    gender: Gender | None = None
    diagnosis: str | None = None
    latest_vitals: VitalSignReading | None = None
    risk_score: int = Field(..., ge=0, le=100)
    severity: Severity


class PatientDetail(BaseModel):
    """Patient with recent vital-sign history."""

    id: UUID
    provider_id: str
    name: str
    age: int | None = None
    gender: Gender | None = None
    diagnosis: str | None = None
    created_at: datetime
    vitals_history: list[VitalSignReading] = Field(default_factory=list)
