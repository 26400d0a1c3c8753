"""Vital-sign, risk assessment and reference range schemas."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.base import DeteriorationPattern, Severity

TEMPERATURE_STEP = Decimal("0.1")


class VitalSigns(BaseModel):
    """Vital-sign values as submitted on a vitals form.

    Every field is optional. Temperature accepts numbers or
    string-encoded decimals ("38.2").
    """

    heart_rate: int | None = Field(None, ge=0, le=400, description="Heart rate (beats/min)")
    respiratory_rate: int | None = Field(None, ge=0, le=200, description="Respiratory rate (breaths/min)")
    oxygen_saturation: int | None = Field(None, ge=0, le=100, description="SpO₂ (%)")
    temperature: float | None = Field(None, ge=20, le=45, description="Temperature (°C)")
    systolic_bp: int | None = Field(None, ge=0, le=300, description="Systolic blood pressure (mmHg)")
    diastolic_bp: int | None = Field(None, ge=0, le=250, description="Diastolic blood pressure (mmHg)")

    @field_validator("temperature")
    @classmethod
    def round_temperature(cls, v: float | None) -> float | None:
        """Round to the stored precision so the scored value is the stored value."""
        if v is None:
            return v
        # numeric(4, 1) rounds half away from zero
        return float(Decimal(str(v)).quantize(TEMPERATURE_STEP, rounding=ROUND_HALF_UP))

    @property
    def has_any_vital(self) -> bool:
        """Check whether at least one vital sign was provided."""
        return any(
            v is not None
            for v in (
                self.heart_rate,
                self.respiratory_rate,
                self.oxygen_saturation,
                self.temperature,
                self.systolic_bp,
                self.diastolic_bp,
            )
        )


class VitalSignReadingCreate(VitalSigns):
    """Schema for logging a new vital-sign reading."""

    weight_kg: float | None = Field(None, gt=0, description="Weight (kg)")
    height_cm: float | None = Field(None, gt=0, description="Height (cm)")
    age_years: int | None = Field(None, ge=0, le=18, description="Age at time of reading (years)")
    symptoms: list[str] | None = Field(None, description="Presenting symptoms")
    notes: str | None = Field(None, description="Free-text notes")
    recorded_by: str | None = Field(None, description="Provider who captured the reading")


class VitalSignReading(VitalSigns):
    """Schema for a stored vital-sign reading."""

    id: UUID = Field(..., description="Reading identifier")
    patient_id: UUID = Field(..., description="Patient identifier")
    weight_kg: float | None = None
    height_cm: float | None = None
    age_years: int | None = None
    symptoms: list[str] | None = None
    notes: str | None = None
    recorded_by: str | None = None
    risk_score: int = Field(..., ge=0, le=100, description="Risk score at capture time")
    severity: Severity = Field(..., description="Severity band at capture time")
    recorded_at: datetime = Field(..., description="When the reading was captured")

    model_config = {"from_attributes": True}


class RangeFlag(BaseModel):
    """A value outside the age-appropriate reference range."""

    parameter: str
    value: float
    low: float | None = None
    high: float | None = None
    direction: str = Field(..., description="'low' or 'high'")

    model_config = {"from_attributes": True}


class VitalsLogResponse(BaseModel):
    """Response after logging a reading."""

    reading_id: UUID = Field(..., description="Stored reading identifier")
    risk_score: int = Field(..., ge=0, le=100)
    severity: Severity
    recommendation: str
    risk_factors: list[str] = Field(default_factory=list)
    deterioration_pattern: DeteriorationPattern
    age_range_flags: list[RangeFlag] = Field(default_factory=list)


class RiskAssessment(BaseModel):
    """Schema for a stored risk assessment (risk history entry)."""

    id: UUID
    patient_id: UUID
    reading_id: UUID | None = None
    risk_score: int = Field(..., ge=0, le=100)
    severity: Severity
    band_version: str
    risk_factors: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    deterioration_pattern: DeteriorationPattern
    calculated_at: datetime

    model_config = {"from_attributes": True}


class VitalTrendsResponse(BaseModel):
    """Trend analysis over a time window."""

    vitals: list[VitalSignReading]
    trends: dict[str, float] = Field(..., description="Last minus first value per vital sign")
    risk_score_delta: int
    deterioration_pattern: DeteriorationPattern
    timespan: str


class RiskScoreResponse(BaseModel):
    """Stateless scoring result."""

    risk_score: int = Field(..., ge=0, le=100)
    severity: Severity
    recommendation: str
    risk_factors: list[str] = Field(default_factory=list)
    band_version: str


class PenaltyBand(BaseModel):
    """One band of the scoring table."""

    penalty: int
    label: str
    below: float | None = None
    above: float | None = None


class ParameterBands(BaseModel):
    """Bands for one vital sign, most severe first."""

    parameter: str
    bands: list[PenaltyBand]


class RiskBandTable(BaseModel):
    """The scoring band table and its version."""

    version: str
    parameters: list[ParameterBands]


class ReferenceRange(BaseModel):
    """Normal vital-sign ranges for a pediatric age group."""

    label: str
    age_min: int
    age_max: int
    weight_min: float
    weight_max: float
    heart_rate_min: int
    heart_rate_max: int
    respiratory_rate_min: int
    respiratory_rate_max: int
    systolic_bp_min: int
    systolic_bp_max: int
    diastolic_bp_min: int
    diastolic_bp_max: int
    oxygen_saturation_min: int
    temperature_min: float
    temperature_max: float

    model_config = {"from_attributes": True}
