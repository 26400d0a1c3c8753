"""SQLAlchemy models for vital-sign readings and risk assessments."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.schemas.base import DeteriorationPattern, Severity

if TYPE_CHECKING:
    from app.models.patient import Patient


class VitalSignReading(Base):
    """A single captured set of vital signs.

    Readings are append-only: each submission creates a new row. The
    risk score computed at capture time is stored alongside the values.
    Every vital sign is independently optional.
    """

    __tablename__ = "vital_sign_readings"

    patient_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    recorded_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Vital signs
    heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    respiratory_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    oxygen_saturation: Mapped[int | None] = mapped_column(Integer, nullable=True)
    temperature: Mapped[Decimal | None] = mapped_column(Numeric(4, 1), nullable=True)
    systolic_bp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    diastolic_bp: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Context
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    height_cm: Mapped[float | None] = mapped_column(Float, nullable=True)
    age_years: Mapped[int | None] = mapped_column(Integer, nullable=True)
    symptoms: Mapped[list | None] = mapped_column(JSONB, nullable=True, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Score at capture time
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    severity: Mapped[Severity] = mapped_column(
        Enum(Severity, name="severity", create_constraint=True),
        nullable=False,
        default=Severity.MEDIUM,
    )
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # Relationships
    patient: Mapped["Patient"] = relationship(back_populates="readings")

    def __repr__(self) -> str:
        return (
            f"<VitalSignReading(id={self.id}, patient_id={self.patient_id}, "
            f"risk_score={self.risk_score}, severity={self.severity})>"
        )


class RiskAssessment(Base):
    """Risk score history entry for a scored reading."""

    __tablename__ = "risk_assessments"

    patient_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reading_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("vital_sign_readings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    severity: Mapped[Severity] = mapped_column(
        Enum(Severity, name="severity", create_constraint=True),
        nullable=False,
        index=True,
    )
    band_version: Mapped[str] = mapped_column(String(50), nullable=False)
    risk_factors: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    recommendations: Mapped[list] = mapped_column(JSONB, nullable=False, default=list)
    deterioration_pattern: Mapped[DeteriorationPattern] = mapped_column(
        Enum(
            DeteriorationPattern,
            name="deterioration_pattern",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=DeteriorationPattern.STABLE,
    )
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # Relationships
    patient: Mapped["Patient"] = relationship(back_populates="risk_assessments")

    def __repr__(self) -> str:
        return f"<RiskAssessment(id={self.id}, patient_id={self.patient_id}, risk_score={self.risk_score})>"
