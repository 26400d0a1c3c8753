"""SQLAlchemy model for Patient."""

from typing import TYPE_CHECKING

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.schemas.base import Gender

if TYPE_CHECKING:
    from app.models.vitals import RiskAssessment, VitalSignReading


class Patient(Base):
    """Pediatric patient registered by a provider.

    A patient belongs to exactly one recording provider. Vital-sign
    readings and risk assessments are appended to the patient and never
    updated.
    """

    __tablename__ = "patients"

    provider_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[Gender | None] = mapped_column(
        Enum(
            Gender,
            name="gender",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=True,
    )
    diagnosis: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    readings: Mapped[list["VitalSignReading"]] = relationship(
        back_populates="patient",
        cascade="all, delete-orphan",
    )
    risk_assessments: Mapped[list["RiskAssessment"]] = relationship(
        back_populates="patient",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, provider_id={self.provider_id}, name={self.name})>"
