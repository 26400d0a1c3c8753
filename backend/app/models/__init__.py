"""SQLAlchemy ORM models for the Pediatric Vitals Risk Service.

All models inherit from Base which provides:
- id: UUID primary key
- created_at: Timestamp

Models:
- Patient
- VitalSignReading (append-only)
- RiskAssessment (risk score history)
"""

from app.core.database import Base
from app.models.patient import Patient
from app.models.vitals import RiskAssessment, VitalSignReading

__all__ = [
    "Base",
    "Patient",
    "VitalSignReading",
    "RiskAssessment",
]
