"""Create patient, vital-sign reading and risk assessment tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    gender_enum = postgresql.ENUM("male", "female", "other", name="gender", create_type=False)
    severity_enum = postgresql.ENUM("CRITICAL", "HIGH", "MEDIUM", name="severity", create_type=False)
    pattern_enum = postgresql.ENUM(
        "improving", "stable", "deteriorating", name="deterioration_pattern", create_type=False
    )
    gender_enum.create(op.get_bind(), checkfirst=True)
    severity_enum.create(op.get_bind(), checkfirst=True)
    pattern_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "patients",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("provider_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", gender_enum, nullable=True),
        sa.Column("diagnosis", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_patients_provider_id", "patients", ["provider_id"])

    op.create_table(
        "vital_sign_readings",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("patient_id", sa.UUID(), nullable=False),
        sa.Column("recorded_by", sa.String(255), nullable=True),
        sa.Column("heart_rate", sa.Integer(), nullable=True),
        sa.Column("respiratory_rate", sa.Integer(), nullable=True),
        sa.Column("oxygen_saturation", sa.Integer(), nullable=True),
        sa.Column("temperature", sa.Numeric(4, 1), nullable=True),
        sa.Column("systolic_bp", sa.Integer(), nullable=True),
        sa.Column("diastolic_bp", sa.Integer(), nullable=True),
        sa.Column("weight_kg", sa.Float(), nullable=True),
        sa.Column("height_cm", sa.Float(), nullable=True),
        sa.Column("age_years", sa.Integer(), nullable=True),
        sa.Column("symptoms", postgresql.JSONB(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("risk_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("severity", severity_enum, nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_vital_sign_readings_patient_id", "vital_sign_readings", ["patient_id"])
    op.create_index("ix_vital_sign_readings_recorded_at", "vital_sign_readings", ["recorded_at"])

    op.create_table(
        "risk_assessments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("patient_id", sa.UUID(), nullable=False),
        sa.Column("reading_id", sa.UUID(), nullable=True),
        sa.Column("risk_score", sa.Integer(), nullable=False),
        sa.Column("severity", severity_enum, nullable=False),
        sa.Column("band_version", sa.String(50), nullable=False),
        sa.Column("risk_factors", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("recommendations", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("deterioration_pattern", pattern_enum, nullable=False),
        sa.Column("calculated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reading_id"], ["vital_sign_readings.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_risk_assessments_patient_id", "risk_assessments", ["patient_id"])
    op.create_index("ix_risk_assessments_reading_id", "risk_assessments", ["reading_id"])
    op.create_index("ix_risk_assessments_severity", "risk_assessments", ["severity"])
    op.create_index("ix_risk_assessments_calculated_at", "risk_assessments", ["calculated_at"])


def downgrade() -> None:
    op.drop_table("risk_assessments")
    op.drop_table("vital_sign_readings")
    op.drop_table("patients")
    op.execute("DROP TYPE IF EXISTS deterioration_pattern")
    op.execute("DROP TYPE IF EXISTS severity")
    op.execute("DROP TYPE IF EXISTS gender")
