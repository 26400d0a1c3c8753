"""Audit trail for patient data.

Every patient registration, vitals read and stored risk assessment is
written to the ``audit`` logger with a structured ``audit_event`` payload
attached to the log record. Deployments route that logger to an
append-only sink.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """Kinds of audited actions."""

    READ = "read"
    CREATE = "create"
    RISK_ASSESSMENT = "risk_assessment"
    ERROR = "error"


class AuditEvent(BaseModel):
    """One audited action on a patient resource."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: AuditAction
    resource_type: str = Field(..., description="e.g. patient, vital_sign_reading")
    resource_id: str | None = None
    patient_id: str | None = None
    user_id: str | None = Field(None, description="Provider who performed the action")
    details: dict | None = None
    success: bool = True


def log_audit(
    action: AuditAction,
    resource_type: str,
    resource_id: str | None = None,
    patient_id: str | None = None,
    user_id: str | None = None,
    details: dict | None = None,
    success: bool = True,
) -> AuditEvent:
    """Record an audit event.

    Successful actions are logged at INFO, failures at WARNING.

    Returns:
        The AuditEvent that was logged.
    """
    event = AuditEvent(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        patient_id=patient_id,
        user_id=user_id,
        details=details,
        success=success,
    )

    target = f"{resource_type}/{resource_id}" if resource_id else resource_type
    message = f"AUDIT: {action.value} {target}"
    if patient_id:
        message += f" patient={patient_id}"
    if user_id:
        message += f" by={user_id}"

    audit_logger.log(
        logging.INFO if success else logging.WARNING,
        f"{message} success={success}",
        extra={"audit_event": event.model_dump()},
    )
    return event


def log_data_access(
    resource_type: str,
    resource_id: str | None = None,
    patient_id: str | None = None,
    user_id: str | None = None,
    action: AuditAction = AuditAction.READ,
) -> AuditEvent:
    """Shortcut for read/create access to patient data."""
    return log_audit(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        patient_id=patient_id,
        user_id=user_id,
    )


def log_risk_assessment(
    patient_id: str,
    reading_id: str | None,
    risk_score: int,
    severity: str,
    user_id: str | None = None,
) -> AuditEvent:
    """Record a stored risk assessment with its score and severity.

    Args:
        patient_id: Patient the reading belongs to.
        reading_id: Reading that was scored.
        risk_score: Score 0-100.
        severity: Severity label.
        user_id: Provider who submitted the reading.
    """
    return log_audit(
        action=AuditAction.RISK_ASSESSMENT,
        resource_type="vital_sign_reading",
        resource_id=reading_id,
        patient_id=patient_id,
        user_id=user_id,
        details={"risk_score": risk_score, "severity": severity},
    )
