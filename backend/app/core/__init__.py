"""Core application configuration and utilities."""

from app.core.audit import AuditAction, AuditEvent, log_audit, log_data_access, log_risk_assessment
from app.core.config import settings
from app.core.database import Base, get_db

__all__ = [
    # Config
    "settings",
    # Database
    "Base",
    "get_db",
    # Audit
    "AuditAction",
    "AuditEvent",
    "log_audit",
    "log_data_access",
    "log_risk_assessment",
]
