"""Base schemas and enums for the Pediatric Vitals Risk Service."""

from enum import Enum


class Severity(str, Enum):
    """Severity band derived from a risk score.

    MEDIUM is the lowest band; there is no separate LOW label.
    """

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


class DeteriorationPattern(str, Enum):
    """Direction of a patient's risk score over time."""

    IMPROVING = "improving"
    STABLE = "stable"
    DETERIORATING = "deteriorating"


class Gender(str, Enum):
    """Patient gender as captured on the intake form."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
