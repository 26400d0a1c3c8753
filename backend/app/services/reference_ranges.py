"""Pediatric Vital-Sign Reference Ranges Service.

Normal vital-sign ranges by pediatric age group. Used to flag readings
that fall outside what is expected for the child's age. Flags are
informational and do not change the risk score.
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any

from app.services.risk_scorer import read_vital, to_number

logger = logging.getLogger(__name__)

DEFAULT_AGE_YEARS = 5


@dataclass(frozen=True)
class AgeGroupRange:
    """Normal vital-sign ranges for an age group (years, inclusive)."""

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

    def contains(self, age: float) -> bool:
        """Check whether an age falls into this group."""
        return self.age_min <= age <= self.age_max


@dataclass
class RangeFlag:
    """A reading value outside the age-appropriate range."""

    parameter: str
    value: float
    low: float | None
    high: float | None
    direction: str  # "low" or "high"


# ============================================================================
# Reference Range Table
# ============================================================================

PEDIATRIC_REFERENCE_RANGES: list[AgeGroupRange] = [
    AgeGroupRange(
        label="Infant",
        age_min=0,
        age_max=1,
        weight_min=3,
        weight_max=10,
        heart_rate_min=100,
        heart_rate_max=160,
        respiratory_rate_min=30,
        respiratory_rate_max=60,
        systolic_bp_min=50,
        systolic_bp_max=90,
        diastolic_bp_min=30,
        diastolic_bp_max=60,
        oxygen_saturation_min=95,
        temperature_min=36.5,
        temperature_max=37.5,
    ),
    AgeGroupRange(
        label="Toddler",
        age_min=1,
        age_max=3,
        weight_min=10,
        weight_max=15,
        heart_rate_min=90,
        heart_rate_max=150,
        respiratory_rate_min=24,
        respiratory_rate_max=40,
        systolic_bp_min=80,
        systolic_bp_max=110,
        diastolic_bp_min=50,
        diastolic_bp_max=70,
        oxygen_saturation_min=95,
        temperature_min=36.5,
        temperature_max=37.5,
    ),
    AgeGroupRange(
        label="Preschool",
        age_min=3,
        age_max=6,
        weight_min=15,
        weight_max=22,
        heart_rate_min=80,
        heart_rate_max=120,
        respiratory_rate_min=20,
        respiratory_rate_max=30,
        systolic_bp_min=95,
        systolic_bp_max=125,
        diastolic_bp_min=60,
        diastolic_bp_max=80,
        oxygen_saturation_min=95,
        temperature_min=36.5,
        temperature_max=37.5,
    ),
    AgeGroupRange(
        label="School age",
        age_min=6,
        age_max=12,
        weight_min=22,
        weight_max=40,
        heart_rate_min=70,
        heart_rate_max=110,
        respiratory_rate_min=18,
        respiratory_rate_max=25,
        systolic_bp_min=105,
        systolic_bp_max=135,
        diastolic_bp_min=70,
        diastolic_bp_max=85,
        oxygen_saturation_min=95,
        temperature_min=36.5,
        temperature_max=37.5,
    ),
    AgeGroupRange(
        label="Adolescent",
        age_min=12,
        age_max=18,
        weight_min=40,
        weight_max=70,
        heart_rate_min=60,
        heart_rate_max=100,
        respiratory_rate_min=12,
        respiratory_rate_max=20,
        systolic_bp_min=110,
        systolic_bp_max=140,
        diastolic_bp_min=70,
        diastolic_bp_max=90,
        oxygen_saturation_min=95,
        temperature_min=36.5,
        temperature_max=37.5,
    ),
]


def _limits(group: AgeGroupRange) -> dict[str, tuple[float | None, float | None]]:
    return {
        "heart_rate": (group.heart_rate_min, group.heart_rate_max),
        "respiratory_rate": (group.respiratory_rate_min, group.respiratory_rate_max),
        "systolic_bp": (group.systolic_bp_min, group.systolic_bp_max),
        "diastolic_bp": (group.diastolic_bp_min, group.diastolic_bp_max),
        "oxygen_saturation": (group.oxygen_saturation_min, None),
        "temperature": (group.temperature_min, group.temperature_max),
    }


class ReferenceRangeService:
    """Service for age-appropriate vital-sign ranges.

    Usage:
        service = get_reference_range_service()
        group = service.get_range_for_age(4)
        flags = service.flag_out_of_range({"heart_rate": 140}, age=4)
    """

    def __init__(self) -> None:
        """Initialize the reference range service."""
        self._ranges = PEDIATRIC_REFERENCE_RANGES

    def get_all_ranges(self) -> list[AgeGroupRange]:
        """Get every age group, youngest first."""
        return list(self._ranges)

    def get_range_for_age(self, age: float | None) -> AgeGroupRange | None:
        """Find the age group for an age in years.

        Boundary ages belong to the younger group (age 1 is an infant).

        Args:
            age: Age in years; DEFAULT_AGE_YEARS when None.

        Returns:
            The matching AgeGroupRange, or None outside 0-18 years.
        """
        if age is None:
            age = DEFAULT_AGE_YEARS

        for group in self._ranges:
            if group.contains(age):
                return group
        return None

    def flag_out_of_range(self, reading: Any, age: float | None = None) -> list[RangeFlag]:
        """List reading values outside the age-appropriate range.

        Args:
            reading: Mapping (snake_case or camelCase keys) or object with
                vital-sign fields. Missing or non-numeric values are skipped.
            age: Age in years; DEFAULT_AGE_YEARS when None.

        Returns:
            RangeFlag for each present value outside its range.
        """
        group = self.get_range_for_age(age)
        if group is None:
            logger.info(f"No pediatric reference range for age {age}")
            return []

        flags: list[RangeFlag] = []
        for name, (low, high) in _limits(group).items():
            value = to_number(read_vital(reading, name), name)
            if value is None:
                continue

            if low is not None and value < low:
                flags.append(RangeFlag(name, value, low, high, "low"))
            elif high is not None and value > high:
                flags.append(RangeFlag(name, value, low, high, "high"))

        return flags

    def get_stats(self) -> dict[str, Any]:
        """Get statistics about the reference table."""
        return {
            "age_groups": len(self._ranges),
            "age_span": [self._ranges[0].age_min, self._ranges[-1].age_max],
        }


# Singleton instance and lock
_reference_range_service: ReferenceRangeService | None = None
_reference_range_lock = Lock()


def get_reference_range_service() -> ReferenceRangeService:
    """Get the singleton ReferenceRangeService instance.

    Returns:
        The singleton ReferenceRangeService instance.
    """
    global _reference_range_service

    if _reference_range_service is None:
        with _reference_range_lock:
            if _reference_range_service is None:
                logger.info("Creating singleton ReferenceRangeService instance")
                _reference_range_service = ReferenceRangeService()

    return _reference_range_service


def reset_reference_range_service() -> None:
    """Reset the singleton instance (for testing)."""
    global _reference_range_service
    with _reference_range_lock:
        _reference_range_service = None
