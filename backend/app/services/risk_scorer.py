"""Vital-Sign Risk Scorer.

Scores a set of vital signs as a bounded 0-100 clinical deterioration
heuristic. Each parameter is checked against a table of penalty bands,
most severe band first; the first matching band contributes its penalty.
Penalties are summed across parameters and clamped at 100.

The band table is the single source of truth for every caller (patient
intake, vitals logging, patient listing and stateless scoring). Its
version is stored with each persisted assessment.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from app.schemas.base import Severity

logger = logging.getLogger(__name__)

BAND_TABLE_VERSION = "patients-v1"
MAX_RISK_SCORE = 100

# Severity thresholds (strictly greater than)
CRITICAL_THRESHOLD = 70
HIGH_THRESHOLD = 50


# ============================================================================
# Band Table
# ============================================================================


@dataclass(frozen=True)
class PenaltyBand:
    """A penalty applied when a value falls below or above the given limits."""

    penalty: int
    label: str
    below: float | None = None
    above: float | None = None

    def matches(self, value: float) -> bool:
        """Check whether a value falls into this band."""
        if self.below is not None and value < self.below:
            return True
        if self.above is not None and value > self.above:
            return True
        return False


@dataclass(frozen=True)
class VitalParameter:
    """A scored vital sign and its penalty bands, most severe first."""

    name: str
    display: str  # e.g. "HR {value} bpm"
    bands: tuple[PenaltyBand, ...]


RISK_BANDS: tuple[VitalParameter, ...] = (
    VitalParameter(
        name="heart_rate",
        display="HR {value} bpm",
        bands=(
            PenaltyBand(30, "critical", below=40, above=140),
            PenaltyBand(20, "abnormal", below=50, above=120),
            PenaltyBand(10, "borderline", below=60, above=100),
        ),
    ),
    VitalParameter(
        name="respiratory_rate",
        display="RR {value}/min",
        bands=(
            PenaltyBand(30, "critical", below=8, above=30),
            PenaltyBand(20, "abnormal", below=10, above=25),
            PenaltyBand(10, "borderline", below=12, above=20),
        ),
    ),
    VitalParameter(
        name="oxygen_saturation",
        display="O₂ Sat {value}%",
        bands=(
            PenaltyBand(40, "critical", below=85),
            PenaltyBand(30, "abnormal", below=90),
            PenaltyBand(15, "low", below=95),
        ),
    ),
    VitalParameter(
        name="temperature",
        display="Temp {value}°C",
        bands=(
            PenaltyBand(20, "critical", below=35, above=39),
            PenaltyBand(10, "abnormal", below=36, above=38.5),
        ),
    ),
    VitalParameter(
        name="systolic_bp",
        display="SBP {value} mmHg",
        bands=(
            PenaltyBand(25, "critical", below=80, above=180),
            PenaltyBand(15, "abnormal", below=90, above=160),
        ),
    ),
)

# camelCase names used by form submissions
VITAL_ALIASES: dict[str, str] = {
    "heart_rate": "heartRate",
    "respiratory_rate": "respiratoryRate",
    "oxygen_saturation": "oxygenSaturation",
    "temperature": "temperature",
    "systolic_bp": "systolicBP",
    "diastolic_bp": "diastolicBP",
}

RECOMMENDATIONS: dict[Severity, str] = {
    Severity.CRITICAL: "CRITICAL - Immediate intervention needed",
    Severity.HIGH: "HIGH - Monitor closely",
    Severity.MEDIUM: "MEDIUM - Routine monitoring",
}


# ============================================================================
# Input Types
# ============================================================================


@dataclass(frozen=True)
class VitalSigns:
    """A single set of vital-sign readings. Every field is optional."""

    heart_rate: int | None = None
    respiratory_rate: int | None = None
    oxygen_saturation: int | None = None
    temperature: float | str | None = None
    systolic_bp: int | None = None
    diastolic_bp: int | None = None


@dataclass
class RiskFactor:
    """A parameter that contributed a penalty."""

    parameter: str
    value: float
    penalty: int
    label: str
    description: str


@dataclass
class RiskAssessmentResult:
    """Full result of scoring a reading."""

    risk_score: int
    severity: Severity
    recommendation: str
    factors: list[RiskFactor] = field(default_factory=list)
    band_version: str = BAND_TABLE_VERSION

    @property
    def risk_factors(self) -> list[str]:
        """Human-readable factor descriptions."""
        return [f.description for f in self.factors]

    @property
    def recommendations(self) -> list[str]:
        """Recommendation lines stored with the assessment."""
        return [
            f"Monitor patient closely - {self.severity.value} risk",
            *(f"Alert: {f}" for f in self.risk_factors),
        ]


# ============================================================================
# Scoring
# ============================================================================


def read_vital(reading: Any, name: str) -> Any:
    """Read a vital sign by snake_case name from a mapping or an object.

    Mappings may also use the camelCase form of the name.
    """
    if reading is None:
        return None
    if isinstance(reading, Mapping):
        value = reading.get(name)
        if value is None and name in VITAL_ALIASES:
            value = reading.get(VITAL_ALIASES[name])
        return value
    return getattr(reading, name, None)


def to_number(value: Any, name: str) -> float | None:
    """Convert ints, floats, Decimals and decimal strings to float."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Skipping non-numeric {name} value: {value!r}")
        return None
    if not math.isfinite(number):
        logger.warning(f"Skipping non-finite {name} value: {value!r}")
        return None
    return number


def _format_value(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:g}"


def score_parameter(parameter: VitalParameter, value: float) -> PenaltyBand | None:
    """Return the first (most severe) band a value falls into, if any."""
    for band in parameter.bands:
        if band.matches(value):
            return band
    return None


def evaluate_factors(reading: Any) -> list[RiskFactor]:
    """Evaluate every scored parameter present in a reading.

    Args:
        reading: VitalSigns, any object with matching attributes, or a
            mapping keyed by snake_case or camelCase field names.

    Returns:
        One RiskFactor per parameter that fell into a penalty band.
    """
    factors: list[RiskFactor] = []

    for parameter in RISK_BANDS:
        value = to_number(read_vital(reading, parameter.name), parameter.name)
        if value is None:
            continue

        band = score_parameter(parameter, value)
        if band is None:
            continue

        display = parameter.display.format(value=_format_value(value))
        factors.append(
            RiskFactor(
                parameter=parameter.name,
                value=value,
                penalty=band.penalty,
                label=band.label,
                description=f"{display} ({band.label})",
            )
        )

    return factors


def compute_risk_score(reading: Any) -> int:
    """Compute the 0-100 risk score for a reading.

    Missing parameters are skipped. Never raises; an empty reading
    scores 0.
    """
    total = sum(f.penalty for f in evaluate_factors(reading))
    return min(MAX_RISK_SCORE, total)


def classify_severity(score: int) -> Severity:
    """Map a risk score to its severity band.

    Thresholds are strict: 70 is HIGH and 50 is MEDIUM.
    """
    if score > CRITICAL_THRESHOLD:
        return Severity.CRITICAL
    if score > HIGH_THRESHOLD:
        return Severity.HIGH
    return Severity.MEDIUM


def get_recommendation(severity: Severity) -> str:
    """Recommendation text shown to the provider for a severity band."""
    return RECOMMENDATIONS[severity]


def assess_risk(reading: Any) -> RiskAssessmentResult:
    """Score a reading and derive severity, recommendation and factors."""
    factors = evaluate_factors(reading)
    score = min(MAX_RISK_SCORE, sum(f.penalty for f in factors))
    severity = classify_severity(score)

    return RiskAssessmentResult(
        risk_score=score,
        severity=severity,
        recommendation=get_recommendation(severity),
        factors=factors,
    )


# ============================================================================
# Scorer Service
# ============================================================================


class RiskScorerService:
    """Service wrapper around the risk scoring functions.

    Usage:
        service = get_risk_scorer_service()
        result = service.assess({"heart_rate": 150, "oxygen_saturation": 88})
        result.risk_score  # 60
    """

    def __init__(self) -> None:
        """Initialize the scorer service."""
        self._assessments = 0
        self._lock = Lock()

    def score(self, reading: Any) -> int:
        """Compute only the numeric score for a reading."""
        return self.assess(reading).risk_score

    def assess(self, reading: Any) -> RiskAssessmentResult:
        """Run a full risk assessment for a reading."""
        result = assess_risk(reading)
        with self._lock:
            self._assessments += 1
        return result

    def get_band_table(self) -> list[dict[str, Any]]:
        """Describe the band table for clients.

        Returns:
            List of parameters with their bands, most severe first.
        """
        return [
            {
                "parameter": p.name,
                "bands": [
                    {
                        "penalty": b.penalty,
                        "label": b.label,
                        "below": b.below,
                        "above": b.above,
                    }
                    for b in p.bands
                ],
            }
            for p in RISK_BANDS
        ]

    def get_stats(self) -> dict[str, Any]:
        """Get statistics about the scorer."""
        return {
            "band_version": BAND_TABLE_VERSION,
            "parameters": [p.name for p in RISK_BANDS],
            "assessments": self._assessments,
        }


# Singleton instance and lock
_risk_scorer_service: RiskScorerService | None = None
_risk_scorer_lock = Lock()


def get_risk_scorer_service() -> RiskScorerService:
    """Get the singleton RiskScorerService instance.

    Returns:
        The singleton RiskScorerService instance.
    """
    global _risk_scorer_service

    if _risk_scorer_service is None:
        with _risk_scorer_lock:
            if _risk_scorer_service is None:
                logger.info("Creating singleton RiskScorerService instance")
                _risk_scorer_service = RiskScorerService()

    return _risk_scorer_service


def reset_risk_scorer_service() -> None:
    """Reset the singleton instance (for testing)."""
    global _risk_scorer_service
    with _risk_scorer_lock:
        _risk_scorer_service = None
