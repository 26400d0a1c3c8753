"""Services for the Pediatric Vitals Risk Service.

Services implement the clinical logic:
- RiskScorerService: band-based vital-sign risk score (0-100)
- Vital trends: deterioration pattern over a time window
- ReferenceRangeService: age-appropriate normal ranges
- VitalsRecorderService: append readings and their risk assessments
"""

from app.services.reference_ranges import (
    AgeGroupRange,
    RangeFlag,
    ReferenceRangeService,
    get_reference_range_service,
)
from app.services.risk_scorer import (
    BAND_TABLE_VERSION,
    RiskAssessmentResult,
    RiskScorerService,
    VitalSigns,
    assess_risk,
    classify_severity,
    compute_risk_score,
    get_risk_scorer_service,
)
from app.services.vital_trends import VitalTrends, analyze_trends, classify_deterioration
from app.services.vitals_recorder import RecordedReading, VitalsRecorderService

__all__ = [
    # Risk scoring
    "BAND_TABLE_VERSION",
    "RiskAssessmentResult",
    "RiskScorerService",
    "VitalSigns",
    "assess_risk",
    "classify_severity",
    "compute_risk_score",
    "get_risk_scorer_service",
    # Trends
    "VitalTrends",
    "analyze_trends",
    "classify_deterioration",
    # Reference ranges
    "AgeGroupRange",
    "RangeFlag",
    "ReferenceRangeService",
    "get_reference_range_service",
    # Recorder
    "RecordedReading",
    "VitalsRecorderService",
]
