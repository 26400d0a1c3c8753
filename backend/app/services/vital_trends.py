"""Vital-sign trend analysis.

Compares the first and last readings in a time window to report how each
vital sign and the risk score have moved.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from app.core.config import settings
from app.schemas.base import DeteriorationPattern

logger = logging.getLogger(__name__)

TREND_PARAMETERS = ("heart_rate", "respiratory_rate", "oxygen_saturation", "temperature")


@dataclass
class VitalTrends:
    """Result of a trend analysis over a window of readings."""

    deltas: dict[str, float]
    risk_score_delta: int
    deterioration_pattern: DeteriorationPattern
    reading_count: int
    timespan: str
    readings: list[Any] = field(default_factory=list)


def classify_deterioration(
    previous_score: int | None,
    current_score: int,
    threshold: int | None = None,
) -> DeteriorationPattern:
    """Classify the change between two risk scores.

    Args:
        previous_score: Earlier score, or None for a first reading.
        current_score: Latest score.
        threshold: Change needed to leave "stable"; defaults to settings.

    Returns:
        DETERIORATING if the score rose by more than the threshold,
        IMPROVING if it fell by more than the threshold, else STABLE.
    """
    if previous_score is None:
        return DeteriorationPattern.STABLE

    limit = settings.deterioration_threshold if threshold is None else threshold
    delta = current_score - previous_score

    if delta > limit:
        return DeteriorationPattern.DETERIORATING
    if delta < -limit:
        return DeteriorationPattern.IMPROVING
    return DeteriorationPattern.STABLE


def _delta(first: Any, last: Any, name: str) -> float:
    start = getattr(first, name, None)
    end = getattr(last, name, None)
    # A zero reading is treated like a missing one
    if not start or not end:
        return 0
    return float(end) - float(start)


def analyze_trends(readings: Sequence[Any], hours: int) -> VitalTrends | None:
    """Analyze readings in chronological order.

    Args:
        readings: Readings ordered oldest first; each exposes the vital
            sign attributes and ``risk_score``.
        hours: Width of the window the readings were drawn from.

    Returns:
        VitalTrends, or None when there are no readings.

    Raises:
        ValueError: If hours is not positive.
    """
    if hours <= 0:
        raise ValueError(f"Trend window must be positive, got {hours} hours")

    if not readings:
        return None

    first = readings[0]
    last = readings[-1]

    deltas = {name: _delta(first, last, name) for name in TREND_PARAMETERS}
    risk_delta = (last.risk_score or 0) - (first.risk_score or 0)
    pattern = classify_deterioration(first.risk_score or 0, last.risk_score or 0)

    logger.debug(
        f"Trend over {len(readings)} readings: risk_delta={risk_delta} pattern={pattern.value}"
    )

    return VitalTrends(
        deltas=deltas,
        risk_score_delta=risk_delta,
        deterioration_pattern=pattern,
        reading_count=len(readings),
        timespan=f"{hours} hours",
        readings=list(readings),
    )
