"""Tests for vital-sign trend analysis."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.schemas.base import DeteriorationPattern
from app.services.vital_trends import analyze_trends, classify_deterioration


def _reading(risk_score: int = 0, **vitals) -> SimpleNamespace:
    fields = {
        "heart_rate": None,
        "respiratory_rate": None,
        "oxygen_saturation": None,
        "temperature": None,
    }
    fields.update(vitals)
    return SimpleNamespace(risk_score=risk_score, **fields)


class TestClassifyDeterioration:
    """Tests for classify_deterioration."""

    def test_first_reading_is_stable(self) -> None:
        """Test no previous score means stable."""
        assert classify_deterioration(None, 90) == DeteriorationPattern.STABLE

    def test_rise_above_threshold_is_deteriorating(self) -> None:
        """Test a rise of more than 10 points."""
        assert classify_deterioration(20, 60) == DeteriorationPattern.DETERIORATING
        assert classify_deterioration(20, 31) == DeteriorationPattern.DETERIORATING

    def test_fall_above_threshold_is_improving(self) -> None:
        """Test a fall of more than 10 points."""
        assert classify_deterioration(60, 20) == DeteriorationPattern.IMPROVING
        assert classify_deterioration(31, 20) == DeteriorationPattern.IMPROVING

    @pytest.mark.parametrize("previous, current", [(20, 30), (30, 20), (40, 40)])
    def test_change_within_threshold_is_stable(self, previous: int, current: int) -> None:
        """Test changes of 10 points or less are stable."""
        assert classify_deterioration(previous, current) == DeteriorationPattern.STABLE

    def test_custom_threshold(self) -> None:
        """Test an explicit threshold overrides settings."""
        assert classify_deterioration(20, 26, threshold=5) == DeteriorationPattern.DETERIORATING
        assert classify_deterioration(20, 26, threshold=10) == DeteriorationPattern.STABLE


class TestAnalyzeTrends:
    """Tests for analyze_trends."""

    def test_no_readings_returns_none(self) -> None:
        """Test an empty window has no trends."""
        assert analyze_trends([], hours=24) is None

    @pytest.mark.parametrize("hours", [0, -5])
    def test_non_positive_window_raises(self, hours: int) -> None:
        """Test the window must be positive."""
        with pytest.raises(ValueError, match="positive"):
            analyze_trends([_reading()], hours=hours)

    def test_deltas_between_first_and_last(self) -> None:
        """Test deltas use only the first and last readings."""
        readings = [
            _reading(10, heart_rate=100, respiratory_rate=20, oxygen_saturation=97, temperature=Decimal("37.0")),
            _reading(90, heart_rate=200, respiratory_rate=60, oxygen_saturation=70, temperature=Decimal("41.0")),
            _reading(40, heart_rate=130, respiratory_rate=28, oxygen_saturation=93, temperature=Decimal("38.5")),
        ]

        trends = analyze_trends(readings, hours=24)

        assert trends is not None
        assert trends.deltas["heart_rate"] == 30
        assert trends.deltas["respiratory_rate"] == 8
        assert trends.deltas["oxygen_saturation"] == -4
        assert trends.deltas["temperature"] == pytest.approx(1.5)
        assert trends.risk_score_delta == 30
        assert trends.deterioration_pattern == DeteriorationPattern.DETERIORATING
        assert trends.reading_count == 3
        assert trends.timespan == "24 hours"
        assert trends.readings == readings

    def test_missing_values_give_zero_delta(self) -> None:
        """Test a parameter missing at either end has delta 0."""
        readings = [
            _reading(0, heart_rate=100),
            _reading(0, heart_rate=None, temperature=38.0),
        ]

        trends = analyze_trends(readings, hours=6)

        assert trends.deltas == {
            "heart_rate": 0,
            "respiratory_rate": 0,
            "oxygen_saturation": 0,
            "temperature": 0,
        }

    def test_single_reading_is_stable(self) -> None:
        """Test one reading compares against itself."""
        trends = analyze_trends([_reading(75, heart_rate=150)], hours=1)

        assert trends.risk_score_delta == 0
        assert trends.deterioration_pattern == DeteriorationPattern.STABLE
        assert trends.timespan == "1 hours"

    def test_falling_score_is_improving(self) -> None:
        """Test a score drop of more than 10 points."""
        trends = analyze_trends([_reading(60), _reading(15)], hours=48)

        assert trends.risk_score_delta == -45
        assert trends.deterioration_pattern == DeteriorationPattern.IMPROVING
