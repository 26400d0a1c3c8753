"""Tests for the database-backed vitals recorder."""

from decimal import ROUND_HALF_UP, Decimal
from unittest.mock import MagicMock, patch

import pytest

from app.models.vitals import RiskAssessment, VitalSignReading
from app.schemas.base import DeteriorationPattern, Severity
from app.schemas.vitals import VitalSigns
from app.services.risk_scorer import BAND_TABLE_VERSION, compute_risk_score
from app.services.vitals_recorder import VitalsRecorderService

PATIENT_ID = "11111111-1111-1111-1111-111111111111"


def _added(session: MagicMock, model: type) -> list:
    return [c.args[0] for c in session.add.call_args_list if isinstance(c.args[0], model)]


class TestGetPreviousScore:
    """Tests for the previous-score lookup."""

    @pytest.mark.asyncio
    async def test_returns_latest_score(self, mock_db_session: MagicMock, make_result) -> None:
        """Test the stored score of the newest reading is returned."""
        mock_db_session.execute.return_value = make_result(scalar=35)

        recorder = VitalsRecorderService(mock_db_session)

        assert await recorder.get_previous_score(PATIENT_ID) == 35
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_readings_returns_none(self, mock_db_session: MagicMock, make_result) -> None:
        """Test a patient without readings has no previous score."""
        mock_db_session.execute.return_value = make_result(scalar=None)

        recorder = VitalsRecorderService(mock_db_session)

        assert await recorder.get_previous_score(PATIENT_ID) is None


class TestRecord:
    """Tests for recording a reading."""

    @pytest.mark.asyncio
    async def test_stores_reading_and_assessment(self, mock_db_session: MagicMock, make_result) -> None:
        """Test one reading and one assessment are appended."""
        mock_db_session.execute.return_value = make_result(scalar=None)
        vitals = VitalSigns(heart_rate=150, oxygen_saturation=88, temperature=37.2)

        recorder = VitalsRecorderService(mock_db_session)
        recorded = await recorder.record(PATIENT_ID, vitals, recorded_by="prov-1", age_years=4)

        readings = _added(mock_db_session, VitalSignReading)
        assessments = _added(mock_db_session, RiskAssessment)
        assert len(readings) == 1
        assert len(assessments) == 1

        reading = readings[0]
        assert reading is recorded.reading
        assert reading.patient_id == PATIENT_ID
        assert reading.recorded_by == "prov-1"
        assert reading.temperature == Decimal("37.2")
        assert reading.risk_score == 60
        assert reading.severity == Severity.HIGH
        assert reading.recorded_at is not None

        assessment = assessments[0]
        assert assessment.reading_id == reading.id
        assert assessment.risk_score == 60
        assert assessment.band_version == BAND_TABLE_VERSION
        assert assessment.risk_factors == ["HR 150 bpm (critical)", "O₂ Sat 88% (abnormal)"]
        assert assessment.recommendations[0] == "Monitor patient closely - HIGH risk"
        assert assessment.deterioration_pattern == DeteriorationPattern.STABLE
        assert assessment.calculated_at == reading.recorded_at

        assert mock_db_session.flush.await_count == 2

    @pytest.mark.asyncio
    async def test_deteriorating_against_previous(self, mock_db_session: MagicMock, make_result) -> None:
        """Test a score rise of more than 10 over the previous reading."""
        mock_db_session.execute.return_value = make_result(scalar=20)

        recorder = VitalsRecorderService(mock_db_session)
        recorded = await recorder.record(PATIENT_ID, VitalSigns(heart_rate=150, oxygen_saturation=88))

        assert recorded.deterioration_pattern == DeteriorationPattern.DETERIORATING

    @pytest.mark.asyncio
    async def test_improving_against_previous(self, mock_db_session: MagicMock, make_result) -> None:
        """Test a score fall of more than 10 over the previous reading."""
        mock_db_session.execute.return_value = make_result(scalar=75)

        recorder = VitalsRecorderService(mock_db_session)
        recorded = await recorder.record(PATIENT_ID, VitalSigns(heart_rate=80))

        assert recorded.assessment.risk_score == 0
        assert recorded.deterioration_pattern == DeteriorationPattern.IMPROVING

    @pytest.mark.asyncio
    async def test_first_reading_skips_lookup(self, mock_db_session: MagicMock) -> None:
        """Test a new patient's first reading does not query history."""
        recorder = VitalsRecorderService(mock_db_session)
        recorded = await recorder.record(PATIENT_ID, VitalSigns(respiratory_rate=40), is_first_reading=True)

        mock_db_session.execute.assert_not_awaited()
        assert recorded.deterioration_pattern == DeteriorationPattern.STABLE
        assert recorded.assessment.risk_score == 30

    @pytest.mark.asyncio
    async def test_missing_temperature_stored_as_null(self, mock_db_session: MagicMock) -> None:
        """Test absent vitals are stored as NULL."""
        recorder = VitalsRecorderService(mock_db_session)
        recorded = await recorder.record(PATIENT_ID, VitalSigns(heart_rate=90), is_first_reading=True)

        assert recorded.reading.temperature is None
        assert recorded.reading.systolic_bp is None

    @pytest.mark.asyncio
    async def test_writes_audit_event(self, mock_db_session: MagicMock) -> None:
        """Test each stored assessment is audited."""
        with patch("app.services.vitals_recorder.log_risk_assessment") as mock_audit:
            recorder = VitalsRecorderService(mock_db_session)
            recorded = await recorder.record(
                PATIENT_ID, VitalSigns(heart_rate=150), recorded_by="prov-9", is_first_reading=True
            )

        mock_audit.assert_called_once_with(
            patient_id=PATIENT_ID,
            reading_id=recorded.reading.id,
            risk_score=30,
            severity="MEDIUM",
            user_id="prov-9",
        )


class TestStoredTemperature:
    """A stored reading rescores to the score captured with it."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("temperature", [38.54, 35.96, 39.04, 38.55, 37.0])
    async def test_rescoring_stored_reading_matches_capture(
        self, mock_db_session: MagicMock, temperature: float
    ) -> None:
        """Test temperature is rounded to the column precision before scoring."""
        recorder = VitalsRecorderService(mock_db_session)
        recorded = await recorder.record(
            PATIENT_ID, VitalSigns(temperature=temperature), is_first_reading=True
        )

        # What numeric(4, 1) keeps for the raw input
        column_value = Decimal(str(temperature)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        assert recorded.reading.temperature == column_value
        assert compute_risk_score({"temperature": column_value}) == recorded.assessment.risk_score
        assert compute_risk_score(recorded.reading) == recorded.reading.risk_score
