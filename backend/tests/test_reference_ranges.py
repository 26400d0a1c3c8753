"""Tests for pediatric vital-sign reference ranges."""

from types import MappingProxyType, SimpleNamespace

import pytest

from app.services.reference_ranges import (
    DEFAULT_AGE_YEARS,
    PEDIATRIC_REFERENCE_RANGES,
    ReferenceRangeService,
    get_reference_range_service,
    reset_reference_range_service,
)


@pytest.fixture
def service() -> ReferenceRangeService:
    return ReferenceRangeService()


class TestReferenceTable:
    """Tests for the reference range table itself."""

    def test_five_age_groups(self) -> None:
        """Test the table covers infant through adolescent."""
        labels = [g.label for g in PEDIATRIC_REFERENCE_RANGES]
        assert labels == ["Infant", "Toddler", "Preschool", "School age", "Adolescent"]

    def test_groups_are_contiguous(self) -> None:
        """Test each group starts where the previous one ends."""
        for younger, older in zip(PEDIATRIC_REFERENCE_RANGES, PEDIATRIC_REFERENCE_RANGES[1:]):
            assert younger.age_max == older.age_min

    def test_ranges_are_ordered(self) -> None:
        """Test every min is below its max."""
        for group in PEDIATRIC_REFERENCE_RANGES:
            assert group.heart_rate_min < group.heart_rate_max
            assert group.respiratory_rate_min < group.respiratory_rate_max
            assert group.systolic_bp_min < group.systolic_bp_max
            assert group.diastolic_bp_min < group.diastolic_bp_max
            assert group.temperature_min < group.temperature_max


class TestRangeLookup:
    """Tests for get_range_for_age."""

    @pytest.mark.parametrize(
        "age, label",
        [
            (0, "Infant"),
            (0.5, "Infant"),
            (2, "Toddler"),
            (4, "Preschool"),
            (9, "School age"),
            (15, "Adolescent"),
            (18, "Adolescent"),
        ],
    )
    def test_age_maps_to_group(self, service: ReferenceRangeService, age: float, label: str) -> None:
        """Test ages inside each group."""
        assert service.get_range_for_age(age).label == label

    @pytest.mark.parametrize("age, label", [(1, "Infant"), (3, "Toddler"), (6, "Preschool"), (12, "School age")])
    def test_boundary_age_belongs_to_younger_group(
        self, service: ReferenceRangeService, age: int, label: str
    ) -> None:
        """Test shared boundary ages resolve to the first matching group."""
        assert service.get_range_for_age(age).label == label

    def test_missing_age_uses_default(self, service: ReferenceRangeService) -> None:
        """Test None falls back to the default age."""
        assert DEFAULT_AGE_YEARS == 5
        assert service.get_range_for_age(None).label == "Preschool"

    @pytest.mark.parametrize("age", [-1, 18.5, 25])
    def test_outside_pediatric_span(self, service: ReferenceRangeService, age: float) -> None:
        """Test ages outside 0-18 have no group."""
        assert service.get_range_for_age(age) is None


class TestFlagOutOfRange:
    """Tests for flag_out_of_range."""

    def test_normal_reading_has_no_flags(self, service: ReferenceRangeService) -> None:
        """Test an age-appropriate reading."""
        reading = {"heart_rate": 100, "respiratory_rate": 24, "oxygen_saturation": 98, "temperature": 37.0}
        assert service.flag_out_of_range(reading, age=4) == []

    def test_flags_high_and_low(self, service: ReferenceRangeService) -> None:
        """Test values above and below the range are flagged."""
        flags = service.flag_out_of_range({"heart_rate": 150, "oxygen_saturation": 88}, age=4)

        assert [(f.parameter, f.direction) for f in flags] == [
            ("heart_rate", "high"),
            ("oxygen_saturation", "low"),
        ]
        assert flags[0].low == 80
        assert flags[0].high == 120
        assert flags[1].high is None

    def test_same_value_depends_on_age(self, service: ReferenceRangeService) -> None:
        """Test a heart rate normal for an infant is high for an adolescent."""
        assert service.flag_out_of_range({"heart_rate": 140}, age=0.5) == []
        flags = service.flag_out_of_range({"heart_rate": 140}, age=15)
        assert flags[0].direction == "high"

    def test_diastolic_is_checked(self, service: ReferenceRangeService) -> None:
        """Test diastolic pressure is flagged against its range."""
        flags = service.flag_out_of_range({"diastolic_bp": 40}, age=10)
        assert flags[0].parameter == "diastolic_bp"
        assert flags[0].direction == "low"

    def test_accepts_objects(self, service: ReferenceRangeService) -> None:
        """Test readings with attributes are supported."""
        reading = SimpleNamespace(heart_rate=None, temperature=38.2)
        flags = service.flag_out_of_range(reading, age=8)
        assert [(f.parameter, f.value) for f in flags] == [("temperature", 38.2)]

    def test_unknown_age_has_no_flags(self, service: ReferenceRangeService) -> None:
        """Test adults get no pediatric flags."""
        assert service.flag_out_of_range({"heart_rate": 200}, age=30) == []


class TestReferenceRangeServiceSingleton:
    """Tests for the singleton accessor."""

    def test_singleton_pattern(self) -> None:
        """Test singleton pattern works."""
        assert get_reference_range_service() is get_reference_range_service()

    def test_singleton_reset(self) -> None:
        """Test singleton can be reset."""
        service1 = get_reference_range_service()
        reset_reference_range_service()
        assert service1 is not get_reference_range_service()

    def test_stats(self) -> None:
        """Test stats describe the table."""
        stats = get_reference_range_service().get_stats()
        assert stats == {"age_groups": 5, "age_span": [0, 18]}


class TestFlagInputShapes:
    """Flagging reads readings the same way the risk scorer does."""

    def test_camel_case_keys(self, service: ReferenceRangeService) -> None:
        """Test form-style camelCase keys are flagged."""
        flags = service.flag_out_of_range({"heartRate": 150, "diastolicBP": 40}, age=4)
        assert [(f.parameter, f.direction) for f in flags] == [
            ("heart_rate", "high"),
            ("diastolic_bp", "low"),
        ]

    def test_non_dict_mapping(self, service: ReferenceRangeService) -> None:
        """Test any Mapping is accepted, not only dict."""
        reading = MappingProxyType({"oxygen_saturation": 90})
        flags = service.flag_out_of_range(reading, age=4)
        assert flags[0].parameter == "oxygen_saturation"

    def test_string_decimal_value(self, service: ReferenceRangeService) -> None:
        """Test string-encoded temperatures are parsed."""
        flags = service.flag_out_of_range({"temperature": "38.2"}, age=4)
        assert flags[0].value == 38.2

    def test_unparseable_value_is_skipped(self, service: ReferenceRangeService) -> None:
        """Test a bad value is skipped instead of raising."""
        flags = service.flag_out_of_range({"temperature": "warm", "heart_rate": 150}, age=4)
        assert [f.parameter for f in flags] == ["heart_rate"]
