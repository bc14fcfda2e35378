"""Tests for heart-rate zones, resting HR classification and VO2 max."""
import pytest

from core.exceptions import InputRangeError
from schemas.profile_schema import ActivityLevel, Confidence, Sex
from services.heart_rate import HeartRateZoneCalculator, max_heart_rate
from services.vo2max_estimator import VO2MaxEstimator, classify_vo2max, fitness_age


calculator = HeartRateZoneCalculator()


def test_female_uses_gulati_and_default_resting_hr():
    """Test that females get Gulati max HR and the default resting HR."""
    result = calculator.zones(35, Sex.FEMALE)
    zones = result.value
    assert zones.max_hr == 175
    assert zones.max_hr_method == "gulati"
    assert zones.resting_hr == 75
    assert zones.resting_hr_measured is False
    assert zones.heart_rate_reserve == 100
    assert (zones.zones[0].low_bpm, zones.zones[0].high_bpm) == (125, 135)
    assert result.confidence == Confidence.LOW
    assert result.formula_or_method == "karvonen_gulati"


def test_measured_max_hr_wins():
    """Test that a measured max HR is used over formulas."""
    result = calculator.zones(40, Sex.MALE, resting_hr=60, measured_max_hr=185)
    zones = result.value
    assert zones.max_hr_method == "measured"
    assert zones.heart_rate_reserve == 125
    assert zones.zone("Threshold").low_bpm == 160
    assert result.confidence == Confidence.HIGH


def test_measured_resting_hr_only_is_medium_confidence():
    """Test that a measured resting HR alone gives medium confidence."""
    result = calculator.zones(30, Sex.MALE, resting_hr=60)
    assert result.value.max_hr == 187
    assert result.value.max_hr_method == "tanaka"
    assert result.confidence == Confidence.MEDIUM


def test_zones_are_contiguous_and_ordered():
    """Test that zones are contiguous and ordered."""
    zones = calculator.zones(50, Sex.OTHER, resting_hr=65).value.zones
    assert [z.name for z in zones] == ["Recovery", "Aerobic", "Tempo", "Threshold", "VO2 Max"]
    for lower, upper in zip(zones, zones[1:]):
        assert lower.high_bpm == upper.low_bpm
    assert zones[-1].high_bpm == max_heart_rate(50, Sex.OTHER)[0]


def test_max_hr_must_exceed_resting_hr():
    """Test that max HR must exceed resting HR."""
    with pytest.raises(InputRangeError):
        calculator.zones(30, Sex.MALE, resting_hr=110, measured_max_hr=105)
    with pytest.raises(InputRangeError):
        calculator.zones(30, Sex.MALE, resting_hr=20)


def test_resting_hr_must_stay_below_estimated_max():
    """Test that a resting HR above the Gulati estimate is rejected instead of inverting the zones."""
    with pytest.raises(InputRangeError) as exc_info:
        calculator.zones(120, Sex.FEMALE, resting_hr=110)
    assert exc_info.value.details["field"] == "resting_hr"
    assert exc_info.value.details["maximum"] == 99
    with pytest.raises(InputRangeError):
        calculator.target_heart_rate(120, Sex.FEMALE, 70, resting_hr=110)

    zones = calculator.zones(120, Sex.FEMALE, resting_hr=90).value
    assert zones.heart_rate_reserve == 10
    assert all(z.low_bpm <= z.high_bpm for z in zones.zones)


def test_target_heart_rate():
    """Test the Karvonen target heart rate."""
    target = calculator.target_heart_rate(30, Sex.MALE, 75, resting_hr=60)
    assert target.target_bpm == 155
    assert target.range_low < target.target_bpm < target.range_high
    assert target.zone == "Tempo"


def test_classify_resting_hr():
    """Test resting HR classification."""
    assert calculator.classify_resting_hr(52, Sex.MALE).category == "Excellent"
    assert calculator.classify_resting_hr(72, Sex.MALE).category == "Below Average"
    assert calculator.classify_resting_hr(90, Sex.FEMALE).category == "Poor"


def test_vo2max_estimate():
    """Test the VO2 max estimate from resting HR."""
    result = VO2MaxEstimator().estimate(30, Sex.MALE, ActivityLevel.MODERATE, 60)
    assert result.value.vo2max == pytest.approx(59.1)
    assert result.value.classification == "Excellent"
    assert result.confidence == Confidence.LOW

    sedentary = VO2MaxEstimator().estimate(50, Sex.FEMALE, ActivityLevel.SEDENTARY, 80)
    assert sedentary.value.vo2max == pytest.approx(31.6)
    assert sedentary.value.classification == "Average"
    assert sedentary.value.fitness_age == 60
    assert "Fitness age 60" in sedentary.reasoning


def test_vo2max_classification_bands():
    """Test the ACSM VO2 max bands."""
    assert classify_vo2max(20, 25, Sex.FEMALE) == ("Below Average", 15)
    assert classify_vo2max(45, 65, Sex.OTHER) == ("Excellent", 95)


def test_fitness_age_follows_median_curve():
    """Test that fitness age interpolates the age-bracket medians and clamps at the ends."""
    assert fitness_age(43, Sex.MALE) == 35
    assert fitness_age(40, Sex.MALE) == 45
    assert fitness_age(36, Sex.FEMALE) == 45
    assert fitness_age(59.1, Sex.MALE) == 20
    assert fitness_age(20, Sex.MALE) == 80
    assert fitness_age(40, Sex.OTHER) == fitness_age(40, Sex.MALE)


def test_fitness_age_rises_as_vo2max_falls():
    """Test that a lower VO2 max never gives a younger fitness age."""
    for sex in Sex:
        ages = [fitness_age(v, sex) for v in range(20, 65)]
        assert ages == sorted(ages, reverse=True)
