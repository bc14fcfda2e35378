"""Tests for population-aware BMI classification."""
import math

import pytest

from core.exceptions import InputRangeError
from schemas.profile_schema import PopulationType, Profile
from schemas.result_schema import BMICategory, HealthRisk
from services.bmi_classifier import BMIClassifier, calculate_bmi, category_for, cutoffs_for
from services.context_detector import ContextDetector


classifier = BMIClassifier()


class NoWeather:
    """Weather provider that must never be called."""

    def current(self, latitude, longitude):
        raise AssertionError("weather lookup not expected")


def _context(**profile_fields):
    base = {"sex": "male", "age": 30, "weight_kg": 70, "height_cm": 170}
    base.update(profile_fields)
    return ContextDetector(weather_provider=NoWeather(), lookup_enabled=False).detect(Profile(**base))


def test_indian_user_at_bmi_26_is_overweight():
    """Test that Asian cutoffs class BMI 26 as overweight."""
    context = _context(country_code="IN")
    assert context.population_type == PopulationType.SOUTH_ASIAN

    result = classifier.classify(75.14, 170, context)
    assert result.value == 26.0
    assert result.category == BMICategory.OVERWEIGHT
    assert result.cutoffs.obese == 27.5


def test_asian_cutoffs_differ_from_general():
    """Test that the same BMI lands in different categories per population."""
    south_asian = classifier.classify(69.4, 170, _context(country_code="IN"))
    general = classifier.classify(69.4, 170)
    assert south_asian.value == general.value == 24.0
    assert south_asian.category == BMICategory.OVERWEIGHT
    assert general.category == BMICategory.NORMAL


def test_category_never_decreases_with_weight():
    """Test that the BMI category is monotonic in weight."""
    for population in PopulationType:
        cutoffs = cutoffs_for(population)
        previous = -1
        for weight in range(30, 201):
            bmi = calculate_bmi(weight, 170)
            rank = category_for(round(bmi, 1), cutoffs).rank
            assert rank >= previous
            previous = rank


def test_classify_is_monotonic_for_every_population_override():
    """Test monotonic categories under every population override."""
    for population in PopulationType:
        context = _context(overrides={"population_type": population.value})
        previous = -1
        for weight in range(35, 200, 5):
            rank = classifier.classify(weight, 175, context).category.rank
            assert rank >= previous
            previous = rank


def test_low_waist_to_height_overrides_overweight():
    """Test that a low waist-to-height ratio downgrades an overweight BMI."""
    result = classifier.classify(84.3, 180, waist_cm=80)
    assert result.value == 26.0
    assert result.category == BMICategory.NORMAL
    assert result.athlete_override is True
    assert result.health_risk == HealthRisk.LOW
    assert result.waist_to_height == 0.44


def test_high_waist_to_height_is_very_high_risk():
    """Test that a high waist-to-height ratio is flagged as very high risk."""
    result = classifier.classify(95, 170, waist_cm=110, hip_cm=100)
    assert result.health_risk == HealthRisk.VERY_HIGH
    assert result.waist_to_hip == 1.1
    assert any("waist" in rec.lower() for rec in result.recommendations)


def test_result_carries_message_and_recommendations():
    """Test that a BMI result carries a message and recommendations."""
    result = classifier.classify(50, 180)
    assert result.category == BMICategory.UNDERWEIGHT
    assert result.message
    assert len(result.recommendations) > 0


@pytest.mark.parametrize("weight,height", [(0, 170), (-5, 170), (600, 170), (70, 0), (70, 400), (math.nan, 170), (70, math.inf)])
def test_out_of_range_inputs_raise(weight, height):
    """Test that out-of-range weight or height raises InputRangeError."""
    with pytest.raises(InputRangeError) as exc_info:
        classifier.classify(weight, height)
    assert exc_info.value.status_code == 422
