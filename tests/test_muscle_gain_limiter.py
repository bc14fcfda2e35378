"""Tests for natural muscle-gain limits and goal tiers."""
import pytest

from core.exceptions import InputRangeError
from schemas.profile_schema import Severity, Sex, TrainingLevel
from services.muscle_gain_limiter import MuscleGainLimiter, age_multiplier, suggested_timeline_weeks
from services.training_age import TrainingAgeEstimator


limiter = MuscleGainLimiter()


def test_female_limit_never_exceeds_male():
    """Test that the female gain limit never exceeds the male one."""
    for level in TrainingLevel:
        for age in range(13, 121, 3):
            male = limiter.max_monthly_gain_kg(level, age, Sex.MALE).monthly_kg
            female = limiter.max_monthly_gain_kg(level, age, Sex.FEMALE).monthly_kg
            other = limiter.max_monthly_gain_kg(level, age, Sex.OTHER).monthly_kg
            assert female <= male
            assert female <= other <= male


def test_rates_by_level_and_age():
    """Test monthly gain rates by training level and age."""
    assert limiter.max_monthly_gain_kg(TrainingLevel.INTERMEDIATE, 28, Sex.MALE).monthly_kg == 0.5
    assert limiter.max_monthly_gain_kg(TrainingLevel.INTERMEDIATE, 45, Sex.MALE).monthly_kg == pytest.approx(0.45)
    assert limiter.max_monthly_gain_kg(TrainingLevel.NOVICE, 17, Sex.FEMALE).monthly_kg == pytest.approx(0.575)
    assert limiter.max_monthly_gain_kg(TrainingLevel.INTERMEDIATE, 30, Sex.OTHER).monthly_kg == pytest.approx(0.375)
    beginner = limiter.max_monthly_gain_kg(TrainingLevel.BEGINNER, 30, Sex.MALE)
    novice = limiter.max_monthly_gain_kg(TrainingLevel.NOVICE, 30, Sex.MALE)
    assert beginner.monthly_kg == novice.monthly_kg


def test_accepts_corroborated_training_age():
    """Test that a TrainingAge result is accepted in place of a level."""
    training_age = TrainingAgeEstimator().estimate(6)
    limits = limiter.max_monthly_gain_kg(training_age, 30, Sex.MALE)
    assert limits.level == TrainingLevel.ELITE
    assert limits.yearly_kg == pytest.approx(1.2)


@pytest.mark.parametrize(
    "target,expected,weeks",
    [
        (2.0, Severity.SUCCESS, None),
        (4.0, Severity.INFO, None),
        (5.0, Severity.WARNING, 44),
        (7.0, Severity.ERROR, 61),
    ],
)
def test_goal_tiers(target, expected, weeks):
    """Test the severity tier of each muscle-gain goal."""
    limits = limiter.max_monthly_gain_kg(TrainingLevel.INTERMEDIATE, 28, Sex.MALE)
    result = limiter.validate_goal(target, 6, limits)
    assert result.severity == expected
    assert result.valid is True
    assert result.suggested_timeline_weeks == weeks
    assert result.suggested_amount == 3.0


def test_suggested_timeline_rounds_months_then_weeks():
    """Test that the suggested timeline rounds months then weeks."""
    assert suggested_timeline_weeks(7, 0.5) == 61
    assert suggested_timeline_weeks(1, 0.3) == 18
    assert age_multiplier(19) == 1.15
    assert age_multiplier(65) == 0.7


def test_invalid_goal_inputs_raise():
    """Test that invalid muscle-gain inputs raise InputRangeError."""
    limits = limiter.max_monthly_gain_kg(TrainingLevel.NOVICE, 30, Sex.MALE)
    with pytest.raises(InputRangeError):
        limiter.validate_goal(3, 0, limits)
    with pytest.raises(InputRangeError):
        limiter.validate_goal(-1, 6, limits)
    with pytest.raises(InputRangeError):
        limiter.max_monthly_gain_kg(TrainingLevel.NOVICE, 8, Sex.MALE)
