"""Tests for tiered fat-loss validation and deficit planning."""
import pytest

from core.exceptions import InputRangeError
from schemas.profile_schema import ActivityLevel, Goal, Severity, Sex
from services.fat_loss_validator import FatLossValidator, daily_deficit_for_rate, deficit_ceiling


validator = FatLossValidator()


def test_three_kg_per_week_at_bmi_28_is_error_but_valid():
    """Test that 3 kg/week at BMI 28 is an error yet still valid."""
    result = validator.validate_rate(90, 78, 4, bmr=1850, bmi=28, sex=Sex.MALE)
    assert result.weekly_rate == 3.0
    assert result.severity == Severity.ERROR
    assert result.valid is True
    # 12 kg at the safer 1 kg/week
    assert result.suggested_timeline_weeks == 12
    assert result.suggested_amount == 4.0
    assert "12 weeks" in result.message


def test_extreme_rate_at_high_bmi_is_only_a_warning():
    """Test that a high BMI softens an extreme rate to a warning."""
    result = validator.validate_rate(150, 138, 4, bmr=2200, bmi=42, sex=Sex.FEMALE)
    assert result.severity == Severity.WARNING
    assert result.max_deficit == 1500
    assert any("Medical" in rec for rec in result.recommendations)


@pytest.mark.parametrize(
    "target,weeks,expected",
    [
        (99.0, 10, Severity.INFO),     # 0.1 kg/week
        (96.0, 10, Severity.INFO),     # 0.4
        (92.5, 10, Severity.SUCCESS),  # 0.75
        (88.0, 10, Severity.INFO),     # 1.2
        (82.0, 10, Severity.WARNING),  # 1.8
        (105.0, 10, Severity.INFO),    # gaining
    ],
)
def test_rate_tiers(target, weeks, expected):
    """Test the severity tier for each weekly loss rate."""
    result = validator.validate_rate(100, target, weeks, bmr=1900, bmi=29, sex=Sex.MALE)
    assert result.severity == expected
    assert result.valid is True


def test_valid_for_every_rate_up_to_ten_kg_per_week():
    """Test that any rate up to 10 kg/week stays valid."""
    for step in range(0, 41):
        rate = step * 0.25
        for bmi in (22, 28, 33, 40):
            result = validator.validate_rate(200, 200 - rate * 10, 10, bmr=2000, bmi=bmi, sex=Sex.MALE)
            assert result.valid is True
            assert result.weekly_rate == pytest.approx(rate)


def test_recommended_calories_never_below_bmr():
    """Test that recommended calories never drop below BMR."""
    result = validator.validate_rate(90, 80, 10, bmr=1800, bmi=27, sex=Sex.MALE, tdee=2000)
    assert result.daily_deficit == 1100
    assert result.recommended_calories == 1800
    assert result.min_calories == 1800


def test_age_ceiling_escalates_to_warning():
    """Test that the age ceiling escalates severity to a warning."""
    result = validator.validate_rate(80, 77, 4, bmr=1400, bmi=26, sex=Sex.FEMALE, max_weekly_loss_kg=0.25)
    assert result.severity == Severity.WARNING
    assert result.suggested_timeline_weeks == 12
    assert result.max_weekly_loss_kg == 0.25


def test_medical_deficit_cap_lowers_ceiling():
    """Test that a medical deficit cap lowers the deficit ceiling."""
    result = validator.validate_rate(90, 80, 10, bmr=1700, bmi=32, sex=Sex.FEMALE, tdee=2600, deficit_cap=750)
    assert result.max_deficit == 750
    assert result.recommended_calories == 1850


def test_invalid_inputs_raise():
    """Test that invalid fat-loss inputs raise InputRangeError."""
    with pytest.raises(InputRangeError):
        validator.validate_rate(90, 80, 0, bmr=1800, bmi=27, sex=Sex.MALE)
    with pytest.raises(InputRangeError):
        validator.validate_rate(90, -1, 10, bmr=1800, bmi=27, sex=Sex.MALE)
    with pytest.raises(InputRangeError):
        validator.validate_rate(90, 80, 10, bmr=1800, bmi=27, sex=Sex.MALE, tdee=0)


def test_deficit_helpers():
    """Test the deficit ceiling and weekly-loss helpers."""
    assert deficit_ceiling(28) == 1000
    assert deficit_ceiling(31) == 1200
    assert deficit_ceiling(36) == 1500
    assert daily_deficit_for_rate(0.5) == pytest.approx(550)
    assert daily_deficit_for_rate(-1) == 0


def test_safe_deficit():
    """Test the safe deficit range."""
    safe = validator.safe_deficit(28, 2500, ActivityLevel.MODERATE)
    assert safe.min_deficit == 300
    assert safe.max_deficit == 1000
    assert safe.recommended_deficit == 500

    capped = validator.safe_deficit(40, 2000, ActivityLevel.EXTREME)
    # 1500 * 1.15 would exceed 40% of TDEE
    assert capped.max_deficit == 800


def test_timeline_window():
    """Test the timeline window from minimum to maximum weeks."""
    window = validator.timeline_window(90, 80, 28)
    assert (window.min_weeks, window.optimal_weeks, window.max_weeks) == (10, 14, 20)
    obese = validator.timeline_window(120, 105, 34)
    assert obese.min_weeks == 10


def test_protein_requirements_rise_with_rate():
    """Test that protein needs rise with the loss rate."""
    slow = validator.protein_requirements(60, 0.4)
    fast = validator.protein_requirements(60, 1.8)
    assert slow.optimal == 120
    assert fast.optimal == 180
    assert slow.minimum < slow.optimal < slow.maximum


def test_refeed_schedule():
    """Test when refeeds are scheduled."""
    long_deep = validator.refeed_schedule(16, 0.25)
    assert long_deep.needs_refeeds is True
    assert long_deep.refeed_frequency == "weekly"
    assert long_deep.needs_diet_break is True
    assert long_deep.diet_break_week == 8

    short = validator.refeed_schedule(10, 0.30)
    assert short.needs_refeeds is False
    assert short.needs_diet_break is False

    gaining = validator.refeed_schedule(20, 0.30, goal=Goal.MUSCLE_GAIN)
    assert gaining.needs_refeeds is False
    assert gaining.explanation == []
