"""Tests for BMR formula selection and the formulas themselves."""
import pytest

from core.exceptions import MissingPrerequisiteError
from schemas.profile_schema import BMRFormula, Confidence, Profile
from services.bmr_calculator import BMRCalculator, lean_mass_kg
from services.training_age import TrainingAgeEstimator


calculator = BMRCalculator()


def test_mifflin_is_default_without_body_fat():
    """Test that Mifflin-St Jeor is chosen when body fat is unknown."""
    profile = Profile(sex="male", age=30, weight_kg=80, height_cm=180)
    result = calculator.calculate(profile)
    # 10*80 + 6.25*180 - 5*30 + 5
    assert result.value == 1780
    assert result.formula_or_method == BMRFormula.MIFFLIN_ST_JEOR.value
    assert result.confidence == Confidence.MEDIUM
    assert "Mifflin-St Jeor" in result.reasoning


def test_katch_mcardle_with_dexa_body_fat():
    """Test that DEXA body fat selects Katch-McArdle."""
    profile = Profile(sex="female", age=35, weight_kg=70, height_cm=165, body_fat_percent=25, body_fat_method="dexa")
    result = calculator.calculate(profile)
    # lean mass 52.5 kg -> 370 + 21.6 * 52.5
    assert result.value == 1504
    assert result.formula_or_method == "katch_mcardle"
    assert result.confidence == Confidence.HIGH


def test_lab_body_fat_always_selects_katch_mcardle():
    """Test that every lab measurement method selects Katch-McArdle."""
    for method in ("dexa", "bodpod", "hydrostatic"):
        for age in (13, 25, 45, 65, 90):
            for weight in (45.0, 70.0, 120.0):
                profile = Profile(
                    sex="male", age=age, weight_kg=weight, height_cm=175,
                    body_fat_percent=20, body_fat_method=method,
                )
                first = calculator.calculate(profile)
                second = calculator.calculate(profile)
                assert first.formula_or_method == "katch_mcardle"
                assert first == second


def test_cunningham_for_lean_trained_athlete():
    """Test that a lean, trained athlete gets Cunningham."""
    profile = Profile(sex="male", age=28, weight_kg=80, height_cm=180, body_fat_percent=12, body_fat_method="calipers")
    elite = TrainingAgeEstimator().estimate(6)
    result = calculator.calculate(profile, training_age=elite)
    # 500 + 22 * 70.4
    assert result.formula_or_method == "cunningham"
    assert result.value == 2049


def test_calipers_without_athlete_status_fall_back_to_mifflin():
    """Test that caliper body fat alone does not leave Mifflin-St Jeor."""
    profile = Profile(sex="male", age=28, weight_kg=80, height_cm=180, body_fat_percent=12, body_fat_method="calipers")
    novice = TrainingAgeEstimator().estimate(0.2)
    result = calculator.calculate(profile, training_age=novice)
    assert result.formula_or_method == "mifflin_st_jeor"


def test_oxford_for_age_sixty_and_over():
    """Test that Oxford is chosen from age sixty."""
    profile = Profile(sex="male", age=65, weight_kg=70, height_cm=175)
    result = calculator.calculate(profile)
    # 11.4*70 + 541*1.75 - 256
    assert result.formula_or_method == "oxford"
    assert result.value == 1489


def test_harris_benedict_only_by_override():
    """Test that Harris-Benedict is used only when requested."""
    profile = Profile(sex="male", age=30, weight_kg=80, height_cm=180, overrides={"bmr_formula": "harris_benedict"})
    result = calculator.calculate(profile)
    assert result.formula_or_method == "harris_benedict"
    assert result.value == 1854
    assert result.confidence == Confidence.LOW
    assert "selected manually" in result.reasoning


def test_override_without_prerequisite_raises():
    """Test that an override missing its inputs raises MissingPrerequisiteError."""
    profile = Profile(sex="female", age=30, weight_kg=60, height_cm=165, overrides={"bmr_formula": "katch_mcardle"})
    with pytest.raises(MissingPrerequisiteError) as exc_info:
        calculator.calculate(profile)
    assert exc_info.value.status_code == 400
    assert exc_info.value.details["missing"] == ["body_fat_percent"]


def test_override_katch_accepts_non_lab_body_fat():
    """Test that a Katch-McArdle override accepts any body fat method."""
    profile = Profile(
        sex="female", age=30, weight_kg=60, height_cm=165,
        body_fat_percent=30, body_fat_method="visual",
    )
    result = calculator.calculate(profile, override=BMRFormula.KATCH_MCARDLE)
    assert result.formula_or_method == "katch_mcardle"
    assert result.value == round(370 + 21.6 * 42)


def test_other_sex_uses_mean_of_equations():
    """Test that sex 'other' averages the male and female equations."""
    male = calculator.calculate(Profile(sex="male", age=40, weight_kg=70, height_cm=170)).value
    female = calculator.calculate(Profile(sex="female", age=40, weight_kg=70, height_cm=170)).value
    other = calculator.calculate(Profile(sex="other", age=40, weight_kg=70, height_cm=170)).value
    assert female < other < male


def test_lean_mass():
    """Test lean body mass from weight and body fat."""
    assert lean_mass_kg(70, 25) == pytest.approx(52.5)
