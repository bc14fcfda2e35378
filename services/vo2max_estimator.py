"""Non-exercise VO2 max estimate from activity, age and resting heart rate.

Uses the Jurca et al. (2005) style regression and classifies the result
against ACSM age and sex norms. Only meaningful with a measured resting HR.

Fitness age reads the estimate back against the median ("Above Average"
threshold) of each age bracket, placed at the bracket's mid-age, and
interpolates linearly between brackets.
"""

from typing import Dict, Tuple

from core.logger import get_logger
from core.rounding import round_half_up, round_int
from schemas.profile_schema import ActivityLevel, Confidence, Sex
from schemas.result_schema import CalculationResult, VO2MaxEstimate
from services.input_validation import check_age, check_heart_rates

logger = get_logger("services.vo2max_estimator")

ACTIVITY_INDEX: Dict[ActivityLevel, int] = {
    ActivityLevel.SEDENTARY: 0,
    ActivityLevel.LIGHT: 2,
    ActivityLevel.MODERATE: 4,
    ActivityLevel.ACTIVE: 6,
    ActivityLevel.EXTREME: 7,
}

# (age upper bound exclusive, thresholds for Excellent/Good/Above Average/Average)
ACSM_NORMS: Dict[Sex, Tuple[Tuple[float, Tuple[float, float, float, float]], ...]] = {
    Sex.MALE: (
        (30, (60, 52, 45, 38)),
        (40, (56, 49, 43, 36)),
        (50, (52, 46, 40, 34)),
        (60, (48, 43, 37, 31)),
        (float("inf"), (44, 39, 34, 28)),
    ),
    Sex.FEMALE: (
        (30, (56, 47, 40, 33)),
        (40, (52, 45, 38, 31)),
        (50, (48, 42, 36, 29)),
        (60, (44, 38, 33, 27)),
        (float("inf"), (40, 35, 30, 25)),
    ),
}

CLASSIFICATIONS = (("Excellent", 95), ("Good", 75), ("Above Average", 50), ("Average", 30))
BELOW_AVERAGE = ("Below Average", 15)

# mid-age of each ACSM bracket, in table order
BRACKET_MID_AGES = (25, 35, 45, 55, 65)
MEDIAN_COLUMN = 2
FITNESS_AGE_RANGE = (20, 80)


def _male(activity_index: int, age: int, resting_hr: int) -> float:
    return 56.363 + 1.921 * activity_index - 0.381 * age - 0.754 * (resting_hr / 10) + 10.987


def _female(activity_index: int, age: int, resting_hr: int) -> float:
    return 50.513 + 1.589 * activity_index - 0.289 * age - 0.552 * (resting_hr / 10)


def classify_vo2max(vo2max: float, age: int, sex: Sex) -> Tuple[str, int]:
    """ACSM classification and approximate percentile. `other` uses male norms."""
    norms = ACSM_NORMS[Sex.FEMALE if sex == Sex.FEMALE else Sex.MALE]
    for upper, thresholds in norms:
        if age < upper:
            for threshold, label in zip(thresholds, CLASSIFICATIONS):
                if vo2max >= threshold:
                    return label
            return BELOW_AVERAGE
    return BELOW_AVERAGE


def fitness_age(vo2max: float, sex: Sex) -> int:
    """Age at which `vo2max` is the median for the sex. `other` uses male norms."""
    norms = ACSM_NORMS[Sex.FEMALE if sex == Sex.FEMALE else Sex.MALE]
    curve = [(age, thresholds[MEDIAN_COLUMN]) for age, (_, thresholds) in zip(BRACKET_MID_AGES, norms)]
    segments = list(zip(curve, curve[1:]))
    # the first segment whose lower median is reached; past the end, extrapolate the last one
    (age_1, vo2_1), (age_2, vo2_2) = next(
        (segment for segment in segments if vo2max >= segment[1][1]), segments[-1]
    )
    age = age_1 + (vo2_1 - vo2max) * (age_2 - age_1) / (vo2_1 - vo2_2)
    low, high = FITNESS_AGE_RANGE
    return round_int(min(max(age, low), high))


class VO2MaxEstimator:
    def estimate(self, age: int, sex: Sex, activity_level: ActivityLevel, resting_hr: int) -> CalculationResult[VO2MaxEstimate]:
        """Estimate VO2 max (mL/kg/min).

        Args:
            age: Age in years.
            sex: Biological sex; `other` averages both equations.
            activity_level: Mapped to a 0-7 activity index.
            resting_hr: Measured resting heart rate.
        """
        check_age(age)
        check_heart_rates(resting_hr, None)
        index = ACTIVITY_INDEX[activity_level]
        if sex == Sex.MALE:
            raw = _male(index, age, resting_hr)
        elif sex == Sex.FEMALE:
            raw = _female(index, age, resting_hr)
        else:
            raw = (_male(index, age, resting_hr) + _female(index, age, resting_hr)) / 2
        vo2max = round_half_up(max(raw, 0.0), 1)
        classification, percentile = classify_vo2max(vo2max, age, sex)
        body_age = fitness_age(vo2max, sex)
        logger.debug("VO2 max %.1f (%s)", vo2max, classification)
        return CalculationResult[VO2MaxEstimate](
            value=VO2MaxEstimate(
                vo2max=vo2max, classification=classification, percentile=percentile, fitness_age=body_age
            ),
            formula_or_method="non_exercise_regression",
            confidence=Confidence.LOW,
            reasoning=(
                f"Estimated from activity index {index}, age {age} and resting HR {resting_hr}; "
                f"{classification} for age and sex (about {percentile}th percentile). "
                f"Fitness age {body_age}. "
                "A lab or field test is more accurate."
            ),
        )


vo2max_estimator = VO2MaxEstimator()
__all__ = ["VO2MaxEstimator", "vo2max_estimator", "classify_vo2max", "fitness_age", "ACTIVITY_INDEX"]
