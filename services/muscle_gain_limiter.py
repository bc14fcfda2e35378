"""Natural muscle-gain limits and goal validation."""

import math
from typing import Dict, Tuple, Union

from core.logger import get_logger
from core.rounding import round_half_up
from schemas.profile_schema import Severity, Sex, TrainingLevel
from schemas.result_schema import MuscleGainLimits, TrainingAge, ValidationResult
from services.input_validation import check_age, check_between, check_positive

logger = get_logger("services.muscle_gain_limiter")

# level -> (male, female) kg of lean mass per month
MONTHLY_GAIN_KG: Dict[TrainingLevel, Tuple[float, float]] = {
    TrainingLevel.NOVICE: (1.0, 0.5),
    TrainingLevel.BEGINNER: (1.0, 0.5),
    TrainingLevel.INTERMEDIATE: (0.5, 0.25),
    TrainingLevel.ADVANCED: (0.25, 0.125),
    TrainingLevel.ELITE: (0.1, 0.05),
}

WEEKS_PER_MONTH = 52 / 12


def age_multiplier(age: int) -> float:
    if age < 20:
        return 1.15
    if age >= 60:
        return 0.7
    if age >= 50:
        return 0.8
    if age >= 40:
        return 0.9
    return 1.0


def suggested_timeline_weeks(target_kg: float, monthly_kg: float) -> int:
    """Weeks needed to reach `target_kg` at the natural monthly rate."""
    months = math.ceil(target_kg / monthly_kg)
    return math.ceil(months * WEEKS_PER_MONTH)


class MuscleGainLimiter:
    """Caps muscle-gain expectations at natural rates."""

    def max_monthly_gain_kg(
        self,
        training_age: Union[TrainingAge, TrainingLevel],
        age: int,
        sex: Sex,
    ) -> MuscleGainLimits:
        """Natural maximum monthly lean-mass gain.

        Args:
            training_age: Corroborated training age or a bare level.
            age: Age in years.
            sex: Biological sex; `other` uses the mean of both rates.
        """
        check_age(age)
        level = training_age.level if isinstance(training_age, TrainingAge) else TrainingLevel(training_age)
        male, female = MONTHLY_GAIN_KG[level]
        if sex == Sex.MALE:
            base = male
        elif sex == Sex.FEMALE:
            base = female
        else:
            base = (male + female) / 2
        multiplier = age_multiplier(age)
        monthly = base * multiplier
        reasoning = f"{level.value.capitalize()} {sex.value} rate {base:g} kg/month"
        if multiplier != 1.0:
            reasoning += f" x {multiplier} for age {age}"
        reasoning += f" = {monthly:.3f} kg/month."
        return MuscleGainLimits(
            monthly_kg=monthly,
            yearly_kg=monthly * 12,
            level=level,
            sex=sex,
            age_multiplier=multiplier,
            reasoning=reasoning,
        )

    def validate_goal(self, target_kg: float, timeline_months: float, limits: MuscleGainLimits) -> ValidationResult:
        """Tier a muscle-gain target against the natural limit.

        The result is always valid; only the severity escalates.
        """
        check_between("target_kg", target_kg, 0, 100)
        check_positive("timeline_months", timeline_months)

        monthly = limits.monthly_kg
        max_gain = monthly * timeline_months
        suggested_amount = round_half_up(max_gain, 2)
        base_recs = [
            "Eat in a 200-300 kcal surplus",
            "Keep protein around 1.6-2.2 g/kg of body weight",
            "Train each muscle group at least twice a week with progressive overload",
            "Sleep 7-9 hours a night",
        ]

        if target_kg <= max_gain:
            result = ValidationResult(
                severity=Severity.SUCCESS,
                message=f"{target_kg:g} kg in {timeline_months:g} months is within the natural limit of {max_gain:.1f} kg.",
                suggested_amount=suggested_amount,
                recommendations=base_recs,
            )
        elif target_kg <= 1.5 * max_gain:
            result = ValidationResult(
                severity=Severity.INFO,
                message=(
                    f"{target_kg:g} kg in {timeline_months:g} months is optimistic; possible only with "
                    f"near-perfect training, nutrition and sleep (natural limit {max_gain:.1f} kg)."
                ),
                suggested_amount=suggested_amount,
                recommendations=base_recs + ["Track progress monthly and adjust the timeline if needed"],
            )
        else:
            weeks = suggested_timeline_weeks(target_kg, monthly)
            severe = target_kg > 2 * max_gain
            result = ValidationResult(
                severity=Severity.ERROR if severe else Severity.WARNING,
                message=(
                    f"{target_kg:g} kg in {timeline_months:g} months is "
                    f"{'far ' if severe else ''}above the natural limit of {max_gain:.1f} kg. "
                    f"A realistic timeline is about {weeks} weeks."
                ),
                suggested_timeline_weeks=weeks,
                suggested_amount=suggested_amount,
                recommendations=[
                    f"Extend the timeline to about {weeks} weeks",
                    f"Or aim for {suggested_amount:g} kg in {timeline_months:g} months",
                ] + base_recs,
            )

        if result.severity != Severity.SUCCESS:
            logger.info("Muscle-gain goal escalated to %s (target=%s, max=%.2f)", result.severity.value, target_kg, max_gain)
        return result


muscle_gain_limiter = MuscleGainLimiter()
__all__ = [
    "MuscleGainLimiter",
    "muscle_gain_limiter",
    "MONTHLY_GAIN_KG",
    "age_multiplier",
    "suggested_timeline_weeks",
]
