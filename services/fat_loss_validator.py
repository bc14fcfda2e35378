"""Fat-loss goal validation with tiered feedback.

Rates are tiered rather than accepted or rejected:

    < 0.25 kg/week  info     slow but safe
    < 0.5           info     maximum muscle preservation
    <= 1.0          success  optimal
    <= 1.5          info     aggressive, achievable
    <= 2.0          warning  short-term only
    > 2.0           warning with BMI > 35 (medical supervision), else error

`valid` is always true. Blocking is a caller policy.
"""

import math
from typing import Dict, List, Optional

from core.logger import get_logger
from core.rounding import round_half_up, round_int
from schemas.profile_schema import ActivityLevel, Goal, Severity, Sex
from schemas.result_schema import FatLossValidation, ProteinRange, RefeedSchedule, SafeDeficit, TimelineWindow
from services.input_validation import check_positive, MAX_WEIGHT_KG

logger = get_logger("services.fat_loss_validator")

KCAL_PER_KG_FAT = 7700
SAFER_RATE_KG_PER_WEEK = 1.0
MIN_MEANINGFUL_DEFICIT = 300
MAX_TDEE_DEFICIT_SHARE = 0.4

SAFE_DEFICIT_ACTIVITY_FACTORS: Dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 0.8,
    ActivityLevel.LIGHT: 0.9,
    ActivityLevel.MODERATE: 1.0,
    ActivityLevel.ACTIVE: 1.1,
    ActivityLevel.EXTREME: 1.15,
}


def deficit_ceiling(bmi: float) -> int:
    """Largest daily deficit allowed for a BMI."""
    if bmi > 35:
        return 1500
    if bmi > 30:
        return 1200
    return 1000


def daily_deficit_for_rate(weekly_rate_kg: float) -> float:
    return max(weekly_rate_kg, 0.0) * KCAL_PER_KG_FAT / 7


def _escalate(current: Severity, floor: Severity) -> Severity:
    return current if current.rank >= floor.rank else floor


class FatLossValidator:
    """Validates fat-loss goals and plans deficits."""

    def validate_rate(
        self,
        current_kg: float,
        target_kg: float,
        timeline_weeks: float,
        bmr: float,
        bmi: float,
        sex: Sex,
        tdee: Optional[float] = None,
        max_weekly_loss_kg: Optional[float] = None,
        deficit_cap: Optional[int] = None,
    ) -> FatLossValidation:
        """Tier a requested fat-loss rate.

        Args:
            current_kg: Current weight.
            target_kg: Goal weight.
            timeline_weeks: Weeks to reach the goal.
            bmr: Basal metabolic rate; calories never go below it.
            bmi: Current BMI; sets the deficit ceiling.
            sex: Biological sex, used in the messaging.
            tdee: When given, `recommended_calories` is filled in.
            max_weekly_loss_kg: Age-bracket ceiling from the special
                population overlay; exceeding it escalates to at least warning.
            deficit_cap: Medical deficit cap, applied if lower than the BMI
                ceiling.

        Returns:
            `FatLossValidation` with `valid=True` and a severity tier.
        """
        check_positive("current_weight_kg", current_kg, MAX_WEIGHT_KG)
        check_positive("target_weight_kg", target_kg, MAX_WEIGHT_KG)
        check_positive("timeline_weeks", timeline_weeks)
        check_positive("bmr", bmr)
        check_positive("bmi", bmi)
        if tdee is not None:
            check_positive("tdee", tdee)

        to_lose = current_kg - target_kg
        weekly_rate = to_lose / timeline_weeks
        max_deficit = deficit_ceiling(bmi)
        if deficit_cap is not None:
            max_deficit = min(max_deficit, deficit_cap)
        daily_deficit = daily_deficit_for_rate(weekly_rate)
        rate_text = f"{weekly_rate:.2f} kg/week"
        suggested_weeks = None
        suggested_amount = None

        if weekly_rate <= 0:
            severity = Severity.INFO
            message = "Target weight is at or above current weight; no deficit is needed."
            recommendations = [
                "Eat at maintenance calories",
                "Keep resistance training 3x/week to improve body composition",
            ]
        elif weekly_rate < 0.25:
            severity = Severity.INFO
            message = f"{rate_text} is slow but safe. A slightly faster pace can help motivation."
            recommendations = [
                "Consider a modestly shorter timeline to keep momentum",
                "Keep protein at 1.8-2.0 g/kg body weight",
                "Resistance training 3x/week",
                "Focus on adherence habits: meal prep and daily step goals",
            ]
        elif weekly_rate < 0.5:
            severity = Severity.INFO
            message = f"{rate_text} is a gentle pace that maximizes muscle preservation."
            recommendations = [
                "Keep protein at 2.0 g/kg body weight",
                "Resistance training 3-4x/week",
                "No diet breaks needed at this pace",
            ]
        elif weekly_rate <= 1.0:
            severity = Severity.SUCCESS
            message = f"{rate_text} is sustainable and healthy; it maximizes fat loss while preserving muscle."
            recommendations = [
                "Maintain high protein (2.0-2.4 g/kg body weight)",
                "Resistance training 3-4x/week",
                "Consider a diet break every 12-16 weeks",
            ]
        elif weekly_rate <= 1.5:
            severity = Severity.INFO
            message = f"{rate_text} is aggressive but achievable with strict adherence."
            recommendations = [
                "Raise protein to 2.5 g/kg body weight",
                "Resistance training 4-5x/week",
                "Take a diet break every 8-12 weeks",
                "Track strength to monitor muscle loss",
            ]
        elif weekly_rate <= 2.0:
            severity = Severity.WARNING
            suggested_weeks = math.ceil(to_lose / SAFER_RATE_KG_PER_WEEK)
            suggested_amount = round_half_up(timeline_weeks * SAFER_RATE_KG_PER_WEEK, 1)
            message = (
                f"{rate_text} is very aggressive; keep it to 8-12 weeks at most. "
                f"Consider {suggested_weeks} weeks at 1 kg/week for better muscle preservation."
            )
            recommendations = [
                "Maximum protein (2.5-3.0 g/kg body weight)",
                "Heavy resistance training is mandatory to prevent muscle loss",
                "Plan diet breaks every 8-12 weeks",
                "One or two high-carb refeed days per week may help",
            ]
        elif bmi > 35:
            severity = Severity.WARNING
            message = (
                f"{rate_text} is extreme but may be appropriate at BMI {bmi:.1f}. "
                "Medical supervision is strongly recommended."
            )
            recommendations = [
                "Medical consultation strongly advised",
                "Very high protein (3 g/kg lean mass)",
                "Aggressive resistance training 3-5x/week",
                "Blood work to monitor health markers",
                "Reduce the rate to 1-1.5 kg/week as BMI decreases",
            ]
        else:
            severity = Severity.ERROR
            suggested_weeks = math.ceil(to_lose / SAFER_RATE_KG_PER_WEEK)
            suggested_amount = round_half_up(timeline_weeks * SAFER_RATE_KG_PER_WEEK, 1)
            message = (
                f"{rate_text} is extremely aggressive and likely unsustainable, with strong risk of muscle "
                f"loss and rebound. To lose {to_lose:.1f} kg safely, consider {suggested_weeks} weeks at 1 kg/week."
            )
            recommendations = [
                f"Extend the timeline to {suggested_weeks} weeks",
                "Raise protein to 2.5-3.0 g/kg body weight",
                "Resistance training 3-5x/week to preserve lean mass",
                "Plan diet breaks every 8-12 weeks",
                "Consider professional guidance",
            ]

        if max_weekly_loss_kg is not None and weekly_rate > max_weekly_loss_kg:
            severity = _escalate(severity, Severity.WARNING)
            ceiling_weeks = math.ceil(to_lose / max_weekly_loss_kg)
            suggested_weeks = max(suggested_weeks or 0, ceiling_weeks)
            message += f" For your age group the recommended maximum is {max_weekly_loss_kg:g} kg/week."
            recommendations = [f"Slow down to {max_weekly_loss_kg:g} kg/week ({ceiling_weeks} weeks)"] + recommendations

        recommended_calories = None
        if tdee is not None:
            recommended_calories = round_int(max(bmr, tdee - min(daily_deficit, max_deficit)))

        if severity.rank >= Severity.WARNING.rank:
            logger.info("Fat-loss goal escalated to %s at %.2f kg/week (BMI %.1f, %s)", severity.value, weekly_rate, bmi, sex.value)

        return FatLossValidation(
            valid=True,
            severity=severity,
            message=message,
            suggested_timeline_weeks=suggested_weeks,
            suggested_amount=suggested_amount,
            recommendations=recommendations,
            weekly_rate=round_half_up(weekly_rate, 2),
            daily_deficit=round_int(daily_deficit),
            max_deficit=max_deficit,
            min_calories=round_int(bmr),
            recommended_calories=recommended_calories,
            max_weekly_loss_kg=max_weekly_loss_kg,
        )

    def safe_deficit(self, bmi: float, tdee: float, activity_level: ActivityLevel) -> SafeDeficit:
        """Deficit range for a BMI and activity level.

        Never more than 40% of TDEE.
        """
        if bmi > 35:
            ceiling = 1500
        elif bmi > 30:
            ceiling = 1200
        elif bmi > 27:
            ceiling = 1000
        else:
            ceiling = 750
        adjusted = round_int(ceiling * SAFE_DEFICIT_ACTIVITY_FACTORS.get(activity_level, 1.0))
        return SafeDeficit(
            min_deficit=MIN_MEANINGFUL_DEFICIT,
            max_deficit=round_int(min(adjusted, tdee * MAX_TDEE_DEFICIT_SHARE)),
            recommended_deficit=round_int(min(500, adjusted * 0.7)),
        )

    def timeline_window(self, current_kg: float, target_kg: float, bmi: float) -> TimelineWindow:
        """Shortest, optimal and longest sensible timelines in weeks."""
        to_lose = max(current_kg - target_kg, 0.0)
        aggressive = 1.5 if bmi > 30 else 1.0
        return TimelineWindow(
            min_weeks=math.ceil(to_lose / aggressive),
            optimal_weeks=math.ceil(to_lose / 0.75),
            max_weeks=math.ceil(to_lose / 0.5),
        )

    def protein_requirements(self, lean_mass_kg: float, weekly_rate: float) -> ProteinRange:
        """Protein range in grams; faster loss needs more protein."""
        if weekly_rate <= 0.5:
            multiplier = 2.0
        elif weekly_rate <= 1.0:
            multiplier = 2.2
        elif weekly_rate <= 1.5:
            multiplier = 2.5
        else:
            multiplier = 3.0
        return ProteinRange(
            minimum=round_int(lean_mass_kg * (multiplier - 0.3)),
            optimal=round_int(lean_mass_kg * multiplier),
            maximum=round_int(lean_mass_kg * (multiplier + 0.3)),
        )

    def refeed_schedule(self, timeline_weeks: float, deficit_percent: float, goal: Goal = Goal.FAT_LOSS) -> RefeedSchedule:
        """Refeed days and diet breaks for long or deep deficits.

        Args:
            timeline_weeks: Length of the diet.
            deficit_percent: Daily deficit as a fraction of TDEE (0.2 = 20%).
            goal: Only fat-loss diets get a schedule.
        """
        is_fat_loss = goal == Goal.FAT_LOSS
        needs_refeeds = is_fat_loss and timeline_weeks >= 12 and deficit_percent >= 0.20
        needs_diet_break = is_fat_loss and timeline_weeks >= 16
        explanation: List[str] = []
        if needs_refeeds:
            explanation += [
                "One day per week at maintenance calories",
                "Increase carbs by 100-150 g on refeed days",
                "Keep protein the same and reduce fat slightly",
            ]
        break_week = None
        if needs_diet_break:
            break_week = int(timeline_weeks // 2)
            explanation.append(f"Week {break_week}: a full week at maintenance calories")
        return RefeedSchedule(
            needs_refeeds=needs_refeeds,
            refeed_frequency="weekly" if needs_refeeds else None,
            needs_diet_break=needs_diet_break,
            diet_break_week=break_week,
            explanation=explanation,
        )


fat_loss_validator = FatLossValidator()
__all__ = [
    "FatLossValidator",
    "fat_loss_validator",
    "deficit_ceiling",
    "daily_deficit_for_rate",
    "KCAL_PER_KG_FAT",
]
