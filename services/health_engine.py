"""Health calculation facade.

`HealthCalculationEngine.calculate_all` runs every calculator for a profile
and returns a `CalculationBundle`. The engine holds no per-user state, so a
single instance can serve concurrent requests.
"""

from typing import List, Optional

from core.logger import get_logger
from core.rounding import round_half_up, round_int
from schemas.profile_schema import Confidence, Goal, Profile
from schemas.result_schema import CalculationBundle, CalculationResult
from services.bmi_classifier import BMIClassifier
from services.bmr_calculator import BMRCalculator
from services.climate_adjuster import ClimateAdjuster
from services.context_detector import ContextDetector
from services.fat_loss_validator import FatLossValidator, deficit_ceiling
from services.health_score import HealthScoreCalculator
from services.heart_rate import HeartRateZoneCalculator
from services.input_validation import validate_profile
from services.macro_planner import MacroPlanner, default_strategy
from services.muscle_gain_limiter import MuscleGainLimiter
from services.special_population import SpecialPopulationAdjuster
from services.training_age import TrainingAgeEstimator, infer_activity_level
from services.vo2max_estimator import VO2MaxEstimator

logger = get_logger("services.health_engine")

DEFAULT_DEFICIT = 500
MUSCLE_GAIN_SURPLUS = 300


class HealthCalculationEngine:
    """Orchestrates context detection and every calculator.

    Collaborators can be injected, which is how tests replace the weather
    provider behind the context detector.
    """

    def __init__(
        self,
        context_detector: Optional[ContextDetector] = None,
        training_age_estimator: Optional[TrainingAgeEstimator] = None,
        bmr_calculator: Optional[BMRCalculator] = None,
        bmi_classifier: Optional[BMIClassifier] = None,
        climate_adjuster: Optional[ClimateAdjuster] = None,
        macro_planner: Optional[MacroPlanner] = None,
        muscle_gain_limiter: Optional[MuscleGainLimiter] = None,
        fat_loss_validator: Optional[FatLossValidator] = None,
        special_population: Optional[SpecialPopulationAdjuster] = None,
        heart_rate: Optional[HeartRateZoneCalculator] = None,
        vo2max: Optional[VO2MaxEstimator] = None,
        health_score: Optional[HealthScoreCalculator] = None,
    ):
        self.context_detector = context_detector or ContextDetector()
        self.training_age_estimator = training_age_estimator or TrainingAgeEstimator()
        self.bmr_calculator = bmr_calculator or BMRCalculator()
        self.bmi_classifier = bmi_classifier or BMIClassifier()
        self.climate_adjuster = climate_adjuster or ClimateAdjuster()
        self.macro_planner = macro_planner or MacroPlanner()
        self.muscle_gain_limiter = muscle_gain_limiter or MuscleGainLimiter()
        self.fat_loss_validator = fat_loss_validator or FatLossValidator()
        self.special_population = special_population or SpecialPopulationAdjuster()
        self.heart_rate = heart_rate or HeartRateZoneCalculator()
        self.vo2max = vo2max or VO2MaxEstimator()
        self.health_score = health_score or HealthScoreCalculator()

    def calculate_all(self, profile: Profile) -> CalculationBundle:
        """Compute every output for a profile.

        Args:
            profile: The user profile. It is never modified.

        Returns:
            `CalculationBundle` with each number, its provenance and the
            overall (lowest) confidence.

        Raises:
            InputRangeError: If any profile value is physically out of range.
            MissingPrerequisiteError: If a BMR override lacks its inputs.
        """
        validate_profile(profile)
        logger.info("Calculating bundle for profile %s", profile.profile_hash()[:12])

        context = self.context_detector.detect(profile)
        training_age = self.training_age_estimator.estimate(
            profile.training_years, profile.workout_frequency, profile.pushups, profile.run_minutes
        )
        adjustment = self.special_population.assess(profile)

        bmr = self.bmr_calculator.calculate(profile, context, training_age)
        if adjustment.bmr_multiplier != 1.0:
            adjusted = round_int(self.special_population.adjust_bmr(bmr.value, adjustment))
            bmr = CalculationResult[int](
                value=adjusted,
                formula_or_method=bmr.formula_or_method,
                confidence=bmr.confidence,
                reasoning=f"{bmr.reasoning} Adjusted x {adjustment.bmr_multiplier:.3f} for thyroid condition(s): {adjusted} kcal/day.",
            )

        bmi = self.bmi_classifier.classify(
            profile.weight_kg, profile.height_cm, context, profile.waist_cm, profile.hip_cm
        )

        activity = profile.activity_level or infer_activity_level(profile.workout_frequency)
        climate = context.climate_type
        tdee = self.climate_adjuster.tdee(
            bmr.value, activity, climate, confidence=Confidence.lowest(bmr.confidence, context.climate_confidence)
        )
        water = self.climate_adjuster.water(
            profile.weight_kg, activity, climate, context.altitude_m, confidence=context.climate_confidence
        )

        fat_loss = None
        if profile.target_weight_kg is not None and profile.timeline_weeks is not None:
            fat_loss = self.fat_loss_validator.validate_rate(
                profile.weight_kg,
                profile.target_weight_kg,
                profile.timeline_weeks,
                bmr.value,
                bmi.value,
                profile.sex,
                tdee=tdee.value,
                max_weekly_loss_kg=adjustment.max_weekly_loss_kg,
                deficit_cap=adjustment.deficit_cap,
            )

        target_calories = self._target_calories(profile, bmr.value, tdee, bmi.value, fat_loss, adjustment)

        protein = self.macro_planner.plan_protein(
            profile.weight_kg,
            profile.goal,
            profile.diet_type,
            training_age,
            protein_multiplier=adjustment.protein_multiplier,
            protein_cap_g_per_kg=adjustment.protein_cap_g_per_kg,
        )
        strategy = default_strategy(profile.diet_type, adjustment.lower_carb_hint, profile.overrides.macro_strategy)
        protein_cap_g = None
        if adjustment.protein_cap_g_per_kg is not None:
            protein_cap_g = round_half_up(profile.weight_kg * adjustment.protein_cap_g_per_kg, 1)
        macros = self.macro_planner.plan_distribution(target_calories.value, protein, strategy, protein_cap_g)

        limits = self.muscle_gain_limiter.max_monthly_gain_kg(training_age, profile.age, profile.sex)
        muscle_gain = None
        if profile.target_muscle_gain_kg is not None and profile.timeline_months is not None:
            muscle_gain = self.muscle_gain_limiter.validate_goal(
                profile.target_muscle_gain_kg, profile.timeline_months, limits
            )

        zones = self.heart_rate.zones(profile.age, profile.sex, profile.resting_hr, profile.max_hr)
        vo2max = None
        if profile.resting_hr is not None:
            vo2max = self.vo2max.estimate(profile.age, profile.sex, activity, profile.resting_hr)
        health_score = self.health_score.calculate(
            profile.age,
            profile.sex,
            bmi.value,
            activity,
            water_target_ml=water.value,
            water_intake_ml=profile.water_intake_ml,
            protein_target_g=macros.protein_g,
            protein_intake_g=profile.protein_intake_g,
            vo2max=vo2max.value.vo2max if vo2max else None,
        )

        confidence = Confidence.lowest(
            context.confidence,
            training_age.confidence,
            bmr.confidence,
            tdee.confidence,
            water.confidence,
            zones.confidence,
        )
        reasoning: List[str] = [bmr.reasoning, tdee.reasoning, target_calories.reasoning, macros.reasoning]
        reasoning += context.notes + adjustment.notes + adjustment.warnings

        return CalculationBundle(
            bmr=bmr,
            tdee=tdee,
            target_calories=target_calories,
            water_ml=water,
            bmi=bmi,
            macros=macros,
            muscle_gain_limit=limits,
            fat_loss_validation=fat_loss,
            muscle_gain_validation=muscle_gain,
            heart_rate_zones=zones,
            vo2max=vo2max,
            health_score=health_score,
            context=context,
            training_age=training_age,
            population_adjustment=adjustment,
            confidence=confidence,
            reasoning=reasoning,
        )

    def _target_calories(self, profile, bmr, tdee, bmi, fat_loss, adjustment) -> CalculationResult[int]:
        goal = profile.goal
        if goal == Goal.FAT_LOSS and adjustment.no_deficit:
            base = tdee.value
            method = "maintenance"
            why = "no deficit during pregnancy or lactation"
        elif goal == Goal.FAT_LOSS:
            requested = fat_loss.daily_deficit if fat_loss is not None else DEFAULT_DEFICIT
            cap = deficit_ceiling(bmi)
            if adjustment.deficit_cap is not None:
                cap = min(cap, adjustment.deficit_cap)
            deficit = min(requested, cap)
            base = max(tdee.value - deficit, bmr)
            method = "tdee_minus_deficit"
            why = f"TDEE minus a {deficit:.0f} kcal deficit (ceiling {cap}), never below BMR {bmr}"
        elif goal == Goal.MUSCLE_GAIN:
            base = tdee.value + MUSCLE_GAIN_SURPLUS
            method = "tdee_plus_surplus"
            why = f"TDEE plus a {MUSCLE_GAIN_SURPLUS} kcal surplus"
        else:
            base = tdee.value
            method = "maintenance"
            why = "maintenance at TDEE"

        value = self.special_population.adjust_calories(base, bmr, adjustment)
        if goal == Goal.FAT_LOSS:
            value = max(value, bmr)
        if value != round_int(base):
            why += f"; special-population overlays bring it to {value}"
        return CalculationResult[int](
            value=value,
            formula_or_method=method,
            confidence=tdee.confidence,
            reasoning=f"Target {value} kcal/day: {why}.",
        )


health_engine = HealthCalculationEngine()
__all__ = ["HealthCalculationEngine", "health_engine"]
