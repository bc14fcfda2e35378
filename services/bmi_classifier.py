"""Population-aware BMI classification.

Asian, Black African and Pacific Islander populations carry different
cardiometabolic risk at the same BMI, so each group has its own cutoffs.
Waist-to-height ratio, when available, refines the health risk and corrects
muscular individuals that BMI alone labels overweight.
"""

import math
from typing import Optional

from core.exceptions import InputRangeError
from core.logger import get_logger
from core.rounding import round_half_up
from schemas.profile_schema import PopulationType
from schemas.result_schema import BMICategory, BMICutoffs, BMIResult, ContextResult, HealthRisk
from services.input_validation import check_body_metrics, check_positive, MAX_CIRCUMFERENCE_CM

logger = get_logger("services.bmi_classifier")

UNDERWEIGHT_BELOW = 18.5

ASIAN_CUTOFFS = BMICutoffs(underweight=UNDERWEIGHT_BELOW, normal_max=22.9, overweight=23.0, obese=27.5)
BLACK_AFRICAN_CUTOFFS = BMICutoffs(underweight=UNDERWEIGHT_BELOW, normal_max=26.9, overweight=27.0, obese=32.0)
PACIFIC_CUTOFFS = BMICutoffs(underweight=UNDERWEIGHT_BELOW, normal_max=25.9, overweight=26.0, obese=32.0)
GENERAL_CUTOFFS = BMICutoffs(underweight=UNDERWEIGHT_BELOW, normal_max=24.9, overweight=25.0, obese=30.0)

POPULATION_CUTOFFS = {
    PopulationType.SOUTH_ASIAN: ASIAN_CUTOFFS,
    PopulationType.EAST_ASIAN: ASIAN_CUTOFFS,
    PopulationType.SOUTHEAST_ASIAN: ASIAN_CUTOFFS,
    PopulationType.BLACK_AFRICAN: BLACK_AFRICAN_CUTOFFS,
    PopulationType.PACIFIC_ISLANDER: PACIFIC_CUTOFFS,
}

CATEGORY_RISK = {
    BMICategory.UNDERWEIGHT: HealthRisk.MODERATE,
    BMICategory.NORMAL: HealthRisk.LOW,
    BMICategory.OVERWEIGHT: HealthRisk.MODERATE,
    BMICategory.OBESE: HealthRisk.HIGH,
}

CATEGORY_MESSAGES = {
    BMICategory.UNDERWEIGHT: (
        "Below healthy weight range",
        [
            "Consult a healthcare provider",
            "Increase calorie intake gradually",
            "Focus on strength training to build muscle",
            "Monitor for nutritional deficiencies",
        ],
    ),
    BMICategory.NORMAL: (
        "Healthy weight range",
        [
            "Maintain current weight",
            "Continue regular exercise",
            "Eat balanced, nutritious meals",
        ],
    ),
    BMICategory.OVERWEIGHT: (
        "Above healthy weight range",
        [
            "Weight loss of 5-10% of body weight is recommended",
            "Increase physical activity to 150+ min/week",
            "Reduce calorie intake by 300-500 kcal/day",
            "Monitor waist circumference and blood pressure",
        ],
    ),
    BMICategory.OBESE: (
        "Significantly above healthy range",
        [
            "Medical consultation strongly advised",
            "Follow a structured weight-management plan",
            "Screen for diabetes and cardiovascular disease",
            "Consider support from a registered dietitian",
        ],
    ),
}


def cutoffs_for(population: Optional[PopulationType]) -> BMICutoffs:
    return POPULATION_CUTOFFS.get(population, GENERAL_CUTOFFS)


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Raw BMI (kg/m^2).

    Raises:
        InputRangeError: If the inputs are out of range or the result is
            not finite.
    """
    check_body_metrics(weight_kg, height_cm)
    height_m = height_cm / 100
    bmi = weight_kg / (height_m * height_m)
    if not math.isfinite(bmi):
        raise InputRangeError("bmi", bmi, message=f"BMI is not a finite number for {weight_kg} kg / {height_cm} cm")
    return bmi


def category_for(bmi: float, cutoffs: BMICutoffs) -> BMICategory:
    if bmi < cutoffs.underweight:
        return BMICategory.UNDERWEIGHT
    if bmi < cutoffs.overweight:
        return BMICategory.NORMAL
    if bmi < cutoffs.obese:
        return BMICategory.OVERWEIGHT
    return BMICategory.OBESE


class BMIClassifier:
    """Classifies BMI against population-specific cutoffs."""

    def classify(
        self,
        weight_kg: float,
        height_cm: float,
        context: Optional[ContextResult] = None,
        waist_cm: Optional[float] = None,
        hip_cm: Optional[float] = None,
    ) -> BMIResult:
        """Classify BMI and health risk.

        Args:
            weight_kg: Body weight.
            height_cm: Height.
            context: Detected context; its population picks the cutoffs.
                Without it the general WHO cutoffs apply.
            waist_cm: Optional waist circumference.
            hip_cm: Optional hip circumference.

        Returns:
            `BMIResult` with the one-decimal BMI, category and health risk.
        """
        population = context.population_type if context is not None else PopulationType.GENERAL
        cutoffs = cutoffs_for(population)
        bmi = round_half_up(calculate_bmi(weight_kg, height_cm), 1)
        category = category_for(bmi, cutoffs)
        risk = CATEGORY_RISK[category]

        waist_to_height = None
        waist_to_hip = None
        athlete_override = False
        if waist_cm is not None:
            check_positive("waist_cm", waist_cm, MAX_CIRCUMFERENCE_CM)
            waist_to_height = waist_cm / height_cm
            if waist_to_height < 0.5:
                if category == BMICategory.OVERWEIGHT:
                    category = BMICategory.NORMAL
                    athlete_override = True
                risk = HealthRisk.LOW
            elif waist_to_height >= 0.6:
                risk = HealthRisk.VERY_HIGH
            else:
                risk = HealthRisk.MODERATE
            if hip_cm is not None:
                check_positive("hip_cm", hip_cm, MAX_CIRCUMFERENCE_CM)
                waist_to_hip = round_half_up(waist_cm / hip_cm, 2)

        message, recommendations = CATEGORY_MESSAGES[category]
        recommendations = list(recommendations)
        if athlete_override:
            message = "BMI reads overweight but waist-to-height is under 0.5; likely muscle mass rather than fat"
            recommendations = ["Track waist circumference rather than scale weight", "Maintain current training"]
        elif waist_to_height is not None and waist_to_height >= 0.6:
            recommendations.append("Waist-to-height ratio of 0.6 or more indicates high central fat; prioritize waist reduction")

        logger.debug(
            "BMI %.1f -> %s/%s (population=%s, override=%s)",
            bmi, category.value, risk.value, population.value, athlete_override,
        )
        return BMIResult(
            value=bmi,
            category=category,
            health_risk=risk,
            population_type=population,
            cutoffs=cutoffs,
            waist_to_height=round_half_up(waist_to_height, 2) if waist_to_height is not None else None,
            waist_to_hip=waist_to_hip,
            athlete_override=athlete_override,
            message=message,
            recommendations=recommendations,
        )


bmi_classifier = BMIClassifier()
__all__ = [
    "BMIClassifier",
    "bmi_classifier",
    "calculate_bmi",
    "category_for",
    "cutoffs_for",
    "POPULATION_CUTOFFS",
    "GENERAL_CUTOFFS",
]
