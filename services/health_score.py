"""Overall health score across five dimensions.

Points: body composition 20, physical activity 20, hydration 15, nutrition
25 and cardiovascular fitness 20, for 100 in total. Dimensions without data
score a neutral half and are marked unmeasured. Hydration and nutrition are
scored from tracked intake against the calculated targets. Cardiovascular
fitness uses the ACSM band of the VO2 max estimate.

Grades: A (90+), B (80-89), C (70-79), D (60-69), F (below 60).
"""

from typing import List, Optional

from core.logger import get_logger
from core.rounding import round_int
from schemas.profile_schema import ActivityLevel, Confidence, Sex
from schemas.result_schema import CalculationResult, HealthScore, ScoreComponent
from services.vo2max_estimator import classify_vo2max

logger = get_logger("services.health_score")

BMI_POINTS = 20
ACTIVITY_POINTS = 20
HYDRATION_POINTS = 15
NUTRITION_POINTS = 25
CARDIO_POINTS = 20

ACTIVITY_SCORES = {
    ActivityLevel.SEDENTARY: 5,
    ActivityLevel.LIGHT: 10,
    ActivityLevel.MODERATE: 15,
    ActivityLevel.ACTIVE: 18,
    ActivityLevel.EXTREME: 20,
}

CARDIO_SCORES = {"Excellent": 20, "Good": 16, "Above Average": 12, "Average": 8, "Below Average": 4}

# (minimum total, grade, rating)
GRADES = ((90, "A", "excellent"), (80, "B", "very_good"), (70, "C", "good"), (60, "D", "fair"))
FAILING_GRADE = ("F", "poor")

WEAK_SHARE = 0.7
MAX_RECOMMENDATIONS = 5

RECOMMENDATIONS = {
    "BMI/Body Composition": [
        "Improve body composition through balanced nutrition and exercise",
        "Consider consulting a healthcare provider about healthy weight goals",
    ],
    "Physical Activity": [
        "Increase physical activity to at least 150 minutes of moderate exercise per week",
        "Start with small, achievable increases in daily movement",
    ],
    "Hydration": [
        "Increase water intake to meet your daily hydration target",
        "Set reminders to drink water throughout the day",
    ],
    "Nutrition Quality": [
        "Prioritize protein intake to meet your daily target",
        "Focus on whole foods and a balanced macronutrient distribution",
    ],
    "Cardiovascular Fitness": [
        "Build aerobic capacity with regular cardio exercise",
        "Gradually increase cardio intensity and duration",
    ],
}
GENERAL_RECOMMENDATIONS = [
    "Excellent health! Continue current habits",
    "Focus on consistency and gradual progression",
    "Consider setting performance-based goals",
]


def score_bmi(bmi: float) -> int:
    if 18.5 <= bmi < 25:
        return 20
    if 25 <= bmi <= 27 or 17 <= bmi < 18.5:
        return 15
    if 27 < bmi <= 30 or 15 <= bmi < 17:
        return 10
    if 30 < bmi <= 35 or bmi < 15:
        return 5
    return 0


def score_hydration(intake_ml: float, target_ml: float) -> int:
    percent = intake_ml / target_ml * 100
    for minimum, points in ((100, 15), (80, 12), (60, 9), (40, 6)):
        if percent >= minimum:
            return points
    return 3


def score_nutrition(intake_g: float, target_g: float) -> int:
    """Protein intake against target; both too little and too much lose points."""
    percent = intake_g / target_g * 100
    if 90 <= percent <= 120:
        return 25
    if 80 <= percent <= 130:
        return 20
    if 70 <= percent <= 150:
        return 15
    if 50 <= percent <= 200:
        return 10
    return 5


def grade_for(total: int):
    for minimum, grade, rating in GRADES:
        if total >= minimum:
            return grade, rating
    return FAILING_GRADE


class HealthScoreCalculator:
    """Scores overall health and suggests where to improve first."""

    def calculate(
        self,
        age: int,
        sex: Sex,
        bmi: Optional[float],
        activity_level: ActivityLevel,
        water_target_ml: Optional[float] = None,
        water_intake_ml: Optional[float] = None,
        protein_target_g: Optional[float] = None,
        protein_intake_g: Optional[float] = None,
        vo2max: Optional[float] = None,
    ) -> CalculationResult[HealthScore]:
        """Compute the health score.

        Args:
            age: Age in years; selects the VO2 max norms.
            sex: Biological sex; selects the VO2 max norms.
            bmi: Body mass index, if known.
            activity_level: Habitual activity level.
            water_target_ml: Calculated daily water target.
            water_intake_ml: Tracked daily water intake.
            protein_target_g: Calculated daily protein target.
            protein_intake_g: Tracked daily protein intake.
            vo2max: Estimated or measured VO2 max.

        Returns:
            `CalculationResult[HealthScore]`. Confidence is high when all
            five dimensions are measured, medium with at least three and low
            otherwise.
        """
        components = [
            self._component("BMI/Body Composition", BMI_POINTS, None if bmi is None else score_bmi(bmi)),
            self._component("Physical Activity", ACTIVITY_POINTS, ACTIVITY_SCORES[ActivityLevel(activity_level)]),
            self._component(
                "Hydration", HYDRATION_POINTS,
                score_hydration(water_intake_ml, water_target_ml)
                if water_intake_ml is not None and water_target_ml else None,
            ),
            self._component(
                "Nutrition Quality", NUTRITION_POINTS,
                score_nutrition(protein_intake_g, protein_target_g)
                if protein_intake_g is not None and protein_target_g else None,
            ),
            self._component(
                "Cardiovascular Fitness", CARDIO_POINTS,
                None if vo2max is None else CARDIO_SCORES[classify_vo2max(vo2max, age, sex)[0]],
            ),
        ]

        total = round_int(min(max(sum(c.score for c in components), 0), 100))
        grade, rating = grade_for(total)
        measured = sum(1 for c in components if c.measured)
        if measured == len(components):
            confidence = Confidence.HIGH
        elif measured >= 3:
            confidence = Confidence.MEDIUM
        else:
            confidence = Confidence.LOW

        estimated = [c.category for c in components if not c.measured]
        reasoning = f"Score {total}/100 (grade {grade}) from {measured} of {len(components)} measured dimensions"
        if estimated:
            reasoning += f"; neutral half scores for {', '.join(estimated)}"
        logger.debug("Health score %s (%s), %s measured", total, grade, measured)

        return CalculationResult[HealthScore](
            value=HealthScore(
                total_score=total,
                grade=grade,
                rating=rating,
                components=components,
                recommendations=self._recommendations(components),
            ),
            formula_or_method="five_dimension_score",
            confidence=confidence,
            reasoning=reasoning + ".",
        )

    @staticmethod
    def _component(category: str, max_score: int, score: Optional[int]) -> ScoreComponent:
        if score is None:
            return ScoreComponent(category=category, score=(max_score + 1) // 2, max_score=max_score, measured=False)
        return ScoreComponent(category=category, score=score, max_score=max_score, measured=True)

    @staticmethod
    def _recommendations(components: List[ScoreComponent]) -> List[str]:
        tips: List[str] = []
        for component in components:
            if component.measured and component.score < component.max_score * WEAK_SHARE:
                tips.extend(RECOMMENDATIONS[component.category])
        return (tips or GENERAL_RECOMMENDATIONS)[:MAX_RECOMMENDATIONS]


health_score_calculator = HealthScoreCalculator()
__all__ = [
    "HealthScoreCalculator",
    "health_score_calculator",
    "score_bmi",
    "score_hydration",
    "score_nutrition",
    "grade_for",
]
