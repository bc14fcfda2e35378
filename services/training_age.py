"""Training-age estimation from self-reported experience and performance.

Self-reported years are checked against two cheap performance proxies:
max push-ups (scaled over 0-50) and continuous running minutes (scaled over
0-30). Claims that clearly disagree with performance are corrected.
"""

from typing import Optional

from core.logger import get_logger
from core.rounding import round_half_up
from schemas.profile_schema import ActivityLevel, Confidence, TrainingLevel
from schemas.result_schema import TrainingAge

logger = get_logger("services.training_age")

PUSHUP_CEILING = 50
RUN_MINUTES_CEILING = 30

# (exclusive upper bound on effective years, level)
LEVEL_THRESHOLDS = (
    (0.5, TrainingLevel.NOVICE),
    (1.0, TrainingLevel.BEGINNER),
    (3.0, TrainingLevel.INTERMEDIATE),
    (5.0, TrainingLevel.ADVANCED),
)


def level_for_years(years: float) -> TrainingLevel:
    for upper, level in LEVEL_THRESHOLDS:
        if years < upper:
            return level
    return TrainingLevel.ELITE


def performance_score(pushups: Optional[int], run_minutes: Optional[float]) -> Optional[float]:
    """Average of the supplied proxies on a 0-100 scale, or None if none given."""
    parts = []
    if pushups is not None:
        parts.append(min(pushups, PUSHUP_CEILING) / PUSHUP_CEILING * 100)
    if run_minutes is not None:
        parts.append(min(run_minutes, RUN_MINUTES_CEILING) / RUN_MINUTES_CEILING * 100)
    if not parts:
        return None
    return sum(parts) / len(parts)


def infer_activity_level(workout_frequency: Optional[int]) -> ActivityLevel:
    """Infer an activity level from workouts per week."""
    if not workout_frequency:
        return ActivityLevel.SEDENTARY
    if workout_frequency <= 2:
        return ActivityLevel.LIGHT
    if workout_frequency <= 4:
        return ActivityLevel.MODERATE
    if workout_frequency <= 6:
        return ActivityLevel.ACTIVE
    return ActivityLevel.EXTREME


class TrainingAgeEstimator:
    """Corroborates claimed training experience against performance."""

    def estimate(
        self,
        experience_years: float,
        frequency: Optional[int] = None,
        pushups: Optional[int] = None,
        run_minutes: Optional[float] = None,
    ) -> TrainingAge:
        """Estimate the effective training age.

        Args:
            experience_years: Self-reported years of consistent training.
            frequency: Workouts per week; recorded but not scored.
            pushups: Max consecutive push-ups, if tested.
            run_minutes: Continuous running minutes, if tested.

        Returns:
            `TrainingAge` with effective years, level and confidence. Any
            correction drops confidence to medium.
        """
        score = performance_score(pushups, run_minutes)
        years = experience_years
        reasoning = f"{experience_years:g} years reported"

        if score is not None:
            if experience_years > 2 and score < 30:
                years = experience_years / 2
                reasoning += f"; performance score {score:.0f}/100 is low for that experience, so effective years were halved"
            elif experience_years < 1 and score > 70:
                years = max(experience_years, 1.5)
                reasoning += f"; performance score {score:.0f}/100 indicates more experience, raised to 1.5 years"
            else:
                reasoning += f"; performance score {score:.0f}/100 is consistent"
        else:
            reasoning += "; no performance tests supplied"

        adjustment = years - experience_years
        confidence = Confidence.MEDIUM if adjustment != 0 else Confidence.HIGH
        level = level_for_years(years)
        logger.debug("Training age %.2f -> %.2f years (%s)", experience_years, years, level.value)

        return TrainingAge(
            years=years,
            claimed_years=experience_years,
            level=level,
            confidence=confidence,
            corroboration_adjustment=round_half_up(adjustment, 2),
            performance_score=round_half_up(score, 1) if score is not None else None,
            workout_frequency=frequency,
            reasoning=f"{reasoning}. Level: {level.value}.",
        )


training_age_estimator = TrainingAgeEstimator()
__all__ = [
    "TrainingAgeEstimator",
    "training_age_estimator",
    "level_for_years",
    "performance_score",
    "infer_activity_level",
]
