"""Basal metabolic rate calculation.

Each formula is a strategy with its own prerequisites, eligibility rule,
accuracy band and confidence. Auto-selection walks `AUTO_SELECTION_ORDER`
top-down and uses the first eligible strategy; an explicit override skips
selection but must still satisfy its own prerequisites.
"""

from typing import List, Optional

from core.exceptions import MissingPrerequisiteError
from core.logger import get_logger
from core.rounding import round_int
from schemas.profile_schema import BMRFormula, BodyFatMethod, Confidence, Profile, Sex, TrainingLevel
from schemas.result_schema import CalculationResult, ContextResult, TrainingAge

logger = get_logger("services.bmr_calculator")

LAB_METHODS = frozenset({BodyFatMethod.DEXA, BodyFatMethod.BODPOD, BodyFatMethod.HYDROSTATIC})
FIELD_METHODS = frozenset({BodyFatMethod.CALIPERS, BodyFatMethod.BIOIMPEDANCE})
ATHLETE_LEVELS = frozenset({TrainingLevel.ADVANCED, TrainingLevel.ELITE})
ATHLETE_BODY_FAT_LIMIT = {Sex.MALE: 15.0, Sex.FEMALE: 22.0, Sex.OTHER: 18.5}


def lean_mass_kg(weight_kg: float, body_fat_percent: float) -> float:
    return weight_kg * (1 - body_fat_percent / 100)


def _by_sex(sex: Sex, male: float, female: float) -> float:
    if sex == Sex.MALE:
        return male
    if sex == Sex.FEMALE:
        return female
    return (male + female) / 2


class BMRStrategy:
    """Base class for a BMR formula."""

    formula: BMRFormula
    label: str
    accuracy: str
    confidence: Confidence
    auto_selectable = True

    def missing(self, profile: Profile) -> List[str]:
        """Names of profile fields this formula needs but the profile lacks."""
        return []

    def eligible(self, profile: Profile, training_age: Optional[TrainingAge]) -> bool:
        return self.auto_selectable and not self.missing(profile)

    def compute(self, profile: Profile) -> float:
        raise NotImplementedError


class KatchMcArdle(BMRStrategy):
    formula = BMRFormula.KATCH_MCARDLE
    label = "Katch-McArdle"
    accuracy = "±5%"
    confidence = Confidence.HIGH

    def missing(self, profile):
        return [] if profile.body_fat_percent is not None else ["body_fat_percent"]

    def eligible(self, profile, training_age):
        return profile.body_fat_percent is not None and profile.body_fat_method in LAB_METHODS

    def compute(self, profile):
        return 370 + 21.6 * lean_mass_kg(profile.weight_kg, profile.body_fat_percent)


class Cunningham(BMRStrategy):
    formula = BMRFormula.CUNNINGHAM
    label = "Cunningham"
    accuracy = "±7%"
    confidence = Confidence.HIGH

    def missing(self, profile):
        return [] if profile.body_fat_percent is not None else ["body_fat_percent"]

    def eligible(self, profile, training_age):
        return (
            profile.body_fat_percent is not None
            and profile.body_fat_method in FIELD_METHODS
            and profile.body_fat_percent < ATHLETE_BODY_FAT_LIMIT[profile.sex]
            and training_age is not None
            and training_age.level in ATHLETE_LEVELS
        )

    def compute(self, profile):
        return 500 + 22 * lean_mass_kg(profile.weight_kg, profile.body_fat_percent)


class Oxford(BMRStrategy):
    """Henry (2005) Oxford equations, weight in kg and height in m."""

    formula = BMRFormula.OXFORD
    label = "Oxford (Henry)"
    accuracy = "±9%"
    confidence = Confidence.MEDIUM

    # age band lower bound -> (male (w, h, c), female (w, h, c))
    BANDS = (
        (60, (11.4, 541, -256), (8.52, 421, 10.7)),
        (30, (11.4, 541, -137), (8.18, 502, -11.6)),
        (0, (14.4, 313, 113), (10.4, 615, -282)),
    )

    def eligible(self, profile, training_age):
        return profile.age >= 60

    def compute(self, profile):
        weight = profile.weight_kg
        height_m = profile.height_cm / 100
        for lower, male, female in self.BANDS:
            if profile.age >= lower:
                m = male[0] * weight + male[1] * height_m + male[2]
                f = female[0] * weight + female[1] * height_m + female[2]
                return _by_sex(profile.sex, m, f)
        raise AssertionError("unreachable: age bands cover every age")


class MifflinStJeor(BMRStrategy):
    formula = BMRFormula.MIFFLIN_ST_JEOR
    label = "Mifflin-St Jeor"
    accuracy = "±10%"
    confidence = Confidence.MEDIUM

    SEX_CONSTANT = {Sex.MALE: 5, Sex.FEMALE: -161, Sex.OTHER: -78}

    def compute(self, profile):
        return (
            10 * profile.weight_kg
            + 6.25 * profile.height_cm
            - 5 * profile.age
            + self.SEX_CONSTANT[profile.sex]
        )


class HarrisBenedict(BMRStrategy):
    """Revised Harris-Benedict (Roza & Shizgal, 1984). Override only."""

    formula = BMRFormula.HARRIS_BENEDICT
    label = "Harris-Benedict (revised)"
    accuracy = "±10-15%"
    confidence = Confidence.LOW
    auto_selectable = False

    def compute(self, profile):
        w, h, a = profile.weight_kg, profile.height_cm, profile.age
        male = 88.362 + 13.397 * w + 4.799 * h - 5.677 * a
        female = 447.593 + 9.247 * w + 3.098 * h - 4.330 * a
        return _by_sex(profile.sex, male, female)


AUTO_SELECTION_ORDER = (KatchMcArdle(), Cunningham(), Oxford(), MifflinStJeor())
STRATEGIES = {s.formula: s for s in AUTO_SELECTION_ORDER + (HarrisBenedict(),)}


class BMRCalculator:
    """Selects and applies a BMR formula."""

    def select(
        self,
        profile: Profile,
        training_age: Optional[TrainingAge] = None,
        override: Optional[BMRFormula] = None,
    ) -> BMRStrategy:
        """Pick the strategy for a profile.

        Raises:
            MissingPrerequisiteError: If `override` names a formula whose
                inputs are missing from the profile.
        """
        if override is not None:
            strategy = STRATEGIES[BMRFormula(override)]
            missing = strategy.missing(profile)
            if missing:
                raise MissingPrerequisiteError(strategy.label, missing)
            return strategy
        for strategy in AUTO_SELECTION_ORDER:
            if strategy.eligible(profile, training_age):
                return strategy
        raise AssertionError("Mifflin-St Jeor is always eligible")

    def calculate(
        self,
        profile: Profile,
        context: Optional[ContextResult] = None,
        training_age: Optional[TrainingAge] = None,
        override: Optional[BMRFormula] = None,
    ) -> CalculationResult[int]:
        """Calculate BMR in kcal/day.

        Args:
            profile: Range-checked input profile.
            context: Detected context. None of the formulas depend on
                climate or population; accepted for a uniform call shape.
            training_age: Corroborated training age, used for athlete
                formula eligibility.
            override: Formula to force; defaults to the profile override.

        Returns:
            `CalculationResult[int]` naming the formula and its accuracy band.
        """
        override = override if override is not None else profile.overrides.bmr_formula
        strategy = self.select(profile, training_age, override)
        bmr = round_int(strategy.compute(profile))

        if override is not None:
            why = "selected manually"
        elif strategy.formula == BMRFormula.KATCH_MCARDLE:
            why = f"lab-measured body fat ({profile.body_fat_method.value}) allows a lean-mass formula"
        elif strategy.formula == BMRFormula.CUNNINGHAM:
            why = "lean, trained athlete with measured body fat"
        elif strategy.formula == BMRFormula.OXFORD:
            why = "age 60 or over"
        else:
            why = "default for profiles without lab-measured body fat"
        reasoning = f"{strategy.label} formula ({strategy.accuracy} accuracy): {why}."

        logger.debug("BMR %s kcal via %s", bmr, strategy.formula.value)
        return CalculationResult[int](
            value=bmr,
            formula_or_method=strategy.formula.value,
            confidence=strategy.confidence,
            reasoning=reasoning,
        )


bmr_calculator = BMRCalculator()
__all__ = [
    "BMRStrategy",
    "KatchMcArdle",
    "Cunningham",
    "Oxford",
    "MifflinStJeor",
    "HarrisBenedict",
    "AUTO_SELECTION_ORDER",
    "STRATEGIES",
    "BMRCalculator",
    "bmr_calculator",
    "lean_mass_kg",
]
