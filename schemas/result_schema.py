"""Output schemas produced by the calculators and the engine facade.

Every numeric output travels inside a `CalculationResult` so the formula,
confidence and reasoning behind it are always available to the caller.
"""

from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from schemas.profile_schema import (
    ClimateType,
    Confidence,
    ContextSource,
    CyclePhase,
    MacroStrategy,
    PopulationType,
    Severity,
    Sex,
    TrainingLevel,
)

T = TypeVar("T")


class CalculationResult(BaseModel, Generic[T]):
    """A value together with the method, confidence and reasoning behind it."""

    model_config = ConfigDict(frozen=True)

    value: T
    formula_or_method: str
    confidence: Confidence
    reasoning: str


class ContextResult(BaseModel):
    """Climate and population context derived for a single call.

    `confidence` is the lower of the climate and population confidences and
    `source` is where the climate came from.
    """

    model_config = ConfigDict(frozen=True)

    climate_type: ClimateType
    population_type: PopulationType
    confidence: Confidence
    source: ContextSource
    climate_confidence: Confidence
    population_confidence: Confidence
    population_source: ContextSource
    altitude_m: Optional[float] = None
    degraded: bool = False
    notes: List[str] = Field(default_factory=list)


class TrainingAge(BaseModel):
    model_config = ConfigDict(frozen=True)

    years: float
    claimed_years: float
    level: TrainingLevel
    confidence: Confidence
    corroboration_adjustment: float = 0.0
    performance_score: Optional[float] = None
    workout_frequency: Optional[int] = None
    reasoning: str = ""


class ValidationResult(BaseModel):
    """Tiered goal validation outcome.

    `valid` stays true for every physically possible goal; only `severity`
    escalates. Blocking is left to the caller.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool = True
    severity: Severity
    message: str
    suggested_timeline_weeks: Optional[int] = None
    suggested_amount: Optional[float] = None
    recommendations: List[str] = Field(default_factory=list)


class FatLossValidation(ValidationResult):
    weekly_rate: float
    daily_deficit: int
    max_deficit: int
    min_calories: int
    recommended_calories: Optional[int] = None
    max_weekly_loss_kg: Optional[float] = None


class SafeDeficit(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_deficit: int
    max_deficit: int
    recommended_deficit: int


class TimelineWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_weeks: int
    optimal_weeks: int
    max_weeks: int


class ProteinRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    minimum: int
    optimal: int
    maximum: int


class RefeedSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    needs_refeeds: bool
    refeed_frequency: Optional[str] = None
    needs_diet_break: bool
    diet_break_week: Optional[int] = None
    explanation: List[str] = Field(default_factory=list)


class MacroDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    protein_g: float
    carbs_g: float
    fat_g: float
    calories: int
    strategy_name: MacroStrategy
    reasoning: str


class MacroCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    calculated_calories: float
    difference: float
    issues: List[str] = Field(default_factory=list)


class BMICategory(str, Enum):
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"

    @property
    def rank(self) -> int:
        return ["underweight", "normal", "overweight", "obese"].index(self.value)


class HealthRisk(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class BMICutoffs(BaseModel):
    model_config = ConfigDict(frozen=True)

    underweight: float
    normal_max: float
    overweight: float
    obese: float


class BMIResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    category: BMICategory
    health_risk: HealthRisk
    population_type: PopulationType
    cutoffs: BMICutoffs
    waist_to_height: Optional[float] = None
    waist_to_hip: Optional[float] = None
    athlete_override: bool = False
    message: str = ""
    recommendations: List[str] = Field(default_factory=list)


class WaterBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_ml: float
    activity_ml: float
    climate_ml: float
    altitude_ml: float
    total_ml: int


class MuscleGainLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_kg: float
    yearly_kg: float
    level: TrainingLevel
    sex: Sex
    age_multiplier: float
    reasoning: str


class HeartRateZone(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    low_pct: float
    high_pct: float
    low_bpm: int
    high_bpm: int
    description: str


class HeartRateZones(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_hr: int
    resting_hr: int
    heart_rate_reserve: int
    max_hr_method: str
    resting_hr_measured: bool
    zones: List[HeartRateZone]

    def zone(self, name: str) -> HeartRateZone:
        for item in self.zones:
            if item.name == name:
                return item
        raise KeyError(name)


class TargetHeartRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_bpm: int
    range_low: int
    range_high: int
    zone: str


class RestingHRClassification(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    message: str


class VO2MaxEstimate(BaseModel):
    """VO2 max with its ACSM band.

    `fitness_age` is the age whose median VO2 max for the same sex equals
    this estimate, clamped to 20-80.
    """

    model_config = ConfigDict(frozen=True)

    vo2max: float
    classification: str
    percentile: int
    fitness_age: int


class ScoreComponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    score: int
    max_score: int
    measured: bool


class HealthScore(BaseModel):
    """0-100 score over five dimensions with a letter grade.

    Components without data (`measured=False`) carry a neutral half score
    and never generate recommendations.
    """

    model_config = ConfigDict(frozen=True)

    total_score: int
    grade: str
    rating: str
    components: List[ScoreComponent]
    recommendations: List[str] = Field(default_factory=list)


class PopulationAdjustment(BaseModel):
    """Combined special-population overlay.

    Multipliers compose multiplicatively; caps keep the most restrictive
    value. `None` means no cap applies.
    """

    model_config = ConfigDict(frozen=True)

    bmr_multiplier: float = 1.0
    protein_multiplier: float = 1.0
    calorie_multiplier: float = 1.0
    calorie_floor_bmr_multiple: Optional[float] = None
    calorie_bonus: int = 0
    cycle_calorie_delta: int = 0
    cycle_phase: Optional[CyclePhase] = None
    max_weekly_loss_kg: Optional[float] = None
    deficit_cap: Optional[int] = None
    protein_cap_g_per_kg: Optional[float] = None
    lower_carb_hint: bool = False
    no_deficit: bool = False
    applied: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class CalculationBundle(BaseModel):
    """Everything the engine derives from one profile."""

    model_config = ConfigDict(frozen=True)

    bmr: CalculationResult[int]
    tdee: CalculationResult[int]
    target_calories: CalculationResult[int]
    water_ml: CalculationResult[int]
    bmi: BMIResult
    macros: MacroDistribution
    muscle_gain_limit: MuscleGainLimits
    fat_loss_validation: Optional[FatLossValidation] = None
    muscle_gain_validation: Optional[ValidationResult] = None
    heart_rate_zones: CalculationResult[HeartRateZones]
    vo2max: Optional[CalculationResult[VO2MaxEstimate]] = None
    health_score: Optional[CalculationResult[HealthScore]] = None
    context: ContextResult
    training_age: TrainingAge
    population_adjustment: PopulationAdjustment
    confidence: Confidence
    reasoning: List[str] = Field(default_factory=list)


__all__ = [
    "CalculationResult",
    "ContextResult",
    "TrainingAge",
    "ValidationResult",
    "FatLossValidation",
    "SafeDeficit",
    "TimelineWindow",
    "ProteinRange",
    "RefeedSchedule",
    "MacroDistribution",
    "MacroCheck",
    "BMICategory",
    "HealthRisk",
    "BMICutoffs",
    "BMIResult",
    "WaterBreakdown",
    "MuscleGainLimits",
    "HeartRateZone",
    "HeartRateZones",
    "TargetHeartRate",
    "RestingHRClassification",
    "VO2MaxEstimate",
    "ScoreComponent",
    "HealthScore",
    "PopulationAdjustment",
    "CalculationBundle",
]
