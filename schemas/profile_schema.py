"""Input schemas: enumerations, calculation overrides and the user Profile."""

import hashlib
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class BodyFatMethod(str, Enum):
    DEXA = "dexa"
    BODPOD = "bodpod"
    HYDROSTATIC = "hydrostatic"
    CALIPERS = "calipers"
    BIOIMPEDANCE = "bioimpedance"
    VISUAL = "visual"
    AI = "ai"


class DietType(str, Enum):
    OMNIVORE = "omnivore"
    NON_VEG = "non_veg"
    PESCATARIAN = "pescatarian"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    KETO = "keto"
    LOW_CARB = "low_carb"
    PALEO = "paleo"
    MEDITERRANEAN = "mediterranean"


class Goal(str, Enum):
    FAT_LOSS = "fat_loss"
    MUSCLE_GAIN = "muscle_gain"
    MAINTENANCE = "maintenance"
    ATHLETIC = "athletic"
    STRENGTH = "strength"
    ENDURANCE = "endurance"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    EXTREME = "extreme"


class ClimateType(str, Enum):
    TROPICAL = "tropical"
    TEMPERATE = "temperate"
    COLD = "cold"
    ARID = "arid"
    HIGHLAND = "highland"


class PopulationType(str, Enum):
    SOUTH_ASIAN = "south_asian"
    EAST_ASIAN = "east_asian"
    SOUTHEAST_ASIAN = "southeast_asian"
    CAUCASIAN = "caucasian"
    BLACK_AFRICAN = "black_african"
    HISPANIC = "hispanic"
    MIDDLE_EASTERN = "middle_eastern"
    PACIFIC_ISLANDER = "pacific_islander"
    MIXED = "mixed"
    GENERAL = "general"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"low": 0, "medium": 1, "high": 2}[self.value]

    @classmethod
    def lowest(cls, *levels: "Confidence") -> "Confidence":
        """Return the least certain of the given confidence levels."""
        return min(levels, key=lambda level: level.rank)


class ContextSource(str, Enum):
    GPS = "gps"
    PROFILE = "profile"
    IP = "ip"
    DEFAULT = "default"


class TrainingLevel(str, Enum):
    NOVICE = "novice"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ELITE = "elite"


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return ["success", "info", "warning", "error"].index(self.value)


class BMRFormula(str, Enum):
    MIFFLIN_ST_JEOR = "mifflin_st_jeor"
    KATCH_MCARDLE = "katch_mcardle"
    CUNNINGHAM = "cunningham"
    HARRIS_BENEDICT = "harris_benedict"
    OXFORD = "oxford"


class MacroStrategy(str, Enum):
    BALANCED = "balanced"
    HIGH_PROTEIN = "high_protein"
    KETO = "keto"
    LOW_CARB = "low_carb"
    MEDITERRANEAN = "mediterranean"


class ReproductiveStatus(str, Enum):
    NONE = "none"
    PREGNANT = "pregnant"
    LACTATING = "lactating"


class CyclePhase(str, Enum):
    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATORY = "ovulatory"
    LUTEAL = "luteal"


class CalculationOverrides(BaseModel):
    """Explicit choices that short-circuit auto-detection or auto-selection.

    Overrides never bypass input-range validation.
    """

    model_config = ConfigDict(frozen=True)

    bmr_formula: Optional[BMRFormula] = Field(default=None, examples=["katch_mcardle"], description="Force a BMR formula")
    population_type: Optional[PopulationType] = Field(default=None, examples=["south_asian"], description="Population group for BMI cutoffs")
    climate_type: Optional[ClimateType] = Field(default=None, examples=["tropical"], description="Climate zone for TDEE and water")
    macro_strategy: Optional[MacroStrategy] = Field(default=None, examples=["high_protein"], description="Macro distribution strategy")


class Profile(BaseModel):
    """Physiological profile of a user; immutable for the duration of a call.

    Only sex, age, weight and height are required. Numeric ranges are checked
    by `services.input_validation` so that out-of-range values surface as
    `InputRangeError` with field-level details.
    """

    model_config = ConfigDict(frozen=True)

    sex: Sex = Field(..., examples=["male"], description="Biological sex: male, female, other")
    age: int = Field(..., examples=[30], description="Age in years (13-120)")
    weight_kg: float = Field(..., examples=[80.0], description="Body weight in kilograms")
    height_cm: float = Field(..., examples=[180.0], description="Height in centimeters")

    body_fat_percent: Optional[float] = Field(default=None, examples=[18.0], description="Body fat percentage")
    body_fat_method: Optional[BodyFatMethod] = Field(default=None, examples=["dexa"], description="How body fat was measured")
    waist_cm: Optional[float] = Field(default=None, examples=[84.0], description="Waist circumference in centimeters")
    hip_cm: Optional[float] = Field(default=None, examples=[98.0], description="Hip circumference in centimeters")

    country_code: Optional[str] = Field(default=None, examples=["IN"], description="ISO 3166-1 alpha-2 country code")
    state_code: Optional[str] = Field(default=None, examples=["KL"], description="State or province code")
    latitude: Optional[float] = Field(default=None, examples=[9.93], description="GPS latitude")
    longitude: Optional[float] = Field(default=None, examples=[76.26], description="GPS longitude")
    ip_country_code: Optional[str] = Field(default=None, examples=["IN"], description="Country inferred from the request IP")

    diet_type: DietType = Field(default=DietType.OMNIVORE, examples=["vegetarian"], description="Diet type")
    goal: Goal = Field(default=Goal.MAINTENANCE, examples=["fat_loss"], description="Primary goal")
    activity_level: Optional[ActivityLevel] = Field(default=None, examples=["moderate"], description="Activity level; inferred from workout frequency when absent")

    training_years: float = Field(default=0.0, examples=[2.0], description="Self-reported years of training")
    workout_frequency: Optional[int] = Field(default=None, examples=[4], description="Workouts per week")
    pushups: Optional[int] = Field(default=None, examples=[25], description="Max consecutive push-ups")
    run_minutes: Optional[float] = Field(default=None, examples=[20.0], description="Continuous running minutes")

    medical_conditions: Tuple[str, ...] = Field(default=(), examples=[["pcos"]], description="Medical condition tags")
    reproductive_status: ReproductiveStatus = Field(default=ReproductiveStatus.NONE, examples=["pregnant"], description="Pregnancy or lactation status")
    trimester: Optional[int] = Field(default=None, examples=[2], description="Pregnancy trimester (1-3)")
    cycle_day: Optional[int] = Field(default=None, examples=[18], description="Current day of the menstrual cycle")
    cycle_length_days: int = Field(default=28, examples=[28], description="Menstrual cycle length in days")

    resting_hr: Optional[int] = Field(default=None, examples=[62], description="Measured resting heart rate (bpm)")
    max_hr: Optional[int] = Field(default=None, examples=[188], description="Measured maximum heart rate (bpm)")

    water_intake_ml: Optional[float] = Field(default=None, examples=[2200.0], description="Tracked daily water intake (ml)")
    protein_intake_g: Optional[float] = Field(default=None, examples=[120.0], description="Tracked daily protein intake (g)")

    target_weight_kg: Optional[float] = Field(default=None, examples=[72.0], description="Fat-loss target weight")
    timeline_weeks: Optional[float] = Field(default=None, examples=[12], description="Fat-loss timeline in weeks")
    target_muscle_gain_kg: Optional[float] = Field(default=None, examples=[3.0], description="Muscle-gain target in kilograms")
    timeline_months: Optional[float] = Field(default=None, examples=[6], description="Muscle-gain timeline in months")

    overrides: CalculationOverrides = Field(default_factory=CalculationOverrides, description="Manual overrides")

    def profile_hash(self) -> str:
        """Stable hash of every field, used as a memo and snapshot key."""
        payload = self.model_dump_json(exclude_none=False)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


__all__ = [
    "Sex",
    "BodyFatMethod",
    "DietType",
    "Goal",
    "ActivityLevel",
    "ClimateType",
    "PopulationType",
    "Confidence",
    "ContextSource",
    "TrainingLevel",
    "Severity",
    "BMRFormula",
    "MacroStrategy",
    "ReproductiveStatus",
    "CyclePhase",
    "CalculationOverrides",
    "Profile",
]
