"""Schemas for the standalone validation endpoints and stored snapshots."""

from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.profile_schema import ActivityLevel, Sex, TrainingLevel
from schemas.result_schema import (
    CalculationResult,
    FatLossValidation,
    HeartRateZones,
    MuscleGainLimits,
    RefeedSchedule,
    RestingHRClassification,
    SafeDeficit,
    TimelineWindow,
    ValidationResult,
)


class FatLossRequest(BaseModel):
    """Request payload for validating a fat-loss goal."""

    current_weight_kg: float = Field(..., examples=[90.0], description="Current weight in kilograms")
    target_weight_kg: float = Field(..., examples=[80.0], description="Target weight in kilograms")
    timeline_weeks: float = Field(..., examples=[12], description="Timeline in weeks")
    bmr: float = Field(..., examples=[1850], description="Basal metabolic rate (kcal/day)")
    bmi: float = Field(..., examples=[28.0], description="Current BMI")
    sex: Sex = Field(..., examples=["male"], description="Biological sex")
    tdee: Optional[float] = Field(default=None, examples=[2600], description="TDEE, used for recommended calories")
    activity_level: Optional[ActivityLevel] = Field(default=None, examples=["moderate"], description="Activity level for the safe-deficit factor")


class MuscleGainRequest(BaseModel):
    """Request payload for validating a muscle-gain goal."""

    target_kg: float = Field(..., examples=[4.0], description="Muscle to gain in kilograms")
    timeline_months: float = Field(..., examples=[6], description="Timeline in months")
    training_level: TrainingLevel = Field(..., examples=["intermediate"], description="Training level")
    age: int = Field(..., examples=[28], description="Age in years")
    sex: Sex = Field(..., examples=["male"], description="Biological sex")


class HeartRateRequest(BaseModel):
    """Request payload for heart-rate training zones."""

    age: int = Field(..., examples=[35], description="Age in years")
    sex: Sex = Field(..., examples=["female"], description="Biological sex")
    resting_hr: Optional[int] = Field(default=None, examples=[60], description="Measured resting heart rate")
    max_hr: Optional[int] = Field(default=None, examples=[185], description="Measured maximum heart rate")


class FatLossPlanResponse(BaseModel):
    """Fat-loss validation with the supporting plan."""

    validation: FatLossValidation
    timeline: TimelineWindow
    safe_deficit: Optional[SafeDeficit] = None
    refeed_schedule: Optional[RefeedSchedule] = None


class MuscleGainResponse(BaseModel):
    validation: ValidationResult
    limits: MuscleGainLimits


class HeartRateResponse(BaseModel):
    zones: CalculationResult[HeartRateZones]
    resting_classification: Optional[RestingHRClassification] = None


class SnapshotResponse(BaseModel):
    """A stored calculation bundle."""

    id: int
    profile_hash: str
    bmr: int
    tdee: int
    created_at: str
    profile: dict
    bundle: dict


class SnapshotListResponse(BaseModel):
    snapshots: List[SnapshotResponse]
    total: int


__all__ = [
    "FatLossRequest",
    "MuscleGainRequest",
    "HeartRateRequest",
    "FatLossPlanResponse",
    "MuscleGainResponse",
    "HeartRateResponse",
    "SnapshotResponse",
    "SnapshotListResponse",
]
