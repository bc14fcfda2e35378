"""Pydantic schema package for profiles, calculation results and requests."""

from .profile_schema import (
    Sex,
    BodyFatMethod,
    DietType,
    Goal,
    ActivityLevel,
    ClimateType,
    PopulationType,
    Confidence,
    ContextSource,
    TrainingLevel,
    Severity,
    BMRFormula,
    MacroStrategy,
    ReproductiveStatus,
    CyclePhase,
    CalculationOverrides,
    Profile,
)
from .result_schema import (
    CalculationResult,
    ContextResult,
    TrainingAge,
    ValidationResult,
    FatLossValidation,
    MacroDistribution,
    BMIResult,
    MuscleGainLimits,
    HeartRateZones,
    VO2MaxEstimate,
    HealthScore,
    ScoreComponent,
    PopulationAdjustment,
    CalculationBundle,
)
from .request_schema import (
    FatLossRequest,
    MuscleGainRequest,
    HeartRateRequest,
    FatLossPlanResponse,
    MuscleGainResponse,
    HeartRateResponse,
    SnapshotResponse,
    SnapshotListResponse,
)

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
    "CalculationResult",
    "ContextResult",
    "TrainingAge",
    "ValidationResult",
    "FatLossValidation",
    "MacroDistribution",
    "BMIResult",
    "MuscleGainLimits",
    "HeartRateZones",
    "VO2MaxEstimate",
    "HealthScore",
    "ScoreComponent",
    "PopulationAdjustment",
    "CalculationBundle",
    "FatLossRequest",
    "MuscleGainRequest",
    "HeartRateRequest",
    "FatLossPlanResponse",
    "MuscleGainResponse",
    "HeartRateResponse",
    "SnapshotResponse",
    "SnapshotListResponse",
]
