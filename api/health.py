"""Health calculation API router.

Exposes the full calculation bundle and the standalone goal validators.
Nothing here touches the database; see `api.snapshots` for persistence.
"""

from fastapi import APIRouter

from core.logger import get_logger
from schemas.profile_schema import ActivityLevel, ClimateType, Profile
from schemas.request_schema import (
    FatLossPlanResponse,
    FatLossRequest,
    HeartRateRequest,
    HeartRateResponse,
    MuscleGainRequest,
    MuscleGainResponse,
)
from schemas.result_schema import CalculationBundle
from services.climate_adjuster import climate_adjuster
from services.fat_loss_validator import fat_loss_validator
from services.health_engine import health_engine
from services.heart_rate import heart_rate_calculator
from services.input_validation import check_positive, MAX_WEIGHT_KG
from services.muscle_gain_limiter import muscle_gain_limiter

logger = get_logger("api.health")
router = APIRouter(prefix="/api/health", tags=["health"])


@router.post("/calculate", response_model=CalculationBundle)
def calculate(profile: Profile):
    """Run every calculator for a profile.

    Raises:
        InputRangeError: 422 when a profile value is physically out of range.
        MissingPrerequisiteError: 400 when a BMR override lacks its inputs.
    """
    return health_engine.calculate_all(profile)


@router.post("/validate/fat-loss", response_model=FatLossPlanResponse)
def validate_fat_loss(payload: FatLossRequest):
    """Tier a fat-loss goal and attach the timeline window.

    When TDEE is supplied the safe deficit range and the refeed schedule are
    included as well.
    """
    validation = fat_loss_validator.validate_rate(
        payload.current_weight_kg,
        payload.target_weight_kg,
        payload.timeline_weeks,
        payload.bmr,
        payload.bmi,
        payload.sex,
        tdee=payload.tdee,
    )
    timeline = fat_loss_validator.timeline_window(payload.current_weight_kg, payload.target_weight_kg, payload.bmi)

    safe_deficit = None
    refeed_schedule = None
    if payload.tdee is not None:
        safe_deficit = fat_loss_validator.safe_deficit(
            payload.bmi, payload.tdee, payload.activity_level or ActivityLevel.MODERATE
        )
        planned_deficit = min(validation.daily_deficit, validation.max_deficit)
        refeed_schedule = fat_loss_validator.refeed_schedule(payload.timeline_weeks, planned_deficit / payload.tdee)

    logger.info("Fat-loss validation: %.2f kg/week -> %s", validation.weekly_rate, validation.severity.value)
    return FatLossPlanResponse(
        validation=validation,
        timeline=timeline,
        safe_deficit=safe_deficit,
        refeed_schedule=refeed_schedule,
    )


@router.post("/validate/muscle-gain", response_model=MuscleGainResponse)
def validate_muscle_gain(payload: MuscleGainRequest):
    """Tier a muscle-gain goal against the natural monthly limit."""
    limits = muscle_gain_limiter.max_monthly_gain_kg(payload.training_level, payload.age, payload.sex)
    validation = muscle_gain_limiter.validate_goal(payload.target_kg, payload.timeline_months, limits)
    logger.info("Muscle-gain validation: %s kg in %s months -> %s", payload.target_kg, payload.timeline_months, validation.severity.value)
    return MuscleGainResponse(validation=validation, limits=limits)


@router.post("/heart-rate-zones", response_model=HeartRateResponse)
def heart_rate_zones(payload: HeartRateRequest):
    zones = heart_rate_calculator.zones(payload.age, payload.sex, payload.resting_hr, payload.max_hr)
    classification = None
    if payload.resting_hr is not None:
        classification = heart_rate_calculator.classify_resting_hr(payload.resting_hr, payload.sex)
    return HeartRateResponse(zones=zones, resting_classification=classification)


@router.get("/hydration/{climate}")
def hydration(climate: ClimateType, weight_kg: float, activity_level: ActivityLevel = ActivityLevel.MODERATE):
    """Water target breakdown and hydration tips for a climate."""
    check_positive("weight_kg", weight_kg, MAX_WEIGHT_KG)
    breakdown = climate_adjuster.water_breakdown(weight_kg, activity_level, climate)
    return {
        "climate": climate.value,
        "water_ml": breakdown.total_ml,
        "breakdown": breakdown.model_dump(),
        "tips": climate_adjuster.hydration_tips(climate),
    }
