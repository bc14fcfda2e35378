"""Physical range checks for profile inputs.

These are the only checks that make a calculation fail outright. Anything
that passes here is handled by degrading confidence or escalating severity.
"""

import math
from typing import Optional

from core.exceptions import InputRangeError
from core.logger import get_logger
from schemas.profile_schema import Profile, ReproductiveStatus, Sex

logger = get_logger("services.input_validation")

AGE_RANGE = (13, 120)
MAX_WEIGHT_KG = 500.0
MAX_HEIGHT_CM = 275.0
MAX_BODY_FAT = 75.0
MAX_CIRCUMFERENCE_CM = 300.0
RESTING_HR_RANGE = (25, 120)
MAX_HR_RANGE = (100, 230)
MAX_TRAINING_YEARS = 80.0
MAX_WATER_INTAKE_ML = 20000.0
MAX_PROTEIN_INTAKE_G = 1000.0


def check_finite(field: str, value: float) -> None:
    if value is None or not math.isfinite(value):
        raise InputRangeError(field, value, message=f"{field} must be a finite number. Received: {value}")


def check_between(field: str, value: float, minimum: float, maximum: float) -> None:
    """Raise `InputRangeError` unless minimum <= value <= maximum."""
    check_finite(field, value)
    if value < minimum or value > maximum:
        raise InputRangeError(field, value, minimum, maximum)


def check_positive(field: str, value: float, maximum: Optional[float] = None) -> None:
    """Raise `InputRangeError` unless 0 < value (<= maximum when given)."""
    check_finite(field, value)
    if value <= 0 or (maximum is not None and value > maximum):
        if maximum is None:
            raise InputRangeError(field, value, minimum=0)
        raise InputRangeError(
            field, value, 0, maximum,
            message=f"{field} must be greater than 0 and at most {maximum}. Received: {value}",
        )


def check_body_metrics(weight_kg: float, height_cm: float) -> None:
    check_positive("weight_kg", weight_kg, MAX_WEIGHT_KG)
    check_positive("height_cm", height_cm, MAX_HEIGHT_CM)


def check_age(age: float) -> None:
    check_between("age", age, *AGE_RANGE)


def check_heart_rates(resting_hr: Optional[int], max_hr: Optional[int]) -> None:
    if resting_hr is not None:
        check_between("resting_hr", resting_hr, *RESTING_HR_RANGE)
    if max_hr is not None:
        check_between("max_hr", max_hr, *MAX_HR_RANGE)
        if resting_hr is not None and max_hr <= resting_hr:
            raise InputRangeError(
                "max_hr", max_hr, minimum=resting_hr,
                message=f"max_hr must be greater than resting_hr ({resting_hr}). Received: {max_hr}",
            )


def validate_profile(profile: Profile) -> Profile:
    """Check every supplied profile value against its physical range.

    Args:
        profile: The profile to check.

    Returns:
        The same profile, unchanged.

    Raises:
        InputRangeError: On the first value outside its range.
    """
    check_age(profile.age)
    check_body_metrics(profile.weight_kg, profile.height_cm)

    if profile.body_fat_percent is not None:
        check_finite("body_fat_percent", profile.body_fat_percent)
        if not 0 < profile.body_fat_percent < MAX_BODY_FAT:
            raise InputRangeError("body_fat_percent", profile.body_fat_percent, 0, MAX_BODY_FAT)
    if profile.waist_cm is not None:
        check_positive("waist_cm", profile.waist_cm, MAX_CIRCUMFERENCE_CM)
    if profile.hip_cm is not None:
        check_positive("hip_cm", profile.hip_cm, MAX_CIRCUMFERENCE_CM)

    if profile.latitude is not None:
        check_between("latitude", profile.latitude, -90, 90)
    if profile.longitude is not None:
        check_between("longitude", profile.longitude, -180, 180)

    check_between("training_years", profile.training_years, 0, MAX_TRAINING_YEARS)
    if profile.workout_frequency is not None:
        check_between("workout_frequency", profile.workout_frequency, 0, 14)
    if profile.pushups is not None:
        check_between("pushups", profile.pushups, 0, 1000)
    if profile.run_minutes is not None:
        check_between("run_minutes", profile.run_minutes, 0, 1440)

    check_heart_rates(profile.resting_hr, profile.max_hr)

    if profile.reproductive_status != ReproductiveStatus.NONE and profile.sex == Sex.MALE:
        raise InputRangeError(
            "reproductive_status", profile.reproductive_status.value,
            message=f"reproductive_status '{profile.reproductive_status.value}' is not valid for sex 'male'",
        )
    if profile.reproductive_status == ReproductiveStatus.PREGNANT:
        if profile.trimester is None:
            raise InputRangeError("trimester", None, 1, 3, message="trimester is required when pregnant")
        check_between("trimester", profile.trimester, 1, 3)
    elif profile.trimester is not None:
        raise InputRangeError(
            "trimester", profile.trimester, message="trimester is only valid when reproductive_status is 'pregnant'"
        )
    if profile.cycle_day is not None:
        check_between("cycle_day", profile.cycle_day, 1, 90)
        check_between("cycle_length_days", profile.cycle_length_days, 15, 90)

    if profile.water_intake_ml is not None:
        check_between("water_intake_ml", profile.water_intake_ml, 0, MAX_WATER_INTAKE_ML)
    if profile.protein_intake_g is not None:
        check_between("protein_intake_g", profile.protein_intake_g, 0, MAX_PROTEIN_INTAKE_G)

    if profile.target_weight_kg is not None:
        check_positive("target_weight_kg", profile.target_weight_kg, MAX_WEIGHT_KG)
    if profile.timeline_weeks is not None:
        check_positive("timeline_weeks", profile.timeline_weeks)
    if profile.target_muscle_gain_kg is not None:
        check_between("target_muscle_gain_kg", profile.target_muscle_gain_kg, 0, 100)
    if profile.timeline_months is not None:
        check_positive("timeline_months", profile.timeline_months)

    logger.debug("Profile %s passed range checks", profile.profile_hash()[:12])
    return profile


__all__ = [
    "check_finite",
    "check_between",
    "check_positive",
    "check_body_metrics",
    "check_age",
    "check_heart_rates",
    "validate_profile",
]
