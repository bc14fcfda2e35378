"""Heart-rate training zones using the Karvonen (heart-rate reserve) method.

Max HR priority: measured value, then Gulati (206 - 0.88 x age) for women,
then Tanaka (208 - 0.7 x age) for everyone else.
"""

from typing import Optional, Tuple

from core.exceptions import InputRangeError
from core.logger import get_logger
from core.rounding import round_int
from schemas.profile_schema import Confidence, Sex
from schemas.result_schema import (
    CalculationResult,
    HeartRateZone,
    HeartRateZones,
    RestingHRClassification,
    TargetHeartRate,
)
from services.input_validation import check_age, check_between, check_heart_rates

logger = get_logger("services.heart_rate")

DEFAULT_RESTING_HR = {Sex.MALE: 70, Sex.FEMALE: 75, Sex.OTHER: 70}

# name, low fraction of HRR, high fraction of HRR, purpose
ZONES = (
    ("Recovery", 0.5, 0.6, "Active recovery and warm-up"),
    ("Aerobic", 0.6, 0.7, "Steady cardio and aerobic base"),
    ("Tempo", 0.7, 0.8, "Tempo work at moderate-hard intensity"),
    ("Threshold", 0.8, 0.9, "Intervals and lactate-threshold efforts"),
    ("VO2 Max", 0.9, 1.0, "Maximal intervals and sprints; short durations only"),
)

# upper bounds for Excellent, Good, Average, Below Average; anything above is Poor
RESTING_HR_BANDS = {
    Sex.MALE: (55, 60, 70, 78),
    Sex.FEMALE: (60, 65, 75, 82),
    Sex.OTHER: (57.5, 62.5, 72.5, 80),
}
RESTING_HR_LABELS = (
    ("Excellent", "Athletic resting heart rate"),
    ("Good", "Above-average fitness"),
    ("Average", "Normal resting heart rate"),
    ("Below Average", "Higher than ideal; regular cardio will help"),
    ("Poor", "Elevated resting heart rate; consider a medical check-up"),
)


def max_heart_rate(age: int, sex: Sex, measured_max_hr: Optional[int] = None) -> Tuple[int, str]:
    """Max HR and the method used to get it."""
    if measured_max_hr is not None:
        return measured_max_hr, "measured"
    if sex == Sex.FEMALE:
        return round_int(206 - 0.88 * age), "gulati"
    return round_int(208 - 0.7 * age), "tanaka"


def _resting_and_reserve(max_hr: int, method: str, resting_hr: Optional[int], sex: Sex) -> Tuple[int, int]:
    """Resting HR (measured or default) and the heart-rate reserve.

    Raises:
        InputRangeError: If resting HR is not below max HR, which would
            invert the zones.
    """
    resting = resting_hr if resting_hr is not None else DEFAULT_RESTING_HR[sex]
    if resting >= max_hr:
        raise InputRangeError(
            "resting_hr", resting, maximum=max_hr - 1,
            message=f"resting_hr must be below the {method} max HR of {max_hr} bpm. Received: {resting}",
        )
    return resting, max_hr - resting


def zone_name_for_intensity(intensity_pct: float) -> str:
    for name, _, high, _ in ZONES:
        if intensity_pct < high * 100:
            return name
    return ZONES[-1][0]


class HeartRateZoneCalculator:
    """Derives max HR and the five Karvonen training zones."""

    def zones(
        self,
        age: int,
        sex: Sex,
        resting_hr: Optional[int] = None,
        measured_max_hr: Optional[int] = None,
    ) -> CalculationResult[HeartRateZones]:
        """Compute heart-rate training zones.

        Args:
            age: Age in years.
            sex: Biological sex; selects the max-HR formula and default
                resting HR.
            resting_hr: Measured resting HR; defaults to 70 (male/other) or 75
                (female).
            measured_max_hr: Measured max HR; always preferred.

        Returns:
            `CalculationResult[HeartRateZones]`. Confidence is high with a
            measured max HR, medium with only a measured resting HR and low
            when both are estimated.

        Raises:
            InputRangeError: On out-of-range inputs, or a resting HR at or above
                the (possibly estimated) max HR.
        """
        check_age(age)
        check_heart_rates(resting_hr, measured_max_hr)

        max_hr, method = max_heart_rate(age, sex, measured_max_hr)
        resting, reserve = _resting_and_reserve(max_hr, method, resting_hr, sex)

        zones = [
            HeartRateZone(
                name=name,
                low_pct=low,
                high_pct=high,
                low_bpm=round_int(resting + reserve * low),
                high_bpm=round_int(resting + reserve * high),
                description=description,
            )
            for name, low, high, description in ZONES
        ]
        value = HeartRateZones(
            max_hr=max_hr,
            resting_hr=resting,
            heart_rate_reserve=reserve,
            max_hr_method=method,
            resting_hr_measured=resting_hr is not None,
            zones=zones,
        )

        if measured_max_hr is not None:
            confidence = Confidence.HIGH
        elif resting_hr is not None:
            confidence = Confidence.MEDIUM
        else:
            confidence = Confidence.LOW
        formula = {"measured": "measured max HR", "gulati": "Gulati (206 - 0.88 x age)", "tanaka": "Tanaka (208 - 0.7 x age)"}[method]
        reasoning = (
            f"Max HR {max_hr} bpm from {formula}; resting HR {resting} bpm "
            f"({'measured' if resting_hr is not None else 'default'}); "
            f"zones use the Karvonen heart-rate reserve of {reserve} bpm."
        )
        logger.debug("HR zones: max=%s (%s) resting=%s", max_hr, method, resting)
        return CalculationResult[HeartRateZones](
            value=value,
            formula_or_method=f"karvonen_{method}",
            confidence=confidence,
            reasoning=reasoning,
        )

    def target_heart_rate(
        self,
        age: int,
        sex: Sex,
        intensity_pct: float,
        resting_hr: Optional[int] = None,
        measured_max_hr: Optional[int] = None,
    ) -> TargetHeartRate:
        """Target HR for a given percentage of heart-rate reserve, with a ±5% range."""
        check_age(age)
        check_heart_rates(resting_hr, measured_max_hr)
        check_between("intensity_pct", intensity_pct, 0, 100)
        max_hr, method = max_heart_rate(age, sex, measured_max_hr)
        resting, reserve = _resting_and_reserve(max_hr, method, resting_hr, sex)
        return TargetHeartRate(
            target_bpm=round_int(resting + reserve * intensity_pct / 100),
            range_low=round_int(resting + reserve * (intensity_pct - 5) / 100),
            range_high=round_int(resting + reserve * (intensity_pct + 5) / 100),
            zone=zone_name_for_intensity(intensity_pct),
        )

    def classify_resting_hr(self, resting_hr: int, sex: Sex) -> RestingHRClassification:
        check_heart_rates(resting_hr, None)
        for bound, (category, message) in zip(RESTING_HR_BANDS[sex], RESTING_HR_LABELS):
            if resting_hr < bound:
                return RestingHRClassification(category=category, message=message)
        category, message = RESTING_HR_LABELS[-1]
        return RestingHRClassification(category=category, message=message)


heart_rate_calculator = HeartRateZoneCalculator()
__all__ = [
    "HeartRateZoneCalculator",
    "heart_rate_calculator",
    "max_heart_rate",
    "zone_name_for_intensity",
    "ZONES",
]
