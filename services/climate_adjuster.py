"""Climate and altitude adjustments for energy expenditure and water intake."""

from typing import Dict, List, Optional

from core.logger import get_logger
from core.rounding import round_int
from schemas.profile_schema import ActivityLevel, ClimateType, Confidence
from schemas.result_schema import CalculationResult, WaterBreakdown

logger = get_logger("services.climate_adjuster")

ACTIVITY_MULTIPLIERS: Dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.EXTREME: 1.9,
}

CLIMATE_TDEE_MULTIPLIERS: Dict[ClimateType, float] = {
    ClimateType.TROPICAL: 1.075,
    ClimateType.TEMPERATE: 1.0,
    ClimateType.COLD: 1.15,
    ClimateType.ARID: 1.05,
    ClimateType.HIGHLAND: 1.12,
}

WATER_ML_PER_KG = 35

ACTIVITY_WATER_BONUS_ML: Dict[ActivityLevel, int] = {
    ActivityLevel.SEDENTARY: 0,
    ActivityLevel.LIGHT: 500,
    ActivityLevel.MODERATE: 1000,
    ActivityLevel.ACTIVE: 1500,
    ActivityLevel.EXTREME: 2000,
}

CLIMATE_WATER_MULTIPLIERS: Dict[ClimateType, float] = {
    ClimateType.TROPICAL: 1.5,
    ClimateType.TEMPERATE: 1.0,
    ClimateType.COLD: 0.9,
    ClimateType.ARID: 1.7,
    ClimateType.HIGHLAND: 1.3,
}

ALTITUDE_THRESHOLD_M = 2000
ALTITUDE_BONUS_ML_PER_1000M = 200

GENERAL_HYDRATION_TIPS = [
    "Drink water regularly throughout the day",
    "Monitor urine color (pale yellow is ideal)",
    "Increase intake during exercise",
    "Don't wait until you're thirsty",
]

CLIMATE_HYDRATION_TIPS: Dict[ClimateType, List[str]] = {
    ClimateType.TROPICAL: [
        "Drink extra during outdoor activities",
        "Consider electrolyte drinks for prolonged exercise",
        "Pre-hydrate before going outside",
        "Limit caffeine and alcohol in heat",
    ],
    ClimateType.TEMPERATE: [
        "Adjust intake with the seasons",
        "Increase intake during summer months",
    ],
    ClimateType.COLD: [
        "Don't reduce water despite less thirst",
        "Warm beverages count toward hydration",
        "Indoor heating increases water needs",
    ],
    ClimateType.ARID: [
        "Increase intake significantly",
        "Electrolyte replacement is critical",
        "Very low humidity means rapid dehydration risk",
        "Watch closely for signs of dehydration",
    ],
    ClimateType.HIGHLAND: [
        "Faster breathing at altitude increases water loss",
        "Increase intake during the first days at altitude",
        "Watch for altitude sickness symptoms such as headache",
    ],
}


def altitude_bonus_ml(altitude_m: Optional[float]) -> float:
    """Extra water for altitude: 200 mL per 1000 m above 2000 m, pro-rated."""
    if altitude_m is None or altitude_m <= ALTITUDE_THRESHOLD_M:
        return 0.0
    return (altitude_m - ALTITUDE_THRESHOLD_M) / 1000 * ALTITUDE_BONUS_ML_PER_1000M


class ClimateAdjuster:
    """Scales TDEE and water targets by climate zone and altitude."""

    def adjust_tdee(self, bmr: float, activity_multiplier: float, climate: ClimateType) -> float:
        return bmr * activity_multiplier * CLIMATE_TDEE_MULTIPLIERS[climate]

    def tdee(
        self,
        bmr: float,
        activity_level: ActivityLevel,
        climate: ClimateType,
        confidence: Confidence = Confidence.MEDIUM,
    ) -> CalculationResult[int]:
        """TDEE in kcal/day from BMR, activity level and climate.

        Args:
            bmr: Basal metabolic rate.
            activity_level: Activity level for the multiplier.
            climate: Climate zone.
            confidence: Confidence to report, normally the lower of the BMR
                and context confidences.
        """
        activity_multiplier = ACTIVITY_MULTIPLIERS[activity_level]
        climate_multiplier = CLIMATE_TDEE_MULTIPLIERS[climate]
        value = round_int(self.adjust_tdee(bmr, activity_multiplier, climate))
        reasoning = (
            f"BMR {bmr:.0f} x {activity_multiplier} ({activity_level.value} activity)"
            f" x {climate_multiplier} ({climate.value} climate) = {value} kcal/day."
        )
        logger.debug("TDEE %s kcal", value)
        return CalculationResult[int](
            value=value,
            formula_or_method="activity_multiplier",
            confidence=confidence,
            reasoning=reasoning,
        )

    def water_breakdown(
        self,
        weight_kg: float,
        activity_level: ActivityLevel,
        climate: ClimateType,
        altitude_m: Optional[float] = None,
    ) -> WaterBreakdown:
        """Daily water target split into its components."""
        base = weight_kg * WATER_ML_PER_KG
        activity = ACTIVITY_WATER_BONUS_ML[activity_level]
        climate_adjusted = (base + activity) * CLIMATE_WATER_MULTIPLIERS[climate]
        altitude = altitude_bonus_ml(altitude_m)
        return WaterBreakdown(
            base_ml=base,
            activity_ml=activity,
            climate_ml=climate_adjusted - base - activity,
            altitude_ml=altitude,
            total_ml=round_int(climate_adjusted + altitude),
        )

    def adjust_water(
        self,
        weight_kg: float,
        activity_level: ActivityLevel,
        climate: ClimateType,
        altitude_m: Optional[float] = None,
    ) -> int:
        return self.water_breakdown(weight_kg, activity_level, climate, altitude_m).total_ml

    def water(
        self,
        weight_kg: float,
        activity_level: ActivityLevel,
        climate: ClimateType,
        altitude_m: Optional[float] = None,
        confidence: Confidence = Confidence.MEDIUM,
    ) -> CalculationResult[int]:
        breakdown = self.water_breakdown(weight_kg, activity_level, climate, altitude_m)
        reasoning = (
            f"{WATER_ML_PER_KG} mL/kg x {weight_kg:g} kg + {breakdown.activity_ml:.0f} mL for "
            f"{activity_level.value} activity, x {CLIMATE_WATER_MULTIPLIERS[climate]} for {climate.value} climate"
        )
        if breakdown.altitude_ml:
            reasoning += f", + {breakdown.altitude_ml:.0f} mL for altitude"
        reasoning += f" = {breakdown.total_ml} mL/day."
        return CalculationResult[int](
            value=breakdown.total_ml,
            formula_or_method="weight_activity_climate",
            confidence=confidence,
            reasoning=reasoning,
        )

    def hydration_tips(self, climate: ClimateType) -> List[str]:
        return GENERAL_HYDRATION_TIPS + CLIMATE_HYDRATION_TIPS[climate]


climate_adjuster = ClimateAdjuster()
__all__ = [
    "ClimateAdjuster",
    "climate_adjuster",
    "ACTIVITY_MULTIPLIERS",
    "CLIMATE_TDEE_MULTIPLIERS",
    "CLIMATE_WATER_MULTIPLIERS",
    "ACTIVITY_WATER_BONUS_ML",
    "altitude_bonus_ml",
]
