"""Special-population overlays: age brackets, pregnancy, lactation,
menstrual cycle and medical conditions.

Each overlay contributes to a single `PopulationAdjustment`. BMR multipliers
compose multiplicatively; deficit, protein and weight-loss caps keep the
most restrictive value.
"""

from typing import Dict, FrozenSet, List, Optional, Tuple

from core.logger import get_logger
from core.rounding import round_int
from schemas.profile_schema import CyclePhase, Goal, Profile, ReproductiveStatus, Sex
from schemas.result_schema import PopulationAdjustment

logger = get_logger("services.special_population")

TEEN_MAX_AGE = 20
ELDERLY_MIN_AGE = 70
ADVANCED_AGE = 75

TRIMESTER_BONUS = {1: 0, 2: 340, 3: 450}
LACTATION_BONUS = 500

CONDITION_ALIASES: Dict[str, FrozenSet[str]] = {
    "hypothyroid": frozenset({"hypothyroid", "hypothyroidism", "underactive_thyroid"}),
    "hyperthyroid": frozenset({"hyperthyroid", "hyperthyroidism", "overactive_thyroid", "graves_disease"}),
    "pcos": frozenset({"pcos", "pcod", "polycystic_ovary_syndrome"}),
    "type_2_diabetes": frozenset({"type_2_diabetes", "type2_diabetes", "diabetes_type_2", "t2d", "diabetes"}),
    "insulin_resistance": frozenset({"insulin_resistance", "prediabetes"}),
    "kidney_disease": frozenset({"kidney_disease", "ckd", "chronic_kidney_disease", "renal_disease"}),
    "hypertension": frozenset({"hypertension", "high_blood_pressure"}),
    "heart_disease": frozenset({"heart_disease", "cardiovascular_disease", "heart_condition", "cad"}),
}

BMR_MULTIPLIERS = {"hypothyroid": 0.93, "hyperthyroid": 1.15}
DEFICIT_CAPS = {"pcos": 750}
PROTEIN_CAPS = {"kidney_disease": 1.0}
LOWER_CARB_CONDITIONS = frozenset({"pcos", "type_2_diabetes", "insulin_resistance"})
CARDIOVASCULAR_CONDITIONS = frozenset({"hypertension", "heart_disease"})

CYCLE_GUIDANCE = {
    CyclePhase.MENSTRUAL: "Lower-intensity training may feel better; prioritize iron-rich foods.",
    CyclePhase.FOLLICULAR: "Rising energy; a good phase for high-intensity and strength work.",
    CyclePhase.OVULATORY: "Peak strength window; warm up thoroughly as joint laxity is higher.",
    CyclePhase.LUTEAL: "Appetite and body temperature rise; favour moderate intensity and steady-state cardio.",
}


def normalize_condition(tag: str) -> Optional[str]:
    """Canonical condition name for a free-form tag, or None if unknown."""
    key = tag.strip().lower().replace("-", "_").replace(" ", "_")
    for name, aliases in CONDITION_ALIASES.items():
        if key in aliases:
            return name
    return None


def cycle_phase(cycle_day: int, cycle_length_days: int = 28) -> Tuple[CyclePhase, int]:
    """Phase and calorie delta for a day of the menstrual cycle.

    Days past the cycle length wrap into the next cycle.
    """
    day = (cycle_day - 1) % cycle_length_days + 1
    if day <= 5:
        return CyclePhase.MENSTRUAL, 0
    if day <= 13:
        return CyclePhase.FOLLICULAR, 0
    if day <= 16:
        return CyclePhase.OVULATORY, 0
    if day <= 21:
        return CyclePhase.LUTEAL, 150
    return CyclePhase.LUTEAL, 300


class SpecialPopulationAdjuster:
    """Builds and applies special-population overlays."""

    def assess(self, profile: Profile) -> PopulationAdjustment:
        """Collect every overlay that applies to a profile.

        Args:
            profile: Range-checked profile.

        Returns:
            The combined `PopulationAdjustment`.
        """
        bmr_multiplier = 1.0
        protein_multiplier = 1.0
        calorie_multiplier = 1.0
        calorie_floor = None
        calorie_bonus = 0
        cycle_delta = 0
        phase = None
        max_loss = None
        deficit_cap = None
        protein_cap = None
        lower_carb = False
        no_deficit = False
        applied: List[str] = []
        notes: List[str] = []
        warnings: List[str] = []

        def tighter(current, value):
            return value if current is None else min(current, value)

        if profile.age < TEEN_MAX_AGE:
            protein_multiplier *= 1.2
            max_loss = tighter(max_loss, 0.5)
            calorie_multiplier *= 1.1
            calorie_floor = 1.3
            applied.append("teen")
            notes.append("Still growing: protein +20%, calories +10% and never below 1.3x BMR.")
            if profile.goal == Goal.FAT_LOSS:
                warnings.append("Weight loss under 20 should stay modest (at most 0.5 kg/week) and ideally be supervised.")
        elif profile.age >= ELDERLY_MIN_AGE:
            protein_multiplier *= 1.3
            max_loss = tighter(max_loss, 0.25)
            applied.append("elderly")
            notes.append("Protein +30% to counter age-related muscle loss; weight loss capped at 0.25 kg/week.")
            if profile.age >= ADVANCED_AGE:
                warnings.append("Get medical clearance before starting a new diet or exercise programme.")

        if profile.sex == Sex.FEMALE and 45 <= profile.age <= 55:
            notes.append("Around menopause, strength training and adequate calcium and vitamin D become more important.")

        if profile.reproductive_status == ReproductiveStatus.PREGNANT:
            calorie_bonus += TRIMESTER_BONUS[profile.trimester]
            no_deficit = True
            applied.append("pregnancy")
            notes.append(
                f"Trimester {profile.trimester}: +{TRIMESTER_BONUS[profile.trimester]} kcal/day; "
                "no calorie deficit during pregnancy."
            )
        elif profile.reproductive_status == ReproductiveStatus.LACTATING:
            calorie_bonus += LACTATION_BONUS
            no_deficit = True
            applied.append("lactation")
            notes.append(f"Breastfeeding: +{LACTATION_BONUS} kcal/day; no aggressive deficit.")
        elif profile.cycle_day is not None and profile.sex != Sex.MALE:
            phase, cycle_delta = cycle_phase(profile.cycle_day, profile.cycle_length_days)
            applied.append("menstrual_cycle")
            notes.append(f"{phase.value.capitalize()} phase: {CYCLE_GUIDANCE[phase]}")

        for tag in profile.medical_conditions:
            condition = normalize_condition(tag)
            if condition is None:
                notes.append(f"Condition '{tag}' is not recognized; no adjustment applied.")
                continue
            if condition in applied:
                continue
            applied.append(condition)
            if condition in BMR_MULTIPLIERS:
                bmr_multiplier *= BMR_MULTIPLIERS[condition]
                notes.append(f"{condition}: BMR x {BMR_MULTIPLIERS[condition]}.")
            if condition in DEFICIT_CAPS:
                deficit_cap = tighter(deficit_cap, DEFICIT_CAPS[condition])
                notes.append(f"{condition}: deficit capped at {DEFICIT_CAPS[condition]} kcal/day.")
            if condition in PROTEIN_CAPS:
                protein_cap = tighter(protein_cap, PROTEIN_CAPS[condition])
                notes.append(
                    f"{condition}: protein capped at {PROTEIN_CAPS[condition]} g/kg; "
                    "later stages may need 0.8 g/kg, confirm with your nephrologist."
                )
            if condition in LOWER_CARB_CONDITIONS:
                lower_carb = True
                notes.append(f"{condition}: lower-carbohydrate distribution recommended.")
            if condition in CARDIOVASCULAR_CONDITIONS:
                warnings.append("Cardiovascular condition: avoid maximal-intensity zones without medical clearance.")

        adjustment = PopulationAdjustment(
            bmr_multiplier=bmr_multiplier,
            protein_multiplier=protein_multiplier,
            calorie_multiplier=calorie_multiplier,
            calorie_floor_bmr_multiple=calorie_floor,
            calorie_bonus=calorie_bonus,
            cycle_calorie_delta=cycle_delta,
            cycle_phase=phase,
            max_weekly_loss_kg=max_loss,
            deficit_cap=deficit_cap,
            protein_cap_g_per_kg=protein_cap,
            lower_carb_hint=lower_carb,
            no_deficit=no_deficit,
            applied=applied,
            notes=notes,
            warnings=list(dict.fromkeys(warnings)),
        )
        if applied:
            logger.debug("Special-population overlays applied: %s", ", ".join(applied))
        return adjustment

    def adjust_bmr(self, bmr: float, adjustment: PopulationAdjustment) -> float:
        return bmr * adjustment.bmr_multiplier

    def adjust_calories(self, calories: float, bmr: float, adjustment: PopulationAdjustment) -> int:
        """Apply calorie overlays to a daily calorie target.

        Order: age multiplier, age floor, then flat pregnancy, lactation and
        cycle bonuses.
        """
        adjusted = calories * adjustment.calorie_multiplier
        if adjustment.calorie_floor_bmr_multiple is not None:
            adjusted = max(adjusted, bmr * adjustment.calorie_floor_bmr_multiple)
        adjusted += adjustment.calorie_bonus + adjustment.cycle_calorie_delta
        return round_int(adjusted)


special_population_adjuster = SpecialPopulationAdjuster()
__all__ = [
    "SpecialPopulationAdjuster",
    "special_population_adjuster",
    "normalize_condition",
    "cycle_phase",
    "CONDITION_ALIASES",
]
