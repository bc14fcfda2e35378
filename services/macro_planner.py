"""Protein targets and macro distributions.

Protein is set first from body weight, goal, training age and diet type.
The remaining calories are then split by strategy:

* keto pins fat/carb/protein at 75/5/20 % of total calories, replacing the
  planned protein;
* low_carb pins carbs at 20 % of total, keeps the planned protein and gives
  the rest to fat;
* balanced, high_protein and mediterranean split the calories left after
  protein into fixed fat:carb ratios. high_protein first raises protein to at
  least 30 % of calories.

Protein never exceeds 50 % of calories, nor a medical cap in grams when one
is given. Calories freed by the cap go to fat and carbs in the strategy's
own proportion.
"""

from typing import Dict, Optional

from core.logger import get_logger
from core.rounding import round_half_up, round_int
from schemas.profile_schema import DietType, Goal, MacroStrategy, TrainingLevel
from schemas.result_schema import MacroCheck, MacroDistribution, TrainingAge

logger = get_logger("services.macro_planner")

PROTEIN_G_PER_KG: Dict[Goal, float] = {
    Goal.FAT_LOSS: 2.4,
    Goal.MUSCLE_GAIN: 2.0,
    Goal.MAINTENANCE: 1.8,
    Goal.ATHLETIC: 2.2,
    Goal.STRENGTH: 2.2,
    Goal.ENDURANCE: 2.0,
}

# Plant proteins have lower digestibility, so more is needed.
DIET_PROTEIN_MULTIPLIERS: Dict[DietType, float] = {
    DietType.VEGETARIAN: 1.15,
    DietType.VEGAN: 1.25,
}

EXPERIENCED_LEVELS = frozenset({TrainingLevel.ADVANCED, TrainingLevel.ELITE})
EXPERIENCED_PROTEIN_MULTIPLIER = 0.9

# fat share of the calories left after protein
REMAINDER_FAT_SHARE: Dict[MacroStrategy, float] = {
    MacroStrategy.BALANCED: 0.30,
    MacroStrategy.HIGH_PROTEIN: 0.35,
    MacroStrategy.MEDITERRANEAN: 0.40,
}

KETO_SPLIT = {"fat": 0.75, "carbs": 0.05, "protein": 0.20}
LOW_CARB_CARB_SHARE = 0.20
HIGH_PROTEIN_MIN_SHARE = 0.30
MAX_PROTEIN_SHARE = 0.50

DIET_DEFAULT_STRATEGY: Dict[DietType, MacroStrategy] = {
    DietType.KETO: MacroStrategy.KETO,
    DietType.LOW_CARB: MacroStrategy.LOW_CARB,
    DietType.MEDITERRANEAN: MacroStrategy.MEDITERRANEAN,
}

MIN_PROTEIN_G = 40
MIN_FAT_G = 20
CALORIE_TOLERANCE = 0.05


def default_strategy(
    diet_type: DietType,
    lower_carb_hint: bool = False,
    override: Optional[MacroStrategy] = None,
) -> MacroStrategy:
    """Strategy for a diet type; an explicit override always wins."""
    if override is not None:
        return MacroStrategy(override)
    strategy = DIET_DEFAULT_STRATEGY.get(diet_type, MacroStrategy.BALANCED)
    if lower_carb_hint and strategy == MacroStrategy.BALANCED:
        return MacroStrategy.LOW_CARB
    return strategy


class MacroPlanner:
    """Derives protein, carb and fat targets."""

    def plan_protein(
        self,
        weight_kg: float,
        goal: Goal,
        diet_type: DietType,
        training_age: Optional[TrainingAge] = None,
        protein_multiplier: float = 1.0,
        protein_cap_g_per_kg: Optional[float] = None,
    ) -> float:
        """Daily protein in grams.

        Args:
            weight_kg: Body weight.
            goal: Primary goal; sets the base grams per kg.
            diet_type: Applies the plant-protein bioavailability multiplier.
            training_age: Advanced and elite lifters need 10% less.
            protein_multiplier: Extra multiplier from age-bracket overlays.
            protein_cap_g_per_kg: Medical cap that overrides everything else.

        Returns:
            Protein grams rounded to one decimal.
        """
        per_kg = PROTEIN_G_PER_KG[goal]
        if training_age is not None and training_age.level in EXPERIENCED_LEVELS:
            per_kg *= EXPERIENCED_PROTEIN_MULTIPLIER
        per_kg *= DIET_PROTEIN_MULTIPLIERS.get(diet_type, 1.0)
        per_kg *= protein_multiplier
        if protein_cap_g_per_kg is not None:
            per_kg = min(per_kg, protein_cap_g_per_kg)
        protein = round_half_up(weight_kg * per_kg, 1)
        logger.debug("Protein %.1f g (%.2f g/kg)", protein, per_kg)
        return protein

    def plan_distribution(
        self,
        calories: float,
        protein_g: float,
        strategy: MacroStrategy = MacroStrategy.BALANCED,
        protein_cap_g: Optional[float] = None,
    ) -> MacroDistribution:
        """Split daily calories into macro grams.

        Args:
            calories: Daily calorie target.
            protein_g: Planned protein from `plan_protein`.
            strategy: Distribution strategy.
            protein_cap_g: Medical protein ceiling in grams. Applied after the
                strategy, so keto and high_protein cannot exceed it.

        Returns:
            `MacroDistribution` whose macro calories match `calories` within
            rounding.
        """
        strategy = MacroStrategy(strategy)
        calories = round_int(calories)
        protein_kcal = min(protein_g * 4, calories * MAX_PROTEIN_SHARE)

        if strategy == MacroStrategy.KETO:
            fat_kcal = calories * KETO_SPLIT["fat"]
            carb_kcal = calories * KETO_SPLIT["carbs"]
            protein_kcal = calories * KETO_SPLIT["protein"]
            reasoning = "Keto: 75% fat, 5% carbs, 20% protein of total calories."
        elif strategy == MacroStrategy.LOW_CARB:
            carb_kcal = calories * LOW_CARB_CARB_SHARE
            fat_kcal = calories - protein_kcal - carb_kcal
            reasoning = "Low carb: carbs fixed at 20% of calories, planned protein kept, fat fills the rest."
        else:
            if strategy == MacroStrategy.HIGH_PROTEIN:
                protein_kcal = max(protein_kcal, calories * HIGH_PROTEIN_MIN_SHARE)
            fat_share = REMAINDER_FAT_SHARE[strategy]
            remaining = calories - protein_kcal
            fat_kcal = remaining * fat_share
            carb_kcal = remaining - fat_kcal
            reasoning = (
                f"{strategy.value.replace('_', ' ').capitalize()}: protein first, remaining calories split "
                f"{fat_share * 100:.0f}% fat / {(1 - fat_share) * 100:.0f}% carbs."
            )

        cap_kcal = protein_cap_g * 4 if protein_cap_g is not None else None
        if cap_kcal is not None and protein_kcal > cap_kcal:
            freed = protein_kcal - cap_kcal
            protein_kcal = cap_kcal
            fat_part = freed * self._freed_fat_share(strategy)
            fat_kcal += fat_part
            carb_kcal += freed - fat_part
            reasoning += f" Protein held at the {protein_cap_g:g} g medical cap; {freed:.0f} kcal moved to fat and carbs."

        distribution = MacroDistribution(
            protein_g=round_half_up(protein_kcal / 4, 1),
            carbs_g=round_half_up(carb_kcal / 4, 1),
            fat_g=round_half_up(fat_kcal / 9, 1),
            calories=calories,
            strategy_name=strategy,
            reasoning=reasoning,
        )
        logger.debug(
            "Macros %s: P%.1f C%.1f F%.1f for %s kcal",
            strategy.value, distribution.protein_g, distribution.carbs_g, distribution.fat_g, calories,
        )
        return distribution

    @staticmethod
    def _freed_fat_share(strategy: MacroStrategy) -> float:
        if strategy == MacroStrategy.KETO:
            return KETO_SPLIT["fat"] / (KETO_SPLIT["fat"] + KETO_SPLIT["carbs"])
        if strategy == MacroStrategy.LOW_CARB:
            return 1.0
        return REMAINDER_FAT_SHARE[strategy]

    def macro_percentages(self, distribution: MacroDistribution) -> Dict[str, int]:
        """Share of calories from each macro, as whole percentages."""
        protein = distribution.protein_g * 4
        carbs = distribution.carbs_g * 4
        fat = distribution.fat_g * 9
        total = protein + carbs + fat
        if total <= 0:
            return {"protein": 0, "carbs": 0, "fat": 0}
        return {
            "protein": round_int(protein / total * 100),
            "carbs": round_int(carbs / total * 100),
            "fat": round_int(fat / total * 100),
        }

    def check_distribution(self, distribution: MacroDistribution) -> MacroCheck:
        """Flag calorie drift above 5% and protein or fat below safe minimums."""
        calculated = distribution.protein_g * 4 + distribution.carbs_g * 4 + distribution.fat_g * 9
        difference = abs(calculated - distribution.calories)
        issues = []
        if distribution.calories and difference / distribution.calories > CALORIE_TOLERANCE:
            issues.append(
                f"Macro calories ({calculated:.0f}) differ from target ({distribution.calories}) by {difference:.0f} kcal"
            )
        if distribution.protein_g < MIN_PROTEIN_G:
            issues.append(f"Protein is below the minimum of {MIN_PROTEIN_G} g")
        if distribution.fat_g < MIN_FAT_G:
            issues.append(f"Fat is below the minimum of {MIN_FAT_G} g for hormone health")
        return MacroCheck(
            valid=not issues,
            calculated_calories=round_half_up(calculated, 1),
            difference=round_half_up(difference, 1),
            issues=issues,
        )


macro_planner = MacroPlanner()
__all__ = [
    "MacroPlanner",
    "macro_planner",
    "default_strategy",
    "PROTEIN_G_PER_KG",
    "DIET_PROTEIN_MULTIPLIERS",
]
