"""Tests for protein targets and macro distributions."""
from schemas.profile_schema import DietType, Goal, MacroStrategy
from services.macro_planner import MacroPlanner, default_strategy
from services.training_age import TrainingAgeEstimator


planner = MacroPlanner()


def test_macro_calories_match_target_for_every_strategy():
    """Test that macro calories match the target for every strategy."""
    for strategy in MacroStrategy:
        for calories in range(1200, 4001, 100):
            for protein in (60.0, 150.0, 260.0):
                dist = planner.plan_distribution(calories, protein, strategy)
                total = dist.protein_g * 4 + dist.carbs_g * 4 + dist.fat_g * 9
                assert abs(total - calories) <= calories * 0.01, (strategy, calories, protein)
                assert dist.protein_g * 4 <= calories * 0.5 + 0.2


def test_balanced_split_after_protein():
    """Test the balanced split of the calories left after protein."""
    dist = planner.plan_distribution(2000, 150, MacroStrategy.BALANCED)
    assert dist.protein_g == 150.0
    assert dist.fat_g == 46.7
    assert dist.carbs_g == 245.0
    assert dist.strategy_name == MacroStrategy.BALANCED


def test_keto_pins_all_three_macros():
    """Test that keto fixes all three macro shares."""
    dist = planner.plan_distribution(2000, 180, MacroStrategy.KETO)
    assert dist.protein_g == 100.0
    assert dist.carbs_g == 25.0
    assert dist.fat_g == 166.7


def test_low_carb_keeps_planned_protein():
    """Test that low carb keeps the planned protein."""
    dist = planner.plan_distribution(2000, 150, MacroStrategy.LOW_CARB)
    assert dist.protein_g == 150.0
    assert dist.carbs_g == 100.0
    assert dist.fat_g == 111.1


def test_high_protein_raises_protein_share():
    """Test that high protein raises the protein share."""
    dist = planner.plan_distribution(2000, 100, MacroStrategy.HIGH_PROTEIN)
    assert dist.protein_g == 150.0


def test_protein_cap_applies_after_keto_split():
    """Test that keto's fixed 20% protein share yields to a medical cap."""
    dist = planner.plan_distribution(2000, 70, MacroStrategy.KETO, protein_cap_g=70)
    assert dist.protein_g == 70.0
    assert dist.fat_g == 179.2
    assert dist.carbs_g == 26.9
    assert "70 g medical cap" in dist.reasoning


def test_protein_cap_applies_after_high_protein_floor():
    """Test that the 30% high-protein floor never overrides a medical cap."""
    dist = planner.plan_distribution(2000, 70, MacroStrategy.HIGH_PROTEIN, protein_cap_g=70)
    assert dist.protein_g == 70.0
    assert dist.fat_g == 66.9
    assert dist.carbs_g == 279.5


def test_protein_cap_above_plan_changes_nothing():
    """Test that a cap above the planned protein leaves the split alone."""
    capped = planner.plan_distribution(2000, 150, MacroStrategy.BALANCED, protein_cap_g=200)
    assert capped == planner.plan_distribution(2000, 150, MacroStrategy.BALANCED)


def test_protein_targets():
    """Test protein targets by goal and diet."""
    assert planner.plan_protein(80, Goal.FAT_LOSS, DietType.OMNIVORE) == 192.0
    assert planner.plan_protein(80, Goal.FAT_LOSS, DietType.VEGAN) == 240.0
    assert planner.plan_protein(80, Goal.MAINTENANCE, DietType.OMNIVORE) == 144.0

    elite = TrainingAgeEstimator().estimate(6)
    assert planner.plan_protein(80, Goal.FAT_LOSS, DietType.OMNIVORE, elite) == 172.8


def test_medical_protein_cap_wins():
    """Test that a medical protein cap wins over the goal target."""
    protein = planner.plan_protein(
        80, Goal.MUSCLE_GAIN, DietType.VEGAN, protein_multiplier=1.3, protein_cap_g_per_kg=1.0
    )
    assert protein == 80.0


def test_default_strategy_from_diet_and_hints():
    """Test the default strategy from diet type and hints."""
    assert default_strategy(DietType.KETO) == MacroStrategy.KETO
    assert default_strategy(DietType.MEDITERRANEAN) == MacroStrategy.MEDITERRANEAN
    assert default_strategy(DietType.VEGAN) == MacroStrategy.BALANCED
    assert default_strategy(DietType.VEGAN, lower_carb_hint=True) == MacroStrategy.LOW_CARB
    assert default_strategy(DietType.MEDITERRANEAN, lower_carb_hint=True) == MacroStrategy.MEDITERRANEAN
    assert default_strategy(DietType.KETO, override=MacroStrategy.BALANCED) == MacroStrategy.BALANCED


def test_check_distribution_flags_low_protein_and_fat():
    """Test that low protein and fat are flagged."""
    dist = planner.plan_distribution(2000, 150, MacroStrategy.BALANCED)
    assert planner.check_distribution(dist).valid is True

    tiny = planner.plan_distribution(600, 30, MacroStrategy.KETO)
    check = planner.check_distribution(tiny)
    assert check.valid is False
    assert any("Protein" in issue for issue in check.issues)


def test_macro_percentages_sum_to_about_100():
    """Test that macro percentages sum to about 100."""
    dist = planner.plan_distribution(2400, 160, MacroStrategy.MEDITERRANEAN)
    percentages = planner.macro_percentages(dist)
    assert 99 <= sum(percentages.values()) <= 101
    assert percentages["protein"] == round(160 * 4 / 2400 * 100)
