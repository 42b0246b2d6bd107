"""Tests for calorie estimation."""

import pytest

from teacal.models.ingredients import COMMON_INGREDIENTS, CupSize
from teacal.utils.calorie_utils import (
    calorie_equivalents,
    calorie_level,
    calories_for_base,
    calories_for_ingredient,
    calories_for_topping,
    estimate_record_calories,
    recommended_exercises,
    sugar_factor,
)


class TestIngredientCalories:
    """Tests for per-gram topping calories."""

    def test_zero_grams(self):
        """Test every topping contributes nothing at 0 g."""
        for ingredient in COMMON_INGREDIENTS:
            assert calories_for_ingredient(ingredient.name, 0) == 0

    def test_monotonic_in_grams(self):
        """Test more grams never means fewer calories."""
        for ingredient in COMMON_INGREDIENTS:
            values = [calories_for_ingredient(ingredient.name, g) for g in (0, 10, 50, 120)]
            assert values == sorted(values)

    def test_pearls(self):
        """Test a known density."""
        assert calories_for_ingredient("珍珠", 50) == pytest.approx(117)
        assert calories_for_topping("珍珠") == pytest.approx(117)

    def test_bad_input(self):
        """Test unknown names and malformed amounts give 0."""
        assert calories_for_ingredient("金箔", 50) == 0
        assert calories_for_ingredient("珍珠", -10) == 0
        assert calories_for_ingredient("珍珠", "lots") == 0
        assert calories_for_ingredient("珍珠", None) == 0
        assert calories_for_topping("金箔") == 0

    def test_non_finite_amounts(self):
        """Test nan and infinite amounts count as malformed."""
        assert calories_for_ingredient("珍珠", "nan") == 0
        assert calories_for_ingredient("珍珠", "inf") == 0
        assert calories_for_ingredient("珍珠", float("nan")) == 0


class TestBaseCalories:
    """Tests for the drink's own calories."""

    def test_sugar_factor_range(self):
        """Test the factor spans 0.7 to 1.0."""
        assert sugar_factor(0) == pytest.approx(0.7)
        assert sugar_factor(100) == pytest.approx(1.0)
        assert sugar_factor(250) == pytest.approx(1.0)
        assert sugar_factor("bad") == pytest.approx(0.7)
        assert sugar_factor("nan") == pytest.approx(0.7)
        assert sugar_factor(float("inf")) == pytest.approx(0.7)

    def test_monotonic_in_sugar(self):
        """Test more sugar never means fewer calories."""
        for size in CupSize:
            values = [calories_for_base(size, s) for s in range(0, 101, 10)]
            assert values == sorted(values)

    def test_size_table(self):
        """Test size base values at full sugar."""
        assert calories_for_base("small", 100) == pytest.approx(80)
        assert calories_for_base("medium", 100) == pytest.approx(120)
        assert calories_for_base("large", 100) == pytest.approx(160)

    def test_unknown_size_fallback(self):
        """Test the fixed fallback for an unknown size."""
        assert calories_for_base(None, 100) == pytest.approx(200)
        assert calories_for_base("venti", 0) == pytest.approx(140)

    def test_catalog_drink_scaled_by_size(self):
        """Test listed calories are scaled by cup size."""
        assert calories_for_base("large", 100, drink_calories=200) == pytest.approx(260)
        assert calories_for_base("small", 100, drink_calories=200) == pytest.approx(160)

    def test_milk_not_sugar_scaled(self):
        """Test milk adds a fixed amount."""
        without = calories_for_base("medium", 0)
        assert calories_for_base("medium", 0, milk_type="全脂牛奶") == pytest.approx(without + 120)


class TestEstimateRecordCalories:
    """Tests for whole-drink estimates."""

    def test_pearl_milk_tea(self):
        """Test medium, half sugar, pearls: 102 + 117."""
        assert estimate_record_calories("medium", 50, ["珍珠"]) == 219

    def test_multiple_toppings(self):
        """Test toppings add up and ignore sugar."""
        assert estimate_record_calories("large", 0, ["椰果", "布丁"]) == 112 + 75 + 60

    def test_unknown_toppings_ignored(self):
        """Test unknown toppings add nothing."""
        assert estimate_record_calories("small", 100, ["金箔"]) == 80

    def test_non_finite_inputs(self):
        """Test nan sugar and calories fall back like other bad input."""
        assert calories_for_base("medium", "nan") == calories_for_base("medium", 0)
        assert estimate_record_calories("medium", "nan", ["珍珠"]) == 84 + 117
        assert calories_for_base("medium", 50, drink_calories="inf") == pytest.approx(102)

    def test_returns_int(self):
        """Test the estimate is a non-negative int."""
        total = estimate_record_calories("medium", 33, ["仙草"])
        assert isinstance(total, int)
        assert total >= 0


class TestEquivalents:
    """Tests for calorie equivalents."""

    def test_levels(self):
        """Test level thresholds."""
        assert calorie_level(100) == "低热量"
        assert calorie_level(219) == "中等热量"
        assert calorie_level(450) == "高热量"
        assert calorie_level(700) == "超高热量"

    def test_scaled_to_calories(self):
        """Test tables scale linearly."""
        foods, exercises = calorie_equivalents(200)
        rice = next(f for f in foods if f.name == "白米饭")
        assert rice.amount == 1.0
        assert rice.weight_grams == 170
        running = next(e for e in exercises if e.name == "跑步")
        assert running.minutes == 40

    def test_nothing_for_zero(self):
        """Test no equivalents for zero calories."""
        assert calorie_equivalents(0) == ([], [])

    def test_recommended_exercises(self):
        """Test recommendations by intensity."""
        assert [e.name for e in recommended_exercises(150)] == ["大扫除", "站立"]
        assert len(recommended_exercises(500)) == 3
