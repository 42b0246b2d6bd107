"""Calorie estimation for milk tea drinks."""

import math
from dataclasses import dataclass

from ..models.ingredients import (
    FALLBACK_BASE_CALORIES,
    MILK_CALORIES,
    SIZE_BASE_CALORIES,
    SIZE_MULTIPLIERS,
    CupSize,
    get_ingredient,
)


def _to_number(value) -> float | None:
    """Coerce loosely-typed input to a float, None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        result = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return result if math.isfinite(result) else None


def _to_cup_size(value) -> CupSize | None:
    if isinstance(value, CupSize):
        return value
    if isinstance(value, str):
        try:
            return CupSize(value.strip().lower())
        except ValueError:
            return None
    return None


def sugar_factor(sugar_percent) -> float:
    """Scaling applied to the drink's own calories for a sugar level.

    0% sugar keeps 70% of the base, full sugar keeps all of it.
    Malformed values are treated as 0%.
    """
    sugar = _to_number(sugar_percent)
    if sugar is None:
        sugar = 0.0
    sugar = min(max(sugar, 0.0), 100.0)
    return 0.7 + 0.3 * sugar / 100


def calories_for_ingredient(name: str, grams) -> float:
    """Calories contributed by `grams` of a topping.

    Unknown toppings and missing, negative or malformed amounts give 0.
    """
    ingredient = get_ingredient(name) if isinstance(name, str) else None
    amount = _to_number(grams)
    if ingredient is None or amount is None or amount <= 0:
        return 0.0
    return ingredient.calories_per_gram * amount


def calories_for_topping(name: str) -> float:
    """Calories for one default portion of a topping."""
    ingredient = get_ingredient(name) if isinstance(name, str) else None
    if ingredient is None:
        return 0.0
    return calories_for_ingredient(name, ingredient.default_amount)


def calories_for_toppings(toppings: list[str] | None) -> float:
    """Sum of default portions for a list of topping names."""
    return sum(calories_for_topping(t) for t in (toppings or []))


def calories_for_base(
    cup_size,
    sugar_percent,
    milk_type: str | None = None,
    drink_calories=None,
) -> float:
    """Calories of the drink itself, before toppings.

    Without a catalog drink the size-keyed sugar base is used (fixed
    fallback for an unknown size). With a catalog drink its listed
    calories are scaled by cup size. The sugar factor applies to this
    portion only; milk adds a fixed amount.
    """
    size = _to_cup_size(cup_size)
    listed = _to_number(drink_calories)

    if listed is not None and listed >= 0:
        base = listed * SIZE_MULTIPLIERS.get(size, 1.0)
    elif size is not None:
        base = float(SIZE_BASE_CALORIES[size])
    else:
        base = float(FALLBACK_BASE_CALORIES)

    milk = MILK_CALORIES.get(milk_type, 0) if milk_type else 0
    return base * sugar_factor(sugar_percent) + milk


def estimate_record_calories(
    cup_size,
    sugar_percent,
    toppings: list[str] | None = None,
    milk_type: str | None = None,
    drink_calories=None,
) -> int:
    """Total estimated calories for a logged drink, rounded to an int."""
    total = calories_for_base(cup_size, sugar_percent, milk_type, drink_calories)
    total += calories_for_toppings(toppings)
    return max(0, round(total))


def calorie_level(calories: float) -> str:
    """Describe a calorie amount."""
    if calories <= 150:
        return "低热量"
    if calories <= 300:
        return "中等热量"
    if calories <= 500:
        return "高热量"
    return "超高热量"


@dataclass
class FoodEquivalent:
    name: str
    amount: float
    unit: str
    weight_grams: int


@dataclass
class ExerciseEquivalent:
    name: str
    minutes: int


# (name, amount, unit, grams) per 100 kcal
FOOD_PER_100_KCAL = [
    ("白米饭", 0.5, "碗", 85),
    ("馒头", 1, "个", 51),
    ("全麦面包", 1.5, "片", 69),
    ("水果玉米", 0.5, "根", 90),
    ("鸡蛋", 1.5, "个", 90),
]

# (name, minutes) to burn 100 kcal
EXERCISE_PER_100_KCAL = [
    ("跳绳", 10),
    ("爬楼梯", 10),
    ("跑步", 20),
    ("大扫除", 30),
    ("站立", 100),
    ("慢走", 50),
]


def calorie_equivalents(
    calories: float,
) -> tuple[list[FoodEquivalent], list[ExerciseEquivalent]]:
    """Scale the 100 kcal reference tables to a calorie amount."""
    if calories <= 0:
        return [], []

    ratio = calories / 100
    foods = [
        FoodEquivalent(
            name=name,
            amount=round(amount * ratio, 1),
            unit=unit,
            weight_grams=round(grams * ratio),
        )
        for name, amount, unit, grams in FOOD_PER_100_KCAL
    ]
    exercises = [
        ExerciseEquivalent(name=name, minutes=round(minutes * ratio))
        for name, minutes in EXERCISE_PER_100_KCAL
    ]
    return foods, exercises


def recommended_exercises(calories: float) -> list[ExerciseEquivalent]:
    """Pick exercises whose intensity suits the calorie amount."""
    _, exercises = calorie_equivalents(calories)
    if calories <= 200:
        wanted, limit = ["慢走", "站立", "大扫除"], 2
    elif calories <= 400:
        wanted, limit = ["跑步", "跳绳", "慢走"], 3
    else:
        wanted, limit = ["跳绳", "爬楼梯", "跑步"], 3
    return [e for e in exercises if e.name in wanted][:limit]
