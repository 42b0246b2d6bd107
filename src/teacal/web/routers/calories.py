"""Calorie estimate routes."""

from dataclasses import asdict

from fastapi import APIRouter, Query

from ...models.ingredients import COMMON_INGREDIENTS
from ...models.tea_record import percent_to_label, sweetness_to_percent
from ...utils.calorie_utils import (
    calorie_equivalents,
    calorie_level,
    estimate_record_calories,
    recommended_exercises,
)

router = APIRouter(prefix="/calories", tags=["calories"])


@router.get("/estimate")
async def estimate(
    size: str = "medium",
    sweetness: str = "50",
    toppings: list[str] = Query(default=[]),
    milk: str | None = None,
    drink_calories: float | None = None,
):
    """Estimate a drink's calories without logging it."""
    percent = sweetness_to_percent(sweetness)
    total = estimate_record_calories(size, percent, toppings, milk, drink_calories)
    foods, exercises = calorie_equivalents(total)
    return {
        "calories": total,
        "level": calorie_level(total),
        "sweetness_level": percent,
        "sweetness_label": percent_to_label(percent),
        "foods": [asdict(f) for f in foods],
        "exercises": [asdict(e) for e in exercises],
        "recommended": [asdict(e) for e in recommended_exercises(total)],
    }


@router.get("/ingredients")
async def ingredients():
    """The topping catalog."""
    return [i.to_dict() for i in COMMON_INGREDIENTS]
