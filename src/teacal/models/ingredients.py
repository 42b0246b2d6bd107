"""Ingredient, cup size and milk reference tables."""

from dataclasses import dataclass
from enum import Enum


class CupSize(str, Enum):
    """Cup sizes offered by tea shops."""

    SMALL = "small"  # 300ml
    MEDIUM = "medium"  # 500ml
    LARGE = "large"  # 700ml


class IngredientCategory(str, Enum):
    """Topping categories shown to users."""

    CLASSIC = "经典"
    LOW_CALORIE = "低卡"
    SPECIALTY = "特色"


@dataclass(frozen=True)
class Ingredient:
    """A topping with its calorie density."""

    name: str
    calories_per_gram: float
    default_amount: int = 50  # grams per serving
    category: IngredientCategory = IngredientCategory.CLASSIC

    @property
    def calories_per_serving(self) -> float:
        """Calories for one default portion."""
        return self.calories_per_gram * self.default_amount

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "calories_per_gram": self.calories_per_gram,
            "default_amount": self.default_amount,
            "category": self.category.value,
        }


_C = IngredientCategory.CLASSIC
_L = IngredientCategory.LOW_CALORIE
_S = IngredientCategory.SPECIALTY

COMMON_INGREDIENTS: list[Ingredient] = [
    Ingredient("珍珠", 2.34, 50, _C),
    Ingredient("椰果", 1.5, 50, _L),
    Ingredient("芋圆", 2.0, 50, _C),
    Ingredient("红豆", 2.38, 50, _C),
    Ingredient("布丁", 1.5, 40, _S),
    Ingredient("仙草", 0.3, 50, _L),
    Ingredient("西米", 0.68, 50, _C),
    Ingredient("芋泥", 0.88, 50, _S),
    # 一点点
    Ingredient("波霸", 0.72, 50, _C),
    Ingredient("小珍珠", 0.7, 50, _C),
    Ingredient("茶冻", 0.52, 50, _L),
    Ingredient("栀子冻", 0.58, 50, _L),
    Ingredient("椰奶冻", 1.54, 50, _S),
    Ingredient("仙草冻", 0.96, 50, _L),
    # 益禾堂
    Ingredient("青稞", 1.44, 50, _C),
    Ingredient("西米明珠", 1.58, 50, _C),
    Ingredient("益禾布丁", 1.2, 50, _S),
    Ingredient("益禾红豆", 0.9, 50, _C),
    Ingredient("益禾椰果", 0.78, 50, _L),
    Ingredient("冻冻", 0.54, 50, _L),
    Ingredient("多肉晶球", 0.7, 50, _S),
    Ingredient("益禾仙草", 0.8, 50, _L),
    Ingredient("益禾珍珠", 2.2, 50, _C),
    Ingredient("葡萄果肉", 0.5, 50, _L),
    Ingredient("芝士奶盖", 2.4, 50, _S),
    # 沪上阿姨
    Ingredient("马蹄爆爆珠", 0.72, 50, _S),
    Ingredient("马蹄丸子", 0.68, 50, _S),
    Ingredient("西柚粒", 0.3, 50, _L),
    Ingredient("血糯米", 2.2, 50, _C),
    Ingredient("奶冻", 1.2, 50, _S),
    Ingredient("沪上冻冻", 0.56, 50, _L),
    Ingredient("厚芋泥", 1.84, 50, _S),
    Ingredient("小多肉", 0.5, 50, _L),
    Ingredient("谷谷茶金砖", 0.9, 50, _S),
    Ingredient("米麻薯", 2.78, 50, _C),
    Ingredient("黑糖波波", 3.2, 50, _C),
    Ingredient("大多肉", 0.6, 50, _L),
    Ingredient("沪上芝士奶盖", 3.4, 50, _S),
]

INGREDIENTS_BY_NAME: dict[str, Ingredient] = {i.name: i for i in COMMON_INGREDIENTS}

# Sugar/base calories of the drink itself when no catalog product is chosen
SIZE_BASE_CALORIES: dict[CupSize, int] = {
    CupSize.SMALL: 80,
    CupSize.MEDIUM: 120,
    CupSize.LARGE: 160,
}

# Applied to a catalog product's listed calories (listed for a medium cup)
SIZE_MULTIPLIERS: dict[CupSize, float] = {
    CupSize.SMALL: 0.8,
    CupSize.MEDIUM: 1.0,
    CupSize.LARGE: 1.3,
}

SIZE_VOLUMES_ML: dict[CupSize, int] = {
    CupSize.SMALL: 300,
    CupSize.MEDIUM: 500,
    CupSize.LARGE: 700,
}

# Used when the cup size is missing or unrecognised
FALLBACK_BASE_CALORIES = 200

# Per-cup contribution at the usual pour
MILK_CALORIES: dict[str, int] = {
    "全脂牛奶": 120,
    "脱脂牛奶": 60,
    "奶精（植脂末）": 50,
}


def get_ingredient(name: str) -> Ingredient | None:
    """Look up a topping by exact name."""
    return INGREDIENTS_BY_NAME.get(name.strip()) if name else None
