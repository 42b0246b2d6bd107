"""Tea record data model."""

import math
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from uuid import uuid4

from .ingredients import CupSize

# Labels users pick in shops, mapped to the stored percentage
SWEETNESS_LABELS: dict[str, int] = {
    "无糖": 0,
    "少糖": 30,
    "三分糖": 30,
    "半糖": 50,
    "五分糖": 50,
    "七分糖": 70,
    "全糖": 100,
}

DEFAULT_SWEETNESS = 50


def sweetness_to_percent(value) -> int:
    """Convert a sweetness label or number to an integer percentage.

    Unknown labels fall back to half sugar; numbers are clamped to 0-100.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_SWEETNESS
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return DEFAULT_SWEETNESS
        return int(min(max(round(value), 0), 100))
    if isinstance(value, str):
        label = value.strip()
        if label in SWEETNESS_LABELS:
            return SWEETNESS_LABELS[label]
        try:
            return sweetness_to_percent(float(label.rstrip("%")))
        except ValueError:
            return DEFAULT_SWEETNESS
    return DEFAULT_SWEETNESS


def percent_to_label(percent: int) -> str:
    """Display label for a sugar percentage."""
    if percent <= 0:
        return "无糖"
    if percent <= 30:
        return "三分糖"
    if percent <= 50:
        return "五分糖"
    if percent <= 70:
        return "七分糖"
    return "全糖"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _to_calories(value) -> int:
    try:
        return int(value)
    except OverflowError:
        raise ValueError(f"Invalid calories: {value!r}") from None


def normalize_toppings(value) -> list[str]:
    """Toppings are always a list of names, never a bare string."""
    if not value:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.replace("，", ",").split(",") if t.strip()]
    names = []
    for item in value:
        # Older entries stored {"name": ..., "calories": ...}
        if isinstance(item, dict):
            item = item.get("name")
        if item:
            names.append(str(item))
    return names


@dataclass
class TeaRecord:
    """One logged drink.

    The id is minted on the client and used as the primary key in both
    stores, so a record can be matched across them by identity.
    """

    user_id: str
    tea_name: str
    size: CupSize = CupSize.MEDIUM
    sweetness_level: int = DEFAULT_SWEETNESS  # percent, 0-100
    toppings: list[str] = field(default_factory=list)
    brand: str | None = None
    tea_product_id: int | None = None
    estimated_calories: int | None = None
    is_manual_calories: bool = False
    mood: str | None = None
    notes: str | None = None
    rating: int | None = None
    recorded_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if not isinstance(self.size, CupSize):
            self.size = CupSize(str(self.size).strip().lower())
        self.sweetness_level = sweetness_to_percent(self.sweetness_level)
        self.toppings = normalize_toppings(self.toppings)
        self.tea_product_id = self.tea_product_id or None
        self.recorded_at = parse_timestamp(self.recorded_at) or utcnow()
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    def validate(self) -> None:
        """Raise ValueError if the record cannot be stored."""
        if not self.user_id:
            raise ValueError("user_id is required")
        if not self.tea_name or not self.tea_name.strip():
            raise ValueError("tea_name is required")
        if self.estimated_calories is not None and self.estimated_calories < 0:
            raise ValueError("estimated_calories must be >= 0")
        if self.rating is not None and not 1 <= self.rating <= 5:
            raise ValueError("rating must be between 1 and 5")

    @property
    def sweetness_label(self) -> str:
        return percent_to_label(self.sweetness_level)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "tea_name": self.tea_name,
            "brand": self.brand,
            "size": self.size.value,
            "sweetness_level": self.sweetness_level,
            "toppings": list(self.toppings),
            "tea_product_id": self.tea_product_id,
            "estimated_calories": self.estimated_calories,
            "is_manual_calories": self.is_manual_calories,
            "mood": self.mood,
            "notes": self.notes,
            "rating": self.rating,
            "recorded_at": _format_timestamp(self.recorded_at),
            "created_at": _format_timestamp(self.created_at),
            "updated_at": _format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TeaRecord":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and v is not None}
        # Legacy local entries used drinkName/cupSize/calories
        if "tea_name" not in kwargs and data.get("drinkName"):
            kwargs["tea_name"] = data["drinkName"]
        if "size" not in kwargs and data.get("cupSize"):
            kwargs["size"] = data["cupSize"]
        if "estimated_calories" not in kwargs and data.get("calories") is not None:
            kwargs["estimated_calories"] = data["calories"]
        if kwargs.get("estimated_calories") is not None:
            kwargs["estimated_calories"] = _to_calories(kwargs["estimated_calories"])
        if "id" in kwargs:
            kwargs["id"] = str(kwargs["id"])
        return cls(**kwargs)

    def apply_patch(self, patch: dict) -> "TeaRecord":
        """Return a copy with the patch applied; id and owner never change."""
        data = self.to_dict()
        data.update({k: v for k, v in patch.items() if k not in ("id", "user_id")})
        return TeaRecord.from_dict(data)
