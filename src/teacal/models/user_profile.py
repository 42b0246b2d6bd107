"""User profile data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from .tea_record import parse_timestamp


class SweetnessPreference(str, Enum):
    """How sweet the user usually orders."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Present in some profile forms but not in the hosted users table
LOCAL_ONLY_FIELDS = ("weight", "height", "age", "gender")

# Columns the hosted users table is known to accept
REMOTE_PROFILE_FIELDS = (
    "sweetness_preference",
    "favorite_brands",
    "disliked_ingredients",
)


def _unique(values) -> list[str]:
    """De-duplicate while keeping first-seen order."""
    seen: dict[str, None] = {}
    for v in values or []:
        if v:
            seen.setdefault(str(v), None)
    return list(seen)


@dataclass
class UserProfile:
    """Account identity plus drink preferences."""

    username: str
    id: str = field(default_factory=lambda: str(uuid4()))
    sweetness_preference: SweetnessPreference | None = None
    favorite_brands: list[str] = field(default_factory=list)
    disliked_ingredients: list[str] = field(default_factory=list)
    weight: float | None = None  # kg
    height: float | None = None  # cm
    age: int | None = None
    gender: str | None = None
    password_hash: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if self.sweetness_preference and not isinstance(
            self.sweetness_preference, SweetnessPreference
        ):
            self.sweetness_preference = SweetnessPreference(self.sweetness_preference)
        self.favorite_brands = _unique(self.favorite_brands)
        self.disliked_ingredients = _unique(self.disliked_ingredients)
        self.created_at = parse_timestamp(self.created_at)
        self.updated_at = parse_timestamp(self.updated_at)

    def to_dict(self, include_secret: bool = True) -> dict:
        """Convert to dictionary for storage."""
        data = {
            "id": self.id,
            "username": self.username,
            "sweetness_preference": (
                self.sweetness_preference.value if self.sweetness_preference else None
            ),
            "favorite_brands": list(self.favorite_brands),
            "disliked_ingredients": list(self.disliked_ingredients),
            "weight": self.weight,
            "height": self.height,
            "age": self.age,
            "gender": self.gender,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_secret:
            data["password_hash"] = self.password_hash
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            username=data["username"],
            sweetness_preference=data.get("sweetness_preference") or None,
            favorite_brands=data.get("favorite_brands") or [],
            disliked_ingredients=data.get("disliked_ingredients") or [],
            weight=data.get("weight"),
            height=data.get("height"),
            age=data.get("age"),
            gender=data.get("gender"),
            password_hash=data.get("password_hash"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def apply_patch(self, patch: dict) -> "UserProfile":
        """Return a copy with the patch applied; id and username are fixed."""
        data = self.to_dict()
        data.update(
            {k: v for k, v in patch.items() if k not in ("id", "username", "password_hash")}
        )
        return UserProfile.from_dict(data)

    def get_summary(self) -> str:
        """Short human-readable description."""
        summary = f"User: {self.username}\n"
        if self.sweetness_preference:
            summary += f"Sweetness: {self.sweetness_preference.value}\n"
        if self.favorite_brands:
            summary += f"Favorite brands: {', '.join(self.favorite_brands)}\n"
        if self.disliked_ingredients:
            summary += f"Avoids: {', '.join(self.disliked_ingredients)}\n"
        return summary
