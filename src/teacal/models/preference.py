"""User preference key/value model."""

from dataclasses import dataclass
from typing import Any

WEEKLY_BUDGET_KEY = "weeklyBudget"

DEFAULT_WEEKLY_BUDGET = 2000


@dataclass
class UserPreference:
    """A single schemaless setting owned by a user."""

    user_id: str
    preference_key: str
    preference_value: Any

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "preference_key": self.preference_key,
            "preference_value": self.preference_value,
        }


def parse_budget(value, default: int = DEFAULT_WEEKLY_BUDGET) -> int:
    """Read a stored budget leniently, like parseInt on the stored string."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value) if value > 0 else default
    digits = ""
    for ch in str(value).strip():
        if ch.isdigit():
            digits += ch
        else:
            break
    budget = int(digits) if digits else 0
    return budget if budget > 0 else default
