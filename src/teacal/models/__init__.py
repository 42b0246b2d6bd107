"""Data models for teacal."""

from .ingredients import CupSize, Ingredient, IngredientCategory
from .preference import UserPreference
from .sync import PendingWrite, StoreSource, SyncResult, SyncState, WriteOp
from .tea_record import TeaRecord, percent_to_label, sweetness_to_percent
from .user_profile import SweetnessPreference, UserProfile

__all__ = [
    "CupSize",
    "Ingredient",
    "IngredientCategory",
    "PendingWrite",
    "percent_to_label",
    "StoreSource",
    "sweetness_to_percent",
    "SweetnessPreference",
    "SyncResult",
    "SyncState",
    "TeaRecord",
    "UserPreference",
    "UserProfile",
    "WriteOp",
]
