"""Row conversion at the hosted store boundary."""

from datetime import datetime

from ...models.tea_record import (
    TeaRecord,
    normalize_toppings,
    sweetness_to_percent,
    utcnow,
)
from ...models.user_profile import REMOTE_PROFILE_FIELDS, UserProfile

# Columns of tea_records; anything else is dropped before insert
TEA_RECORD_COLUMNS = (
    "id",
    "user_id",
    "tea_name",
    "brand",
    "size",
    "sweetness_level",
    "toppings",
    "tea_product_id",
    "estimated_calories",
    "mood",
    "notes",
    "rating",
    "recorded_at",
    "created_at",
    "updated_at",
)


def _iso(value) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def prepare_record_fields(data: dict) -> dict:
    """Coerce fields the remote schema is strict about.

    sweetness_level is an integer column, tea_product_id is a foreign key
    that must be null unless it names a catalog row, and toppings is a
    text array.
    """
    row = dict(data)
    if "sweetness_level" in row:
        row["sweetness_level"] = sweetness_to_percent(row["sweetness_level"])
    if "tea_product_id" in row:
        row["tea_product_id"] = row["tea_product_id"] or None
    if "toppings" in row:
        row["toppings"] = normalize_toppings(row["toppings"])
    if "size" in row and hasattr(row["size"], "value"):
        row["size"] = row["size"].value
    for key in ("recorded_at", "created_at", "updated_at"):
        if key in row:
            row[key] = _iso(row[key])
    return row


def record_to_row(record: TeaRecord) -> dict:
    """Serialize a record for insert, stamping missing system timestamps."""
    now = utcnow().isoformat()
    data = {k: v for k, v in record.to_dict().items() if k in TEA_RECORD_COLUMNS}
    data["created_at"] = data.get("created_at") or now
    data["updated_at"] = data.get("updated_at") or now
    return prepare_record_fields(data)


def patch_to_row(patch: dict) -> dict:
    """Serialize a partial update; id and owner are never patched."""
    data = {
        k: v for k, v in patch.items() if k in TEA_RECORD_COLUMNS and k not in ("id", "user_id")
    }
    data["updated_at"] = utcnow().isoformat()
    return prepare_record_fields(data)


def row_to_record(row: dict) -> TeaRecord:
    return TeaRecord.from_dict(row)


def profile_to_row(profile: UserProfile) -> dict:
    """Columns confirmed on the users table; physiological fields stay local."""
    data = profile.to_dict()
    row = {"id": data["id"], "username": data["username"]}
    row["password_hash"] = data.get("password_hash")
    for key in REMOTE_PROFILE_FIELDS:
        row[key] = data.get(key)
    return row


def profile_patch_to_row(patch: dict) -> dict:
    row = {k: v for k, v in patch.items() if k in REMOTE_PROFILE_FIELDS}
    if hasattr(row.get("sweetness_preference"), "value"):
        row["sweetness_preference"] = row["sweetness_preference"].value
    row["updated_at"] = utcnow().isoformat()
    return row


def row_to_profile(row: dict) -> UserProfile:
    return UserProfile.from_dict(row)
