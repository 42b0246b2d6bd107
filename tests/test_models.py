"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from teacal.models.ingredients import CupSize, get_ingredient
from teacal.models.preference import DEFAULT_WEEKLY_BUDGET, parse_budget
from teacal.models.sync import StoreSource, SyncResult
from teacal.models.tea_record import (
    TeaRecord,
    normalize_toppings,
    parse_timestamp,
    percent_to_label,
    sweetness_to_percent,
)
from teacal.models.user_profile import SweetnessPreference, UserProfile


class TestSweetness:
    """Tests for sweetness label conversion."""

    def test_labels(self):
        """Test known labels map to percentages."""
        assert sweetness_to_percent("无糖") == 0
        assert sweetness_to_percent("少糖") == 30
        assert sweetness_to_percent("三分糖") == 30
        assert sweetness_to_percent("半糖") == 50
        assert sweetness_to_percent("七分糖") == 70
        assert sweetness_to_percent("全糖") == 100

    def test_unknown_label_defaults_to_half(self):
        """Test unknown labels fall back to 50."""
        assert sweetness_to_percent("微糖加冰") == 50
        assert sweetness_to_percent(None) == 50

    def test_non_finite_defaults_to_half(self):
        """Test nan and infinite values fall back to 50."""
        assert sweetness_to_percent("inf") == 50
        assert sweetness_to_percent("-inf") == 50
        assert sweetness_to_percent("nan") == 50
        assert sweetness_to_percent(float("nan")) == 50
        assert TeaRecord(user_id="u1", tea_name="x", sweetness_level="inf").sweetness_level == 50

    def test_numbers_clamped(self):
        """Test numeric input is rounded and clamped."""
        assert sweetness_to_percent(70) == 70
        assert sweetness_to_percent("30%") == 30
        assert sweetness_to_percent(150) == 100
        assert sweetness_to_percent(-5) == 0

    def test_percent_to_label(self):
        """Test display labels."""
        assert percent_to_label(0) == "无糖"
        assert percent_to_label(30) == "三分糖"
        assert percent_to_label(50) == "五分糖"
        assert percent_to_label(100) == "全糖"


class TestTeaRecord:
    """Tests for TeaRecord model."""

    def test_normalizes_fields(self):
        """Test constructor coercion."""
        record = TeaRecord(
            user_id="u1",
            tea_name="四季春",
            size="Large",
            sweetness_level="七分糖",
            toppings="椰果, 仙草",
            tea_product_id=0,
        )
        assert record.size == CupSize.LARGE
        assert record.sweetness_level == 70
        assert record.toppings == ["椰果", "仙草"]
        assert record.tea_product_id is None
        assert record.recorded_at.tzinfo is not None

    def test_ids_are_unique(self):
        """Test each record gets its own id."""
        a = TeaRecord(user_id="u1", tea_name="a")
        b = TeaRecord(user_id="u1", tea_name="b")
        assert a.id != b.id

    def test_round_trip(self, sample_record):
        """Test serialization keeps every field."""
        sample_record.estimated_calories = 219
        restored = TeaRecord.from_dict(sample_record.to_dict())
        assert restored == sample_record

    def test_from_dict_ignores_unknown_keys(self):
        """Test extra columns are dropped."""
        record = TeaRecord.from_dict(
            {"user_id": "u1", "tea_name": "x", "created_by": "web", "sweetness_level": None}
        )
        assert record.sweetness_level == 50

    def test_from_dict_legacy_keys(self):
        """Test older local entries still load."""
        record = TeaRecord.from_dict(
            {"user_id": "u1", "drinkName": "奶绿", "cupSize": "small", "calories": 180}
        )
        assert record.tea_name == "奶绿"
        assert record.size == CupSize.SMALL
        assert record.estimated_calories == 180

    def test_invalid_size(self):
        """Test unknown cup sizes are rejected."""
        with pytest.raises(ValueError):
            TeaRecord(user_id="u1", tea_name="x", size="venti")

    def test_validate(self):
        """Test validation rules."""
        with pytest.raises(ValueError, match="tea_name"):
            TeaRecord(user_id="u1", tea_name="  ").validate()
        with pytest.raises(ValueError, match="rating"):
            TeaRecord(user_id="u1", tea_name="x", rating=6).validate()
        with pytest.raises(ValueError, match="estimated_calories"):
            TeaRecord(user_id="u1", tea_name="x", estimated_calories=-1).validate()

    def test_infinite_calories_rejected(self):
        """Test an infinite calorie count is a ValueError."""
        with pytest.raises(ValueError):
            TeaRecord.from_dict({"user_id": "u1", "tea_name": "x", "estimated_calories": float("inf")})

    def test_apply_patch_keeps_identity(self, sample_record):
        """Test id and owner cannot be patched."""
        patched = sample_record.apply_patch({"id": "other", "user_id": "other", "rating": 4})
        assert patched.id == sample_record.id
        assert patched.user_id == sample_record.user_id
        assert patched.rating == 4
        assert sample_record.rating is None


class TestHelpers:
    """Tests for model helpers."""

    def test_parse_timestamp_z_suffix(self):
        """Test UTC 'Z' suffix parsing."""
        parsed = parse_timestamp("2024-05-15T08:30:00Z")
        assert parsed == datetime(2024, 5, 15, 8, 30, tzinfo=timezone.utc)

    def test_parse_timestamp_naive(self):
        """Test naive timestamps are taken as UTC."""
        assert parse_timestamp("2024-05-15T08:30:00").tzinfo == timezone.utc

    def test_normalize_toppings_legacy_objects(self):
        """Test {"name": ...} entries become names."""
        assert normalize_toppings([{"name": "珍珠", "calories": 117}, "布丁"]) == ["珍珠", "布丁"]
        assert normalize_toppings(None) == []

    def test_parse_budget(self):
        """Test lenient budget parsing."""
        assert parse_budget("1500") == 1500
        assert parse_budget("1500kcal") == 1500
        assert parse_budget("abc") == DEFAULT_WEEKLY_BUDGET
        assert parse_budget(0) == DEFAULT_WEEKLY_BUDGET
        assert parse_budget(None, 1800) == 1800

    def test_get_ingredient(self):
        """Test topping lookup."""
        assert get_ingredient("珍珠").calories_per_serving == pytest.approx(117)
        assert get_ingredient(" 珍珠 ") is not None
        assert get_ingredient("金箔") is None


class TestUserProfile:
    """Tests for UserProfile model."""

    def test_round_trip(self):
        """Test serialization."""
        profile = UserProfile(
            username="alice",
            sweetness_preference="low",
            favorite_brands=["喜茶", "喜茶", "奈雪"],
            weight=55.0,
        )
        restored = UserProfile.from_dict(profile.to_dict())
        assert restored == profile
        assert restored.sweetness_preference == SweetnessPreference.LOW
        assert restored.favorite_brands == ["喜茶", "奈雪"]

    def test_to_dict_without_secret(self):
        """Test password hash can be left out."""
        profile = UserProfile(username="alice", password_hash="hash")
        assert "password_hash" not in profile.to_dict(include_secret=False)

    def test_apply_patch(self):
        """Test patching keeps identity and secret."""
        profile = UserProfile(username="alice", password_hash="hash")
        patched = profile.apply_patch({"username": "bob", "password_hash": "x", "age": 30})
        assert patched.username == "alice"
        assert patched.password_hash == "hash"
        assert patched.age == 30

    def test_invalid_preference(self):
        """Test unknown sweetness preference is rejected."""
        with pytest.raises(ValueError):
            UserProfile(username="alice", sweetness_preference="extreme")


class TestSyncResult:
    """Tests for SyncResult."""

    def test_ok_and_fail(self):
        """Test result constructors."""
        ok = SyncResult.ok([1], StoreSource.REMOTE)
        assert ok.success and ok.data == [1] and ok.error is None
        fail = SyncResult.fail("boom")
        assert not fail.success
        assert fail.to_dict() == {
            "success": False,
            "data": None,
            "error": "boom",
            "source": "local",
            "queued": False,
        }
