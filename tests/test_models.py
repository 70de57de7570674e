"""test suite for profile models and date helpers."""
import json
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from personas.profiles import AuthInfo, ProfileMetadata
from personas.utils.dates import format_relative, parse_iso, utc_now_iso


class TestAuthInfo:
    def test_no_blob(self):
        assert AuthInfo.from_blob(None).authenticated is False
        assert AuthInfo.from_blob("").authenticated is False

    def test_top_level_fields(self):
        info = AuthInfo.from_blob(json.dumps({"subscriptionType": "pro", "expiresAt": 123}))
        assert info.authenticated is True
        assert info.subscription_type == "pro"
        assert info.expires_at == 123

    def test_nested_oauth(self):
        blob = json.dumps({"claudeAiOauth": {"accessToken": "t", "subscriptionType": "max"}})
        info = AuthInfo.from_blob(blob)
        assert info.subscription_type == "max"
        assert info.expires_at is None

    @pytest.mark.parametrize("blob", ["not json", "[1, 2]", "42", '{"subscriptionType": 7}'])
    def test_unparseable_still_authenticated(self, blob):
        info = AuthInfo.from_blob(blob)
        assert info.authenticated is True
        assert info.subscription_type is None


class TestProfileMetadata:
    def test_camel_case_round_trip(self):
        data = {"name": "work", "createdAt": "2024-01-01T00:00:00.000Z", "lastUsedAt": "2024-01-02T00:00:00.000Z"}
        metadata = ProfileMetadata.model_validate(data)
        assert metadata.created_at == "2024-01-01T00:00:00.000Z"
        assert metadata.to_json() == data


class TestDates:
    NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_utc_now_iso_format(self):
        value = utc_now_iso()
        assert value.endswith("Z")
        assert parse_iso(value).tzinfo is not None

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=20), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3), "3h ago"),
        (timedelta(days=12), "12d ago"),
    ])
    def test_relative(self, delta, expected):
        then = (self.NOW - delta).isoformat().replace("+00:00", "Z")
        assert format_relative(then, now=self.NOW) == expected

    def test_old_dates_show_date(self):
        result = format_relative("2023-01-15T12:00:00.000Z", now=self.NOW)
        assert result.startswith("2023-01-1")

    def test_unparseable(self):
        assert format_relative("yesterday-ish", now=self.NOW) == "yesterday-ish"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
