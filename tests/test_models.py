"""Unit tests for domain models and risk levels."""

import pytest

from core.models import (
    BlacklistSnapshot,
    BlockCheckRecord,
    BulkResult,
    IPReputationRecord,
    RiskLevel,
    assess_risk_level,
    category_name,
)
from tests.conftest import make_check_payload


class TestAssessRiskLevel:
    """Test the five-band risk classification."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, RiskLevel.CLEAN),
            (1, RiskLevel.LOW),
            (24, RiskLevel.LOW),
            (25, RiskLevel.MEDIUM),
            (74, RiskLevel.MEDIUM),
            (75, RiskLevel.HIGH),
            (89, RiskLevel.HIGH),
            (90, RiskLevel.CRITICAL),
            (100, RiskLevel.CRITICAL),
        ],
    )
    def test_band_boundaries(self, score, expected):
        assert assess_risk_level(score) == expected

    def test_total_and_non_increasing_over_range(self):
        """Every score maps to a band, and bands never get less severe as scores rise."""
        order = [RiskLevel.CLEAN, RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL]
        ranks = [order.index(assess_risk_level(s)) for s in range(0, 101)]
        assert ranks == sorted(ranks)
        assert set(ranks) == set(range(5))


class TestCategoryName:
    def test_known_category(self):
        assert category_name(22) == "SSH"
        assert category_name(18) == "Brute-Force"

    def test_unknown_category(self):
        assert category_name(99) == "Category 99"


class TestIPReputationRecord:
    def test_from_api_maps_fields(self):
        payload = make_check_payload(
            score=42,
            isTor=True,
            reports=[
                {
                    "reportedAt": "2024-05-01T00:00:00+00:00",
                    "comment": "ssh brute force",
                    "categories": [18, 22],
                    "reporterId": 7,
                    "reporterCountryCode": "DE",
                }
            ],
        )

        record = IPReputationRecord.from_api(payload)

        assert record.address == "203.0.113.45"
        assert record.confidence_score == 42
        assert record.distinct_reporters == 4
        assert record.is_tor is True
        assert record.risk_level == RiskLevel.MEDIUM
        assert record.reports[0].categories == (18, 22)
        assert record.reports[0].reporter_country_code == "DE"

    def test_country_prefers_name_then_code(self):
        with_name = IPReputationRecord.from_api(make_check_payload())
        code_only = IPReputationRecord.from_api(make_check_payload(countryName=None))
        neither = IPReputationRecord.from_api(
            make_check_payload(countryName=None, countryCode=None)
        )

        assert with_name.country == "United States of America"
        assert code_only.country == "US"
        assert neither.country is None

    def test_record_is_immutable(self):
        record = IPReputationRecord.from_api(make_check_payload())
        with pytest.raises(AttributeError):
            record.confidence_score = 100

    def test_missing_required_field_raises(self):
        payload = make_check_payload()
        del payload["abuseConfidenceScore"]
        with pytest.raises(KeyError):
            IPReputationRecord.from_api(payload)


class TestBlockAndBlacklist:
    def test_block_from_api(self, block_payload):
        record = BlockCheckRecord.from_api(block_payload)

        assert record.network_address == "198.51.100.0"
        assert record.netmask == "24"
        assert len(record.reported_addresses) == 12
        assert record.reported_addresses[3].confidence == 95

    def test_block_without_reported_addresses(self, block_payload):
        block_payload["reportedAddress"] = []
        record = BlockCheckRecord.from_api(block_payload)
        assert record.reported_addresses == ()

    def test_blacklist_from_api(self, blacklist_payload):
        snapshot = BlacklistSnapshot.from_api(blacklist_payload)

        assert snapshot.generated_at == "2024-05-02T00:00:00+00:00"
        assert [e.confidence_score for e in snapshot.entries] == [95, 80, 60, 10]

    def test_blacklist_without_meta(self):
        snapshot = BlacklistSnapshot.from_api({"data": []})
        assert snapshot.generated_at == "Unknown"
        assert snapshot.entries == ()


class TestBulkResult:
    def test_ok_uses_input_address(self):
        record = IPReputationRecord.from_api(make_check_payload(ip="203.0.113.45", score=90))
        result = BulkResult.ok("203.0.113.45", record)

        assert result.success is True
        assert result.score == 90
        assert result.country == "United States of America"
        assert result.reports == 12
        assert result.error is None

    def test_failed(self):
        result = BulkResult.failed("203.0.113.9", "boom")
        assert result.success is False
        assert result.error == "boom"
        assert result.score is None
