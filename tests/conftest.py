"""pytest fixtures for testing."""

from unittest.mock import Mock

import pytest

from core.api_client import AbuseIPDBClient


def make_check_payload(ip="203.0.113.45", score=0, **overrides):
    """Build a GET /check `data` object."""
    data = {
        "ipAddress": ip,
        "isPublic": True,
        "ipVersion": 4,
        "isWhitelisted": False,
        "abuseConfidenceScore": score,
        "countryCode": "US",
        "countryName": "United States of America",
        "usageType": "Data Center/Web Hosting/Transit",
        "isp": "Example Hosting",
        "domain": "example.net",
        "hostnames": [],
        "isTor": False,
        "totalReports": 12,
        "numDistinctUsers": 4,
        "lastReportedAt": "2024-05-01T12:00:00+00:00",
    }
    data.update(overrides)
    return data


@pytest.fixture
def check_payload():
    return make_check_payload(score=80)


@pytest.fixture
def block_payload():
    """GET /check-block `data` with 12 reported addresses, 3 of them >= 75%."""
    scores = [10, 80, 20, 95, 30, 40, 50, 75, 5, 60, 15, 25]
    return {
        "networkAddress": "198.51.100.0",
        "netmask": "24",
        "minAddress": "198.51.100.1",
        "maxAddress": "198.51.100.254",
        "numPossibleHosts": 254,
        "addressSpaceDesc": "Internet",
        "reportedAddress": [
            {
                "ipAddress": f"198.51.100.{i + 1}",
                "numReports": i + 1,
                "mostRecentReport": "2024-05-01T12:00:00+00:00",
                "abuseConfidencePercentage": score,
                "countryCode": "NL",
            }
            for i, score in enumerate(scores)
        ],
    }


@pytest.fixture
def blacklist_payload():
    return {
        "meta": {"generatedAt": "2024-05-02T00:00:00+00:00"},
        "data": [
            {"ipAddress": "192.0.2.1", "abuseConfidenceScore": 95, "countryCode": "CN",
             "lastReportedAt": "2024-05-01T10:00:00+00:00"},
            {"ipAddress": "192.0.2.2", "abuseConfidenceScore": 80, "countryCode": "US",
             "lastReportedAt": None},
            {"ipAddress": "192.0.2.3", "abuseConfidenceScore": 60, "countryCode": "CN",
             "lastReportedAt": "2024-04-30T10:00:00+00:00"},
            {"ipAddress": "192.0.2.4", "abuseConfidenceScore": 10, "countryCode": "US",
             "lastReportedAt": "2024-04-29T10:00:00+00:00"},
        ],
    }


@pytest.fixture
def mock_client():
    """Mock AbuseIPDB client; tests set get_json/get_text behaviour."""
    return Mock(spec=AbuseIPDBClient)
