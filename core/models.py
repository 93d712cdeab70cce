# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every AbuseIPDB payload that flows
# through the system.  Each one has a `from_api()` constructor that maps the
# camelCase JSON the API returns onto snake_case fields.
#
# All models are FROZEN: a record is built once per API response and never
# touched again.  Summaries (core/summaries.py) always derive new text from
# them instead of mutating them.
#
# DESIGN PRINCIPLE — "No Phantom Fields":
#   A field is here only if some summary renders it.  Hostnames, IP version
#   and reporter country names are dropped on the floor.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# -----------------------------------------------------------------------------
# RiskLevel — derived from the confidence score, never stored upstream
# -----------------------------------------------------------------------------
class RiskLevel(str, Enum):
    """Five-band classification of an abuse confidence score."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    CLEAN = "CLEAN"


def assess_risk_level(score: int) -> RiskLevel:
    """Map a 0-100 confidence score onto its risk band.

    Bands are inclusive at their lower bound and checked top-down:
    >=90 CRITICAL, >=75 HIGH, >=25 MEDIUM, >=1 LOW, otherwise CLEAN.
    """
    if score >= 90:
        return RiskLevel.CRITICAL
    if score >= 75:
        return RiskLevel.HIGH
    if score >= 25:
        return RiskLevel.MEDIUM
    if score >= 1:
        return RiskLevel.LOW
    return RiskLevel.CLEAN


# -----------------------------------------------------------------------------
# Abuse categories — AbuseIPDB's fixed report category table
# -----------------------------------------------------------------------------
ABUSE_CATEGORIES: dict[int, str] = {
    1: "DNS Compromise",
    2: "DNS Poisoning",
    3: "Fraud Orders",
    4: "DDoS Attack",
    5: "FTP Brute-Force",
    6: "Ping of Death",
    7: "Phishing",
    8: "Fraud VoIP",
    9: "Open Proxy",
    10: "Web Spam",
    11: "Email Spam",
    12: "Blog Spam",
    13: "VPN IP",
    14: "Port Scan",
    15: "Hacking",
    16: "SQL Injection",
    17: "Spoofing",
    18: "Brute-Force",
    19: "Bad Web Bot",
    20: "Exploited Host",
    21: "Web App Attack",
    22: "SSH",
    23: "IoT Targeted",
}


def category_name(code: int) -> str:
    """Human name for a category code; unknown codes become 'Category N'."""
    return ABUSE_CATEGORIES.get(code, f"Category {code}")


# -----------------------------------------------------------------------------
# ReportEntry — one abuse report attached to an IP (verbose lookups only)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ReportEntry:
    """A single abuse report filed against an address."""

    reported_at: str
    comment: str
    categories: tuple[int, ...] = ()
    reporter_id: Optional[int] = None
    reporter_country_code: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ReportEntry":
        return cls(
            reported_at=data["reportedAt"],
            comment=data.get("comment") or "",
            categories=tuple(data.get("categories") or ()),
            reporter_id=data.get("reporterId"),
            reporter_country_code=data.get("reporterCountryCode"),
        )


# -----------------------------------------------------------------------------
# IPReputationRecord — the /check payload
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class IPReputationRecord:
    """Reputation of one address as reported by GET /check."""

    address: str
    confidence_score: int              # 0-100
    total_reports: int
    distinct_reporters: int
    last_reported_at: Optional[str] = None
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    isp: Optional[str] = None
    domain: Optional[str] = None
    usage_type: Optional[str] = None
    is_public: bool = True
    is_whitelisted: bool = False
    is_tor: bool = False
    reports: tuple[ReportEntry, ...] = field(default_factory=tuple)

    @property
    def risk_level(self) -> RiskLevel:
        return assess_risk_level(self.confidence_score)

    @property
    def country(self) -> Optional[str]:
        """Country name when upstream knows it, otherwise the ISO code."""
        return self.country_name or self.country_code

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "IPReputationRecord":
        return cls(
            address=data["ipAddress"],
            confidence_score=int(data["abuseConfidenceScore"]),
            total_reports=int(data.get("totalReports") or 0),
            distinct_reporters=int(data.get("numDistinctUsers") or 0),
            last_reported_at=data.get("lastReportedAt"),
            country_code=data.get("countryCode"),
            country_name=data.get("countryName"),
            isp=data.get("isp"),
            domain=data.get("domain"),
            usage_type=data.get("usageType"),
            is_public=bool(data.get("isPublic", True)),
            is_whitelisted=bool(data.get("isWhitelisted")),
            is_tor=bool(data.get("isTor")),
            reports=tuple(ReportEntry.from_api(r) for r in data.get("reports") or ()),
        )


# -----------------------------------------------------------------------------
# BlockCheckRecord — the /check-block payload
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BlockAddressEntry:
    """A reported address inside a checked network block."""

    address: str
    num_reports: int
    most_recent_report: Optional[str]
    confidence: int
    country_code: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "BlockAddressEntry":
        return cls(
            address=data["ipAddress"],
            num_reports=int(data.get("numReports") or 0),
            most_recent_report=data.get("mostRecentReport"),
            confidence=int(data["abuseConfidencePercentage"]),
            country_code=data.get("countryCode"),
        )


@dataclass(frozen=True)
class BlockCheckRecord:
    """A CIDR block and every address in it with reports."""

    network_address: str
    netmask: str
    min_address: str
    max_address: str
    num_possible_hosts: int
    address_space_desc: str
    reported_addresses: tuple[BlockAddressEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "BlockCheckRecord":
        return cls(
            network_address=data["networkAddress"],
            netmask=str(data["netmask"]),
            min_address=data.get("minAddress", ""),
            max_address=data.get("maxAddress", ""),
            num_possible_hosts=int(data.get("numPossibleHosts") or 0),
            address_space_desc=data.get("addressSpaceDesc") or "Unknown",
            reported_addresses=tuple(
                BlockAddressEntry.from_api(a) for a in data.get("reportedAddress") or ()
            ),
        )


# -----------------------------------------------------------------------------
# BlacklistSnapshot — the /blacklist payload (point in time, no deltas)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BlacklistEntry:
    """One blacklisted address."""

    address: str
    confidence_score: int
    country_code: Optional[str] = None
    usage_type: Optional[str] = None
    isp: Optional[str] = None
    domain: Optional[str] = None
    total_reports: int = 0
    distinct_reporters: int = 0
    last_reported_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "BlacklistEntry":
        return cls(
            address=data["ipAddress"],
            confidence_score=int(data["abuseConfidenceScore"]),
            country_code=data.get("countryCode"),
            usage_type=data.get("usageType"),
            isp=data.get("isp"),
            domain=data.get("domain"),
            total_reports=int(data.get("totalReports") or 0),
            distinct_reporters=int(data.get("numDistinctUsers") or 0),
            last_reported_at=data.get("lastReportedAt"),
        )


@dataclass(frozen=True)
class BlacklistSnapshot:
    """The blacklist as generated by AbuseIPDB at `generated_at`."""

    generated_at: str
    entries: tuple[BlacklistEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "BlacklistSnapshot":
        meta = payload.get("meta") or {}
        return cls(
            generated_at=meta.get("generatedAt") or "Unknown",
            entries=tuple(BlacklistEntry.from_api(e) for e in payload.get("data") or ()),
        )


# -----------------------------------------------------------------------------
# BulkResult — outcome of one address inside a bulk check
# -----------------------------------------------------------------------------
# Either `success=True` with score/country/isp/reports filled in, or
# `success=False` with `error` set.  Use the two constructors below rather
# than building one by hand.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class BulkResult:
    """Per-address outcome of a bulk check."""

    address: str
    success: bool
    score: Optional[int] = None
    country: Optional[str] = None
    isp: Optional[str] = None
    reports: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, address: str, record: IPReputationRecord) -> "BulkResult":
        return cls(
            address=address,
            success=True,
            score=record.confidence_score,
            country=record.country,
            isp=record.isp,
            reports=record.total_reports,
        )

    @classmethod
    def failed(cls, address: str, error: str) -> "BulkResult":
        return cls(address=address, success=False, error=error)
