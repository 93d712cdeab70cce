# =============================================================================
# core/summaries.py  —  Response Summaries (Context Budget Discipline)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns AbuseIPDB records into short, fixed-layout text reports that an
#   LLM can read at a glance.  The agent never sees raw JSON.
#
# EVERY LIST IS BOUNDED except one:
#   - single IP, verbose reports   → first 10 (no "+N more" line)
#   - block, reported addresses    → top 10 by confidence, "... and N more"
#   - blacklist, countries         → top 10 by count
#   - blacklist, entries           → top 20 by confidence, "... and N more"
#   - bulk, flagged                → 20, "... and N more"
#   - bulk, failed                 → 5,  "... and N more"
#   - bulk, "All Results" recap    → UNBOUNDED (input is already capped at 100)
#
# All functions are pure: same input, same text.  No clock is read.
# =============================================================================

from collections import Counter
from typing import Iterable, Optional, Sequence

from core.models import (
    BlacklistSnapshot,
    BlockCheckRecord,
    BulkResult,
    IPReputationRecord,
    assess_risk_level,
    category_name,
)

MAX_VERBOSE_REPORTS = 10
MAX_BLOCK_ADDRESSES = 10
MAX_BLACKLIST_COUNTRIES = 10
MAX_BLACKLIST_ENTRIES = 20
MAX_BULK_FLAGGED = 20
MAX_BULK_FAILED = 5


def _yes_no(flag: bool) -> str:
    return "true" if flag else "false"


def _more(total: int, shown: int, noun: str = "more") -> list[str]:
    if total > shown:
        return [f"  ... and {total - shown} {noun}"]
    return []


# =============================================================================
# Single IP
# =============================================================================
def summarize_ip(
    record: IPReputationRecord,
    threshold: int = 75,
    verbose: bool = False,
) -> str:
    """Render a /check record.

    The flag line appears when the score meets or exceeds `threshold`.
    With `verbose`, up to the first 10 reports are listed.
    """
    score = record.confidence_score
    lines = [
        f"IP Address:         {record.address}",
        f"Risk Level:         {record.risk_level.value}",
        f"Abuse Confidence:   {score}%",
        f"Total Reports:      {record.total_reports}",
        f"Distinct Reporters: {record.distinct_reporters}",
        f"Last Reported:      {record.last_reported_at or 'Never'}",
        f"Country:            {record.country or 'Unknown'}",
        f"ISP:                {record.isp or 'Unknown'}",
        f"Domain:             {record.domain or 'Unknown'}",
        f"Usage Type:         {record.usage_type or 'Unknown'}",
        f"Is Public:          {_yes_no(record.is_public)}",
        f"Is Whitelisted:     {_yes_no(record.is_whitelisted)}",
        f"Is Tor:             {_yes_no(record.is_tor)}",
    ]

    if score >= threshold:
        lines.append(
            f"\n⚠️  FLAGGED: Abuse confidence {score}% meets or exceeds "
            f"threshold of {threshold}%"
        )
    if record.is_whitelisted:
        lines.append("✅ Whitelisted")

    if verbose and record.reports:
        lines.append(f"\nRecent Reports (up to {MAX_VERBOSE_REPORTS}):")
        for report in record.reports[:MAX_VERBOSE_REPORTS]:
            cats = ", ".join(category_name(c) for c in report.categories)
            lines.append(
                f"  • {report.reported_at} [{cats}] - "
                f"{report.comment or '(no comment)'}"
            )

    return "\n".join(lines)


# =============================================================================
# CIDR block
# =============================================================================
def summarize_block(record: BlockCheckRecord, confidence_threshold: int = 75) -> str:
    """Render a /check-block record, highest-confidence addresses first."""
    reported = record.reported_addresses
    high_confidence = [a for a in reported if a.confidence >= confidence_threshold]

    lines = [
        f"Network:          {record.network_address}/{record.netmask}",
        f"Address Range:    {record.min_address} - {record.max_address}",
        f"Possible Hosts:   {record.num_possible_hosts:,}",
        f"Address Space:    {record.address_space_desc}",
        f"Reported IPs:     {len(reported)}",
        f"High Confidence:  {len(high_confidence)} (≥{confidence_threshold}%)",
    ]

    if high_confidence:
        lines.append(
            f"\n⚠️  {len(high_confidence)} high-confidence threats detected in this block"
        )

    if not reported:
        lines.append("\n✅ No reported IP addresses found in this block")
        return "\n".join(lines)

    lines.append("\nTop Reported Addresses:")
    ranked = sorted(reported, key=lambda a: a.confidence, reverse=True)
    for entry in ranked[:MAX_BLOCK_ADDRESSES]:
        lines.append(
            f"  • {entry.address} - {entry.confidence}% confidence "
            f"({entry.num_reports} reports, last: {entry.most_recent_report or 'Unknown'})"
        )
    lines.extend(_more(len(reported), MAX_BLOCK_ADDRESSES))
    return "\n".join(lines)


# =============================================================================
# Blacklist
# =============================================================================
# The histogram bands below are NOT the RiskLevel bands: they collapse the
# score into four buckets for a quick distribution view.
CONFIDENCE_BANDS = ("90-100", "75-89", "50-74", "0-49")


def confidence_band(score: int) -> str:
    if score >= 90:
        return "90-100"
    if score >= 75:
        return "75-89"
    if score >= 50:
        return "50-74"
    return "0-49"


def confidence_histogram(scores: Iterable[int]) -> dict[str, int]:
    histogram = dict.fromkeys(CONFIDENCE_BANDS, 0)
    for score in scores:
        histogram[confidence_band(score)] += 1
    return histogram


def country_counts(country_codes: Iterable[Optional[str]]) -> list[tuple[str, int]]:
    """Country → count, busiest first; ties keep first-seen order."""
    counts = Counter(code or "Unknown" for code in country_codes)
    # Counter preserves insertion order and sorted() is stable.
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def summarize_blacklist(
    snapshot: BlacklistSnapshot,
    confidence_minimum: int = 90,
    limit: Optional[int] = None,
) -> str:
    """Render a /blacklist snapshot.

    `confidence_minimum` and `limit` are echoed only; upstream already
    filtered by them.
    """
    entries = snapshot.entries
    histogram = confidence_histogram(e.confidence_score for e in entries)
    top_countries = country_counts(e.country_code for e in entries)[:MAX_BLACKLIST_COUNTRIES]

    lines = [
        f"Blacklist Retrieved: {len(entries):,} entries",
        f"Generated:           {snapshot.generated_at}",
        f"Minimum Confidence:  {confidence_minimum}%",
    ]
    if limit is not None:
        lines.append(f"Limit Applied:       {limit:,}")

    lines.append("\nConfidence Distribution:")
    for band in CONFIDENCE_BANDS:
        label = f"{band}%:"
        lines.append(f"  • {label:<8} {histogram[band]:,}")

    if top_countries:
        lines.append("\nTop Countries:")
        for code, count in top_countries:
            lines.append(f"  • {code}: {count:,}")

    if entries:
        lines.append(f"\nSample Entries (top {MAX_BLACKLIST_ENTRIES} by confidence):")
        ranked = sorted(entries, key=lambda e: e.confidence_score, reverse=True)
        for entry in ranked[:MAX_BLACKLIST_ENTRIES]:
            level = assess_risk_level(entry.confidence_score).value
            last = entry.last_reported_at[:10] if entry.last_reported_at else "Unknown"
            lines.append(
                f"  • {entry.address} ({entry.country_code or '?'}) - "
                f"{entry.confidence_score}% [{level}] - last: {last}"
            )
        lines.extend(_more(len(entries), MAX_BLACKLIST_ENTRIES, "more entries"))

    return "\n".join(lines)


def summarize_blacklist_plaintext(
    addresses: Sequence[str],
    confidence_minimum: int = 90,
    limit: Optional[int] = None,
) -> str:
    """Render the plaintext blacklist variant (addresses only, no scores)."""
    lines = [
        f"Blacklist Retrieved: {len(addresses):,} entries (plain text)",
        f"Minimum Confidence:  {confidence_minimum}%",
    ]
    if limit is not None:
        lines.append(f"Limit Applied:       {limit:,}")

    if addresses:
        lines.append(f"\nAddresses (first {MAX_BLACKLIST_ENTRIES}):")
        lines.extend(f"  • {a}" for a in addresses[:MAX_BLACKLIST_ENTRIES])
        lines.extend(_more(len(addresses), MAX_BLACKLIST_ENTRIES, "more entries"))
    return "\n".join(lines)


# =============================================================================
# Bulk
# =============================================================================
def summarize_bulk(results: Sequence[BulkResult], threshold: int = 75) -> str:
    """Render bulk results in their original (deduplicated) order."""
    successful = [r for r in results if r.success]
    failed = [r for r in results if not r.success]
    flagged = [r for r in successful if (r.score or 0) >= threshold]

    lines = [
        "Bulk Check Results:",
        f"  Unique IPs processed: {len(results)}",
        f"  Successful:           {len(successful)}",
        f"  Failed:               {len(failed)}",
        f"  Flagged (≥{threshold}%):".ljust(24) + f"{len(flagged)}",
    ]

    if flagged:
        lines.append("\n⚠️  Flagged IPs:")
        for r in flagged[:MAX_BULK_FLAGGED]:
            lines.append(
                f"  • {r.address} - {r.score}% ({r.country or 'Unknown'}, {r.reports} reports)"
            )
        lines.extend(_more(len(flagged), MAX_BULK_FLAGGED))

    if failed:
        lines.append("\n❌ Failed IPs:")
        for r in failed[:MAX_BULK_FAILED]:
            lines.append(f"  • {r.address}: {r.error}")
        lines.extend(_more(len(failed), MAX_BULK_FAILED))

    lines.append("\nAll Results:")
    for r in results:
        if r.success:
            level = assess_risk_level(r.score or 0).value
            lines.append(
                f"  {r.address} - {level} ({r.score}%) - "
                f"{r.country or 'Unknown'} - {r.isp or 'Unknown ISP'}"
            )
        else:
            lines.append(f"  {r.address} - ERROR: {r.error}")

    return "\n".join(lines)
