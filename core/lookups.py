# =============================================================================
# core/lookups.py  —  Operation Handlers (one per tool)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Each function here is the body of one tool:
#
#     check_ip       → GET /check         → summarize_ip
#     bulk_check     → GET /check  × N    → summarize_bulk
#     check_block    → GET /check-block   → summarize_block
#     get_blacklist  → GET /blacklist     → summarize_blacklist(_plaintext)
#
#   Handlers take an AbuseIPDBClient plus plain Python arguments (already
#   validated by tools/schemas.py) and return text.  They know nothing about
#   MCP, pydantic or the token budget; the dispatcher adds those.
#
# BULK CHECKS ARE SEQUENTIAL:
#   One request at a time, in input order (AbuseIPDB rate limits).  Do not
#   parallelise.  A failure on one address is recorded against that
#   address and the loop carries on.
# =============================================================================

import logging
from typing import Any, Callable, Optional, Sequence, TypeVar

from core.api_client import AbuseIPDBClient
from core.errors import AbuseIPDBError, InvalidArgumentsError, UpstreamError
from core.models import (
    BlacklistSnapshot,
    BlockCheckRecord,
    BulkResult,
    IPReputationRecord,
)
from core.summaries import (
    summarize_blacklist,
    summarize_blacklist_plaintext,
    summarize_block,
    summarize_bulk,
    summarize_ip,
)

logger = logging.getLogger(__name__)

MAX_BULK_ADDRESSES = 100

T = TypeVar("T")


def _parse(payload: Any, parser: Callable[[Any], T], what: str) -> T:
    """Run a `from_api` parser, turning a malformed payload into UpstreamError."""
    try:
        return parser(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamError(f"Malformed {what} response from AbuseIPDB: {e!r}") from e


def _data(payload: dict[str, Any]) -> Any:
    return payload.get("data")


def fetch_ip_record(
    client: AbuseIPDBClient,
    ip_address: str,
    max_age_days: int = 30,
    verbose: bool = False,
) -> IPReputationRecord:
    payload = client.get_json(
        "/check",
        {
            "ipAddress": ip_address,
            "maxAgeInDays": max_age_days,
            "verbose": "true" if verbose else "false",
        },
    )
    return _parse(_data(payload), IPReputationRecord.from_api, "check")


# =============================================================================
# check_ip
# =============================================================================
def check_ip(
    client: AbuseIPDBClient,
    ip_address: str,
    max_age_days: int = 30,
    verbose: bool = False,
    threshold: int = 75,
) -> str:
    record = fetch_ip_record(client, ip_address, max_age_days, verbose)
    return summarize_ip(record, threshold=threshold, verbose=verbose)


# =============================================================================
# bulk_check
# =============================================================================
def dedupe_addresses(addresses: Sequence[str]) -> list[str]:
    """Trim, drop blanks, and deduplicate keeping first-seen order."""
    seen: dict[str, None] = {}
    for address in addresses:
        trimmed = address.strip()
        if trimmed:
            seen.setdefault(trimmed, None)
    return list(seen)


def bulk_check(
    client: AbuseIPDBClient,
    ip_addresses: Sequence[str],
    max_age_days: int = 30,
    threshold: int = 75,
) -> str:
    """Look up every address one after another and summarize the batch.

    Raises:
        InvalidArgumentsError: Empty list, more than 100 entries, or nothing
            left after trimming.  Raised before any request is sent.
    """
    if not ip_addresses:
        raise InvalidArgumentsError("ip_addresses list is required")
    if len(ip_addresses) > MAX_BULK_ADDRESSES:
        raise InvalidArgumentsError(
            f"Maximum {MAX_BULK_ADDRESSES} IP addresses per bulk check "
            f"(got {len(ip_addresses)})"
        )

    unique = dedupe_addresses(ip_addresses)
    if not unique:
        raise InvalidArgumentsError("ip_addresses contains no non-blank addresses")

    results: list[BulkResult] = []
    for index, address in enumerate(unique, start=1):
        logger.debug("bulk_check %d/%d: %s", index, len(unique), address)
        try:
            record = fetch_ip_record(client, address, max_age_days, verbose=False)
        except AbuseIPDBError as e:
            logger.warning("bulk_check lookup failed for %s: %s", address, e)
            results.append(BulkResult.failed(address, str(e)))
            continue
        except Exception as e:
            logger.warning("bulk_check lookup failed for %s: %r", address, e)
            results.append(BulkResult.failed(address, f"{type(e).__name__}: {e}"))
            continue
        results.append(BulkResult.ok(address, record))

    return summarize_bulk(results, threshold=threshold)


# =============================================================================
# check_block
# =============================================================================
def check_block(
    client: AbuseIPDBClient,
    network: str,
    max_age_days: int = 30,
    confidence_threshold: int = 75,
) -> str:
    payload = client.get_json(
        "/check-block", {"network": network, "maxAgeInDays": max_age_days}
    )
    record = _parse(_data(payload), BlockCheckRecord.from_api, "check-block")
    return summarize_block(record, confidence_threshold=confidence_threshold)


# =============================================================================
# get_blacklist
# =============================================================================
def get_blacklist(
    client: AbuseIPDBClient,
    confidence_minimum: int = 90,
    limit: Optional[int] = None,
    plain_text: bool = False,
) -> str:
    params: dict[str, Any] = {"confidenceMinimum": confidence_minimum}
    if limit is not None:
        params["limit"] = limit

    if plain_text:
        # Plaintext mode answers with one address per line and no metadata.
        params["plaintext"] = "true"
        body = client.get_text("/blacklist", params)
        addresses = [line.strip() for line in body.splitlines() if line.strip()]
        return summarize_blacklist_plaintext(addresses, confidence_minimum, limit)

    payload = client.get_json("/blacklist", params)
    snapshot = _parse(payload, BlacklistSnapshot.from_api, "blacklist")
    return summarize_blacklist(snapshot, confidence_minimum=confidence_minimum, limit=limit)
