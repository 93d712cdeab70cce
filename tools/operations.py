# =============================================================================
# tools/operations.py  —  The Operation Catalogue
# =============================================================================
#
# Binds each tool name to its description, its argument contract
# (tools/schemas.py) and its handler (core/lookups.py).
#
# TOKEN BUDGET COVERAGE:
#   Only check_block and get_blacklist are guarded (guarded=True) and take
#   break_token_rule.  check_ip and bulk_check output is returned unchecked.
# =============================================================================

from core import lookups
from core.api_client import AbuseIPDBClient
from core.token_budget import DEFAULT_MAX_TOKENS
from tools.registry import ToolRegistry
from tools.schemas import BulkCheckArgs, CheckBlockArgs, CheckIpArgs, GetBlacklistArgs

CHECK_IP_DESCRIPTION = (
    "Check the reputation of a single IP address using AbuseIPDB. Returns abuse "
    "confidence score (0-100%), risk level, ISP, country, total reports, and "
    "optional verbose report details."
)
BULK_CHECK_DESCRIPTION = (
    "Check the reputation of multiple IP addresses in batch (up to 100). Returns a "
    "summary of flagged IPs with confidence scores, risk levels, and country/ISP "
    "information."
)
CHECK_BLOCK_DESCRIPTION = (
    "Check all reported IP addresses within a CIDR network block against "
    "AbuseIPDB. Returns network summary, total reported addresses, and top threats "
    "sorted by confidence score. Requires AbuseIPDB subscription plan."
)
GET_BLACKLIST_DESCRIPTION = (
    "Retrieve the AbuseIPDB blacklist of most-reported malicious IP addresses. "
    "Returns confidence distribution, top countries, and sample entries. Requires "
    "AbuseIPDB subscription plan."
)


def build_registry(
    client: AbuseIPDBClient,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> ToolRegistry:
    """Register the four AbuseIPDB operations against `client`."""
    registry = ToolRegistry(max_tokens=max_tokens)

    def run_check_ip(args: CheckIpArgs) -> str:
        return lookups.check_ip(
            client,
            args.ip_address,
            max_age_days=args.max_age_days,
            verbose=args.verbose,
            threshold=args.threshold,
        )

    def run_bulk_check(args: BulkCheckArgs) -> str:
        return lookups.bulk_check(
            client,
            args.ip_addresses,
            max_age_days=args.max_age_days,
            threshold=args.threshold,
        )

    def run_check_block(args: CheckBlockArgs) -> str:
        return lookups.check_block(
            client,
            args.network,
            max_age_days=args.max_age_days,
            confidence_threshold=args.confidence_threshold,
        )

    def run_get_blacklist(args: GetBlacklistArgs) -> str:
        return lookups.get_blacklist(
            client,
            confidence_minimum=args.confidence_minimum,
            limit=args.limit,
            plain_text=args.plain_text,
        )

    registry.register("check_ip", CHECK_IP_DESCRIPTION, CheckIpArgs, run_check_ip)
    registry.register("bulk_check", BULK_CHECK_DESCRIPTION, BulkCheckArgs, run_bulk_check)
    registry.register(
        "check_block", CHECK_BLOCK_DESCRIPTION, CheckBlockArgs, run_check_block,
        guarded=True,
    )
    registry.register(
        "get_blacklist", GET_BLACKLIST_DESCRIPTION, GetBlacklistArgs, run_get_blacklist,
        guarded=True,
    )
    return registry
