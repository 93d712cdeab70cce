# =============================================================================
# tools/schemas.py  —  Argument Contracts
# =============================================================================
#
# One pydantic model per tool.  The bounds here are CONTRACT: the dispatcher
# validates raw arguments against these models before a handler runs, so a
# bad `max_age_days` or a 101-address bulk list never reaches the network.
#
# The field types below (MaxAgeDays, Threshold, ...) are shared with the
# FastMCP tool signatures in tools/mcp_server.py, so the schema the host
# sees carries the same bounds, defaults and descriptions.
#
# Unknown fields are rejected (extra="forbid") so a typo like
# `max_age_day=7` fails loudly instead of silently using the default.
# =============================================================================

import ipaddress
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------
DEFAULT_MAX_AGE_DAYS = 30
DEFAULT_THRESHOLD = 75
DEFAULT_CONFIDENCE_MINIMUM = 90

# -----------------------------------------------------------------------------
# Field types
# -----------------------------------------------------------------------------
IpAddress = Annotated[str, Field(description="IPv4 or IPv6 address to check")]
IpAddressList = Annotated[
    list[str],
    Field(
        min_length=1, max_length=100,
        description="List of IPv4/IPv6 addresses to check (1-100)",
    ),
]
Network = Annotated[
    str, Field(description='CIDR network block to check, e.g. "198.51.100.0/24"')
]
MaxAgeDays = Annotated[
    int,
    Field(ge=1, le=365, description="Look-back window in days for abuse reports (1-365)"),
]
Threshold = Annotated[
    int,
    Field(ge=0, le=100, description="Abuse confidence % at which an IP is flagged (0-100)"),
]
ConfidenceThreshold = Annotated[
    int,
    Field(
        ge=0, le=100,
        description="Confidence % to classify addresses as high-confidence threats (0-100)",
    ),
]
ConfidenceMinimum = Annotated[
    int,
    Field(ge=25, le=100, description="Minimum abuse confidence score to include (25-100)"),
]
BlacklistLimit = Annotated[
    Optional[Annotated[int, Field(ge=1, le=500000)]],
    Field(description="Maximum number of entries to return (1-500000, default: plan limit)"),
]
Verbose = Annotated[bool, Field(description="Include individual report details in the response")]
PlainText = Annotated[
    bool, Field(description="Ask AbuseIPDB for a plain address list instead of JSON")
]
BreakTokenRule = Annotated[
    bool,
    Field(
        description=(
            "Bypass the response size limit. Only use this when the full "
            "output is critical; large responses consume the context window."
        ),
    ),
]


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class BudgetGuardedArguments(ToolArguments):
    break_token_rule: BreakTokenRule = False


class CheckIpArgs(ToolArguments):
    ip_address: IpAddress
    max_age_days: MaxAgeDays = DEFAULT_MAX_AGE_DAYS
    verbose: Verbose = False
    threshold: Threshold = DEFAULT_THRESHOLD

    @field_validator("ip_address")
    @classmethod
    def _valid_ip(cls, value: str) -> str:
        value = value.strip()
        try:
            ipaddress.ip_address(value)
        except ValueError:
            raise ValueError(f"{value!r} is not a valid IPv4 or IPv6 address") from None
        return value


class BulkCheckArgs(ToolArguments):
    ip_addresses: IpAddressList
    max_age_days: MaxAgeDays = DEFAULT_MAX_AGE_DAYS
    threshold: Threshold = DEFAULT_THRESHOLD


class CheckBlockArgs(BudgetGuardedArguments):
    network: Network
    max_age_days: MaxAgeDays = DEFAULT_MAX_AGE_DAYS
    confidence_threshold: ConfidenceThreshold = DEFAULT_THRESHOLD

    @field_validator("network")
    @classmethod
    def _valid_cidr(cls, value: str) -> str:
        value = value.strip()
        if "/" not in value:
            raise ValueError(f"{value!r} is not in CIDR notation (address/prefix)")
        try:
            ipaddress.ip_network(value, strict=False)
        except ValueError as e:
            raise ValueError(f"{value!r} is not a valid CIDR network: {e}") from None
        return value


class GetBlacklistArgs(BudgetGuardedArguments):
    confidence_minimum: ConfidenceMinimum = DEFAULT_CONFIDENCE_MINIMUM
    limit: BlacklistLimit = None
    plain_text: PlainText = False
