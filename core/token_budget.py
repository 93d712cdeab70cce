# =============================================================================
# core/token_budget.py  —  Output Size Guard
# =============================================================================
#
# Some AbuseIPDB answers are huge (a /16 block, a full blacklist).  Before a
# guarded tool hands its text back to the agent we estimate how many tokens
# it would cost and refuse if it blows the configured budget.
#
# The estimate is ~4 characters per token: a proxy for context-window
# cost, not a tokenizer.
#
# ESCAPE HATCH:
#   Guarded tools take `break_token_rule=True`.  With it the guard always
#   allows, whatever the size.
# =============================================================================

import math
from dataclasses import dataclass
from typing import Optional

CHARS_PER_TOKEN = 4
DEFAULT_MAX_TOKENS = 20000


@dataclass(frozen=True)
class TokenBudgetDecision:
    """Outcome of a budget check.  `error` is set only when denied."""

    allowed: bool
    estimated_tokens: int
    max_tokens: int
    error: Optional[str] = None


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def check_token_budget(
    text: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    override: bool = False,
) -> TokenBudgetDecision:
    """Decide whether `text` may be returned to the agent.

    Args:
        text: The fully rendered tool output.
        max_tokens: Budget in estimated tokens.
        override: The caller passed break_token_rule=True.

    Returns:
        A TokenBudgetDecision; when denied, `error` explains the estimate,
        the budget, and the override flag.
    """
    estimated = estimate_tokens(text)
    if override or estimated <= max_tokens:
        return TokenBudgetDecision(
            allowed=True, estimated_tokens=estimated, max_tokens=max_tokens
        )

    error = (
        f"Response too large: an estimated {estimated:,} tokens exceeds the "
        f"limit of {max_tokens:,} tokens.\n"
        "Narrow the request instead (a smaller network block, a higher "
        "confidence minimum, or a lower limit).\n"
        "If the full output is critical, repeat the call with "
        "break_token_rule=true to bypass this limit."
    )
    return TokenBudgetDecision(
        allowed=False, estimated_tokens=estimated, max_tokens=max_tokens, error=error
    )
