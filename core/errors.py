# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the lookup layer can produce is one of these.  The
# dispatcher (tools/registry.py) turns them into error results for the
# agent host, so nothing raised here ever crashes the server process.
#
#   AbuseIPDBError
#     ├── InvalidArgumentsError  → bad input, raised BEFORE any network call
#     └── UpstreamError          → AbuseIPDB (or the proxy) said no
#
# Budget denials are NOT exceptions: see core/token_budget.py.
# =============================================================================

from typing import Optional


class AbuseIPDBError(Exception):
    """Base class for errors raised by the lookup layer."""


class InvalidArgumentsError(AbuseIPDBError):
    """Arguments failed validation; no request was sent."""


class UpstreamError(AbuseIPDBError):
    """The upstream API failed, refused the request, or sent garbage."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.details = details
        text = message
        if status_code is not None:
            text = f"{text} (HTTP {status_code})"
        if details:
            text = f"{text}: {details}"
        super().__init__(text)
