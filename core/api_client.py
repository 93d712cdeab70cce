# =============================================================================
# core/api_client.py  —  AbuseIPDB HTTP Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Builds a `requests.Session` bound to the AbuseIPDB base URL and ONE
#   credential header, then exposes a tiny request surface:
#
#     request(method, path, params) -> requests.Response
#     get_json(path, params)        -> dict
#     get_text(path, params)        -> str
#
# AUTH MODES (resolved once, at construction):
#
#   NativeKey        → "Key: <api key>"            (BYOK / direct mode)
#   ProxyToken       → "Authorization: Bearer ..." (proxy / delegated mode)
#   Unauthenticated  → no header; AbuseIPDB will answer 401
#
#   An API key always wins over a bearer token.  Both headers are never sent.
#
# NO RETRIES:
#   A failed call raises UpstreamError straight away.  Bulk checks run one
#   address at a time and record failures per address (core/lookups.py).
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import requests

from core.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.abuseipdb.com/api/v2"
DEFAULT_TIMEOUT_MS = 30000


# -----------------------------------------------------------------------------
# Credential variants
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class NativeKey:
    """AbuseIPDB's own API key, sent as the `Key` header."""

    key: str = field(repr=False)

    def headers(self) -> dict[str, str]:
        return {"Key": self.key}


@dataclass(frozen=True)
class ProxyToken:
    """Bearer token for an intermediary that injects the real key."""

    token: str = field(repr=False)

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@dataclass(frozen=True)
class Unauthenticated:
    """No credential at all."""

    def headers(self) -> dict[str, str]:
        return {}


Credential = Union[NativeKey, ProxyToken, Unauthenticated]


def resolve_credential(
    api_key: Optional[str] = None, auth_token: Optional[str] = None
) -> Credential:
    """Pick the credential variant: API key first, then bearer token."""
    if api_key:
        return NativeKey(api_key)
    if auth_token:
        return ProxyToken(auth_token)
    return Unauthenticated()


# -----------------------------------------------------------------------------
# ApiConfig — everything the client needs, nothing else
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ApiConfig:
    """Client configuration (see core/config.py for where it comes from)."""

    api_key: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None
    auth_token: Optional[str] = field(default=None, repr=False)
    timeout_ms: int = DEFAULT_TIMEOUT_MS


class AbuseIPDBClient:
    """Thin wrapper around a `requests.Session` for the AbuseIPDB v2 API."""

    def __init__(
        self,
        config: ApiConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (config.base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = config.timeout_ms / 1000
        self.credential = resolve_credential(config.api_key, config.auth_token)

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )
        self.session.headers.update(self.credential.headers())

    @property
    def auth_mode(self) -> str:
        return type(self.credential).__name__

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        """Send one request and return the 2xx response.

        Raises:
            UpstreamError: On a network failure or a non-2xx status.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s params=%s", method, path, params)

        try:
            response = self.session.request(
                method, url, params=params, timeout=self.timeout
            )
        except requests.Timeout as e:
            raise UpstreamError(
                f"AbuseIPDB request timed out after {self.timeout:g}s"
            ) from e
        except requests.RequestException as e:
            raise UpstreamError(f"AbuseIPDB request failed: {e}") from e

        if not response.ok:
            raise UpstreamError(
                "AbuseIPDB API error",
                status_code=response.status_code,
                details=_error_details(response),
            )
        return response

    def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        response = self.request("GET", path, params)
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                "AbuseIPDB returned a non-JSON body",
                status_code=response.status_code,
            ) from e
        if not isinstance(payload, dict):
            raise UpstreamError(
                "AbuseIPDB returned an unexpected payload",
                status_code=response.status_code,
            )
        return payload

    def get_text(self, path: str, params: Optional[dict[str, Any]] = None) -> str:
        return self.request("GET", path, params).text


def _error_details(response: requests.Response) -> Optional[str]:
    """Pull `errors[].detail` out of an AbuseIPDB error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list):
            details = [
                str(err.get("detail"))
                for err in errors
                if isinstance(err, dict) and err.get("detail")
            ]
            if details:
                return "; ".join(details)
        if body.get("message"):
            return str(body["message"])
    return response.text.strip() or None
