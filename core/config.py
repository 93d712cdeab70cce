"""Configuration for the AbuseIPDB MCP server.

Loads and validates environment variables once at process start.
`main.py` calls `load_dotenv()` before `Settings.from_env()`, so a `.env`
file in the working directory is honoured.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from core.api_client import DEFAULT_TIMEOUT_MS, ApiConfig
from core.token_budget import DEFAULT_MAX_TOKENS

TRANSPORTS = ("stdio", "http")


@dataclass(frozen=True)
class Settings:
    """Application configuration loaded from environment variables."""

    # AbuseIPDB Configuration
    api_key: Optional[str] = field(default=None, repr=False)
    auth_token: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    # Output Governance
    max_token_call: int = DEFAULT_MAX_TOKENS

    # Transport Configuration
    transport: str = "stdio"
    http_host: str = "localhost"
    http_port: int = 3000

    # Operational Configuration
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration from environment variables.

        Raises:
            ValueError: If a variable is present but invalid.

        Returns:
            Settings: Validated configuration instance.
        """
        base_url = os.getenv("ABUSEIPDB_BASE_URL") or None
        if base_url is not None:
            parsed = urlparse(base_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError("ABUSEIPDB_BASE_URL must be an http(s) URL")

        timeout_ms = cls._get_int_env("ABUSEIPDB_TIMEOUT", DEFAULT_TIMEOUT_MS)
        if timeout_ms <= 0:
            raise ValueError("ABUSEIPDB_TIMEOUT must be a positive number of milliseconds")

        max_token_call = cls._get_int_env("MAX_TOKEN_CALL", DEFAULT_MAX_TOKENS)
        if max_token_call <= 0:
            raise ValueError("MAX_TOKEN_CALL must be a positive integer")

        transport = os.getenv("MCP_TRANSPORT", "stdio").strip().lower()
        if transport not in TRANSPORTS:
            raise ValueError(f"MCP_TRANSPORT must be one of: {', '.join(TRANSPORTS)}")

        http_port = cls._get_int_env("MCP_HTTP_PORT", 3000)
        if not 1 <= http_port <= 65535:
            raise ValueError("MCP_HTTP_PORT must be between 1 and 65535")

        log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"LOG_LEVEL {log_level!r} is not a logging level")

        return cls(
            api_key=os.getenv("ABUSEIPDB_API_KEY") or None,
            auth_token=os.getenv("ABUSEIPDB_AUTH_TOKEN") or None,
            base_url=base_url,
            timeout_ms=timeout_ms,
            max_token_call=max_token_call,
            transport=transport,
            http_host=os.getenv("MCP_HTTP_HOST", "localhost"),
            http_port=http_port,
            log_level=log_level,
        )

    @staticmethod
    def _get_int_env(key: str, default: int) -> int:
        """Get an integer environment variable or its default.

        Raises:
            ValueError: If the variable is set but not an integer.
        """
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {value!r}") from None

    def api_config(self) -> ApiConfig:
        return ApiConfig(
            api_key=self.api_key,
            base_url=self.base_url,
            auth_token=self.auth_token,
            timeout_ms=self.timeout_ms,
        )
