# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Publishes the four AbuseIPDB operations as MCP tools.  Each tool is a
#   thin wrapper: it forwards the arguments the host actually sent to the
#   dispatcher (tools/registry.py) and returns the text it gets back.
#
# HOW IT WORKS (the flow):
#   1. The agent host calls a tool by name via MCP (e.g. "check_ip")
#   2. FastMCP routes the call to the decorated function below
#   3. The function drops unset (None) arguments and calls dispatch()
#   4. dispatch() validates, calls AbuseIPDB, summarizes, applies the
#      token budget and returns a ToolResult
#   5. An error result is raised as ToolError, so the host sees an MCP
#      error instead of a normal answer
#
# TOOL NAMING CONVENTIONS:
#   - check_*  → lookup of one address or one block
#   - bulk_*   → many lookups in one call
#   - get_*    → read-only retrieval of a published list
#   All tools are read-only and safe to retry.
#
# RUNNING THIS SERVER:
#   python main.py                       (stdio, the default)
#   MCP_TRANSPORT=http python main.py    (streamable HTTP + /health)
# =============================================================================

import logging
import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from starlette.requests import Request
from starlette.responses import JSONResponse

from core.api_client import AbuseIPDBClient
from core.config import Settings
from tools.operations import build_registry
from tools.registry import ToolRegistry
from tools.schemas import (
    DEFAULT_CONFIDENCE_MINIMUM,
    DEFAULT_MAX_AGE_DAYS,
    DEFAULT_THRESHOLD,
    BlacklistLimit,
    BreakTokenRule,
    ConfidenceMinimum,
    ConfidenceThreshold,
    IpAddress,
    IpAddressList,
    MaxAgeDays,
    Network,
    PlainText,
    Threshold,
    Verbose,
)

SERVER_NAME = "abuseipdb-mcp-server"
SERVER_VERSION = "1.0.0"
SERVER_INSTRUCTIONS = (
    "AbuseIPDB MCP Server - IP reputation, abuse confidence scoring, "
    "and threat blacklist"
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because in stdio mode the MCP server talks to the host
# over STDOUT.  A log line on stdout would corrupt the JSON-RPC stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for responses
#     - YELLOW for intermediate status/progress messages
#     - RED for error results
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RED = "\033[31m"      # Error results
_RESET = "\033[0m"     # Reset to default terminal color

logger = logging.getLogger("abuseipdb.mcp")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


def _log_request(tool_name: str, **params: Any) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str, is_error: bool = False) -> None:
    """Log the size of a response (GREEN) or the error text (RED)."""
    if is_error:
        logger.info(f"{_RED}  ← {tool_name} error: {text}{_RESET}")
    else:
        logger.info(f"{_GREEN}  ← {tool_name} response: {len(text):,} chars{_RESET}")


def run_tool(registry: ToolRegistry, tool_name: str, **params: Any) -> str:
    """Dispatch one tool call; raise ToolError on an error result.

    Parameters left as None (only `limit` defaults to None) are not forwarded,
    so the argument schema supplies their defaults.
    """
    arguments = {k: v for k, v in params.items() if v is not None}
    _log_request(tool_name, **arguments)

    result = registry.dispatch(tool_name, arguments)
    _log_response(tool_name, result.text, result.is_error)
    if result.is_error:
        raise ToolError(result.text)
    return result.text


# =============================================================================
# Server factory
# =============================================================================
def create_server(
    settings: Settings,
    client: Optional[AbuseIPDBClient] = None,
) -> FastMCP:
    """Build the FastMCP server with all four AbuseIPDB tools attached."""
    client = client or AbuseIPDBClient(settings.api_config())
    registry = build_registry(client, max_tokens=settings.max_token_call)
    _log_status(
        f"AbuseIPDB client ready: base_url={client.base_url}, auth={client.auth_mode}, "
        f"max_token_call={settings.max_token_call}"
    )

    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, version=SERVER_VERSION)

    def describe(name: str) -> str:
        spec = registry.get(name)
        return spec.description if spec else ""

    # =========================================================================
    # TOOL 1: check_ip
    # =========================================================================
    @mcp.tool(name="check_ip", description=describe("check_ip"))
    def check_ip(
        ip_address: IpAddress,
        max_age_days: MaxAgeDays = DEFAULT_MAX_AGE_DAYS,
        verbose: Verbose = False,
        threshold: Threshold = DEFAULT_THRESHOLD,
    ) -> str:
        return run_tool(
            registry, "check_ip",
            ip_address=ip_address, max_age_days=max_age_days,
            verbose=verbose, threshold=threshold,
        )

    # =========================================================================
    # TOOL 2: bulk_check
    # =========================================================================
    # Lookups run one at a time inside the handler, so a 100-address call
    # takes a while.  Failed addresses are reported, not fatal.
    # =========================================================================
    @mcp.tool(name="bulk_check", description=describe("bulk_check"))
    def bulk_check(
        ip_addresses: IpAddressList,
        max_age_days: MaxAgeDays = DEFAULT_MAX_AGE_DAYS,
        threshold: Threshold = DEFAULT_THRESHOLD,
    ) -> str:
        return run_tool(
            registry, "bulk_check",
            ip_addresses=ip_addresses, max_age_days=max_age_days, threshold=threshold,
        )

    # =========================================================================
    # TOOL 3: check_block  (token budget guarded)
    # =========================================================================
    @mcp.tool(name="check_block", description=describe("check_block"))
    def check_block(
        network: Network,
        max_age_days: MaxAgeDays = DEFAULT_MAX_AGE_DAYS,
        confidence_threshold: ConfidenceThreshold = DEFAULT_THRESHOLD,
        break_token_rule: BreakTokenRule = False,
    ) -> str:
        return run_tool(
            registry, "check_block",
            network=network, max_age_days=max_age_days,
            confidence_threshold=confidence_threshold,
            break_token_rule=break_token_rule,
        )

    # =========================================================================
    # TOOL 4: get_blacklist  (token budget guarded)
    # =========================================================================
    @mcp.tool(name="get_blacklist", description=describe("get_blacklist"))
    def get_blacklist(
        confidence_minimum: ConfidenceMinimum = DEFAULT_CONFIDENCE_MINIMUM,
        limit: BlacklistLimit = None,
        plain_text: PlainText = False,
        break_token_rule: BreakTokenRule = False,
    ) -> str:
        return run_tool(
            registry, "get_blacklist",
            confidence_minimum=confidence_minimum, limit=limit,
            plain_text=plain_text, break_token_rule=break_token_rule,
        )

    # Only served in HTTP mode; stdio has no routes.
    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "transport": "streamable-http"})

    return mcp
