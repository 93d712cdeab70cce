# =============================================================================
# main.py  —  Entry Point for the AbuseIPDB MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py                      # stdio (agent host spawns us)
#   MCP_TRANSPORT=http uv run python main.py   # streamable HTTP on :3000
#
# WHAT HAPPENS:
#   1. Loads .env (ABUSEIPDB_API_KEY, ABUSEIPDB_AUTH_TOKEN, ...)
#   2. Reads and validates Settings from the environment (core/config.py)
#   3. Configures logging to stderr
#   4. Builds the FastMCP server with all tools (tools/mcp_server.py)
#   5. Runs it on the selected transport until the host disconnects
# =============================================================================

import sys

from dotenv import load_dotenv

# Load environment variables from .env BEFORE reading settings.
load_dotenv()

from core.config import Settings
from tools.mcp_server import configure_logging, create_server, logger


def main() -> None:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        sys.stderr.write(f"Configuration error: {e}\n")
        sys.exit(1)

    configure_logging(settings.log_level)
    server = create_server(settings)

    if settings.transport == "http":
        logger.info(
            f"Starting AbuseIPDB MCP Server in HTTP mode on "
            f"{settings.http_host}:{settings.http_port}"
        )
        server.run(transport="http", host=settings.http_host, port=settings.http_port)
    else:
        logger.info("Starting AbuseIPDB MCP Server in stdio mode")
        server.run()


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
