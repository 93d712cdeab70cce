# =============================================================================
# tools/__init__.py
# =============================================================================
# This package is the "translation layer" between an MCP agent host and
# core/:
#
#   schemas.py     → pydantic argument contracts (bounds enforced here)
#   registry.py    → name → operation map + the dispatch pipeline
#   operations.py  → registers the four AbuseIPDB operations
#   mcp_server.py  → FastMCP tools that call the dispatcher
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk HTTP to AbuseIPDB (that's core/api_client.py)
#   - They do NOT format reports (that's core/summaries.py)
# =============================================================================
