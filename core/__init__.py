# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL AbuseIPDB logic: the HTTP client, the data
# models, the summaries, the token budget guard and the operation handlers.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or pydantic.  Every module here
#   is plain Python plus `requests`, so it can be unit-tested with a mocked
#   HTTP session and no MCP host.
# =============================================================================
