# =============================================================================
# pricing_tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   pricing_tools/ is the translation layer between the MCP protocol and
#   pricing_core/.  Each tool:
#     1. Declares typed, described parameters (the schema the assistant sees)
#     2. Logs the call to stderr
#     3. Hands the arguments to pricing_core.operations.run_operation
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT validate, build requests, or format reports (pricing_core)
#   - They do NOT read the environment (main.py builds the ApiConfig)
# =============================================================================

from pricing_tools.mcp_server import build_server, configure_logging

__all__ = ["build_server", "configure_logging"]
