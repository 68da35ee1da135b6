# =============================================================================
# main.py  -  Entry Point for the ShopSavvy Data API MCP Server
# =============================================================================
#
# HOW TO RUN:
#   SHOPSAVVY_API_KEY=ss_live_... uv run python main.py
#   (or put the key in a .env file next to this script)
#
# WHAT HAPPENS:
#   1. Loads .env into the environment (python-dotenv)
#   2. Validates SHOPSAVVY_API_KEY / SHOPSAVVY_BASE_URL into an ApiConfig
#   3. Builds the FastMCP server with every tool registered
#   4. Serves MCP over stdio until the client disconnects
#
# STARTUP FAILURE:
#   A missing or malformed key prints a diagnostic to stderr and exits with
#   status 1.  No tool is registered and nothing is served.
#
# ENVIRONMENT:
#   SHOPSAVVY_API_KEY    required, ss_live_<32 chars> or ss_test_<32 chars>
#   SHOPSAVVY_BASE_URL   optional, defaults to https://shopsavvy.com/api/v1
#   SHOPSAVVY_LOG_LEVEL  optional, defaults to INFO
# =============================================================================

import logging
import os
import sys

from dotenv import load_dotenv

from pricing_core.config import load_config
from pricing_core.errors import ConfigurationError
from pricing_tools.mcp_server import build_server, configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    # .env first: load_config reads os.environ
    load_dotenv()
    configure_logging(os.environ.get("SHOPSAVVY_LOG_LEVEL", "INFO"))

    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    server = build_server(config)
    logger.info("🛍️ ShopSavvy Data API MCP Server starting")
    logger.info("📍 API Base URL: %s", config.base_url)
    if config.is_test_key:
        logger.info("Using a ShopSavvy test key")

    server.run(transport="stdio")


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
