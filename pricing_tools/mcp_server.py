# =============================================================================
# pricing_tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes every operation in pricing_core.operations as an MCP tool.  Each
#   tool is a thin wrapper: typed parameters + the catalog description the
#   assistant reads, then one call into run_operation().
#
# HOW IT WORKS (the flow):
#   1. The assistant calls a tool by name via MCP (e.g., "product_offers")
#   2. FastMCP routes the call to the decorated function below
#   3. The function hands its arguments to run_operation() on a worker thread
#   4. run_operation validates, calls ShopSavvy, renders markdown
#   5. The assistant receives the report (or a "❌ Error ..." line)
#
# TOOL NAMING:
#   product_*  ->  one or more products, by identifier
#   *_list / api_usage  ->  account-level reads, no identifier
#   product_schedule / product_unschedule are the only writes; both are
#   safe to repeat (ShopSavvy keys schedules by product).
#
# SERVER CONSTRUCTION:
#   There is no module-level server.  build_server(config) receives the
#   already-validated ApiConfig, so a bad key stops main.py before a
#   single tool is registered.
# =============================================================================

import asyncio
import logging
import sys
from typing import Annotated, Optional

from fastmcp import FastMCP
from pydantic import Field

from pricing_core.config import ApiConfig
from pricing_core.gateway import GatewayClient, Opener
from pricing_core.operations import OPERATIONS, get_operation, run_operation
from pricing_core.validation import SCHEDULE_FREQUENCIES

SERVER_NAME = "ShopSavvy Data API"

SERVER_INSTRUCTIONS = """
This server provides access to ShopSavvy's product database and pricing data.

Key capabilities:
- Look up products by barcode, ASIN, URL, model number, or ShopSavvy ID
- Get current pricing offers from multiple retailers
- Access historical pricing data with custom date ranges
- Schedule products for automatic price monitoring (hourly, daily, weekly)
- Track API usage and credit consumption

Credit-based pricing:
- Product lookup: 1 credit per product found
- Current offers (all retailers): 3 credits per product
- Current offers (single retailer): 2 credits per product
- Historical data: 3 credits + 1 credit per day of history
- Scheduling: 1 credit per product scheduled

Always provide specific, actionable product information to help users make informed purchasing decisions.
""".strip()

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR.  STDOUT carries the MCP JSON-RPC stream; a stray log
# line there would corrupt the protocol.
#
# ANSI colors:  CYAN = tool call + params,  YELLOW = status,  GREEN = response
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger("pricing_tools")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: str) -> str:
    """Log the first line of the report in GREEN, then return the report."""
    headline = result.splitlines()[0] if result else ""
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(result)} chars): {headline}{_RESET}")
    return result


# =============================================================================
# Parameter types
# =============================================================================
# Annotated[..., Field(description=...)] becomes the JSON schema the
# assistant sees for each argument.
# =============================================================================
Identifier = Annotated[
    str,
    Field(description="Product identifier (barcode/UPC/EAN, ASIN, product URL, model number, or ShopSavvy ID)"),
]
Identifiers = Annotated[
    str,
    Field(description="Comma-separated list of product identifiers (barcodes, ASINs, URLs, etc.)"),
]
Retailer = Annotated[
    str,
    Field(description="Retailer domain name (e.g., 'amazon.com', 'bestbuy.com', 'target.com')"),
]
OptionalRetailer = Annotated[
    Optional[str],
    Field(description="Optional: specific retailer domain name to filter results"),
]
StartDate = Annotated[str, Field(description="Start date in YYYY-MM-DD format (e.g., '2024-01-01')")]
EndDate = Annotated[str, Field(description="End date in YYYY-MM-DD format (e.g., '2024-01-31')")]
# Plain str: require_schedule rejects bad values; the enum is schema-only.
Frequency = Annotated[
    str,
    Field(
        description="Monitoring frequency: hourly, daily, or weekly",
        json_schema_extra={"enum": list(SCHEDULE_FREQUENCIES)},
    ),
]


# =============================================================================
# Server factory
# =============================================================================
def build_server(config: ApiConfig, opener: Optional[Opener] = None) -> FastMCP:
    """Create the FastMCP server with every ShopSavvy tool registered.

    Args:
        config: Validated, immutable ApiConfig (see pricing_core.config).
        opener: Optional HTTP opener for the gateway; tests inject a fake.

    Returns:
        A FastMCP instance ready for .run().
    """
    client = GatewayClient(config, opener=opener)
    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

    async def dispatch(tool_name: str, **arguments) -> str:
        _log_request(tool_name, **arguments)
        operation = get_operation(tool_name)
        _log_status(f"{operation.method} {operation.endpoint}")
        # urllib blocks; run it off the event loop
        report = await asyncio.to_thread(run_operation, client, operation, **arguments)
        return _log_response(tool_name, report)

    # =========================================================================
    # Product lookup
    # =========================================================================
    @mcp.tool(description=OPERATIONS["product_lookup"].description)
    async def product_lookup(identifier: Identifier) -> str:
        """Look up one product.

        WHEN TO CALL THIS: the user names a product by barcode, ASIN, URL,
        model number or ShopSavvy ID and wants to know what it is.

        Returns brand, category, color, model, MPN, barcode, ASIN and
        ShopSavvy ID ("N/A" where ShopSavvy has no value), plus credit usage.
        """
        return await dispatch("product_lookup", identifier=identifier)

    @mcp.tool(description=OPERATIONS["product_lookup_batch"].description)
    async def product_lookup_batch(identifiers: Identifiers) -> str:
        """Look up several products in one call; results keep ShopSavvy's order."""
        return await dispatch("product_lookup_batch", identifiers=identifiers)

    # =========================================================================
    # Pricing
    # =========================================================================
    @mcp.tool(description=OPERATIONS["product_offers"].description)
    async def product_offers(identifier: Identifier) -> str:
        """Current offers from every retailer, cheapest first.

        Offers without a price are listed last.  Costs more credits than a
        lookup; prefer product_offers_retailer when one store is enough.
        """
        return await dispatch("product_offers", identifier=identifier)

    @mcp.tool(description=OPERATIONS["product_offers_retailer"].description)
    async def product_offers_retailer(identifier: Identifier, retailer: Retailer) -> str:
        """Current offers from a single retailer domain."""
        return await dispatch("product_offers_retailer", identifier=identifier, retailer=retailer)

    @mcp.tool(description=OPERATIONS["product_price_history"].description)
    async def product_price_history(
        identifier: Identifier,
        start_date: StartDate,
        end_date: EndDate,
        retailer: OptionalRetailer = None,
    ) -> str:
        """Price points per retailer between start_date and end_date (inclusive).

        Dates must be YYYY-MM-DD.  History is billed per day, so keep the
        window as short as the question allows.
        """
        return await dispatch(
            "product_price_history",
            identifier=identifier,
            start_date=start_date,
            end_date=end_date,
            retailer=retailer,
        )

    # =========================================================================
    # Scheduling
    # =========================================================================
    @mcp.tool(description=OPERATIONS["product_schedule"].description)
    async def product_schedule(
        identifiers: Identifiers,
        schedule: Frequency,
        retailer: Annotated[
            Optional[str],
            Field(description="Optional: specific retailer domain to monitor"),
        ] = None,
    ) -> str:
        """Ask ShopSavvy to refresh prices for these products hourly, daily or weekly."""
        return await dispatch(
            "product_schedule",
            identifiers=identifiers,
            schedule=schedule,
            retailer=retailer,
        )

    @mcp.tool(description=OPERATIONS["product_unschedule"].description)
    async def product_unschedule(
        identifiers: Annotated[
            str,
            Field(description="Comma-separated list of product identifiers to unschedule"),
        ],
    ) -> str:
        """Stop monitoring these products.  Free."""
        return await dispatch("product_unschedule", identifiers=identifiers)

    @mcp.tool(description=OPERATIONS["scheduled_products_list"].description)
    async def scheduled_products_list() -> str:
        """Everything currently monitored, grouped by frequency.  Free."""
        return await dispatch("scheduled_products_list")

    # =========================================================================
    # Account
    # =========================================================================
    @mcp.tool(description=OPERATIONS["api_usage"].description)
    async def api_usage() -> str:
        """Credits used, limit, remaining and requests made this billing period."""
        return await dispatch("api_usage")

    return mcp
