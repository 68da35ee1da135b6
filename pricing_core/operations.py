# =============================================================================
# pricing_core/operations.py  -  Operation Catalog & Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares every ShopSavvy operation ONCE as data (endpoint, method,
#   whether it costs credits, how to validate its arguments, how to render
#   its envelope) and runs all of them through a single pipeline:
#
#     arguments
#       -> build_params   (validation; raises before any request exists)
#       -> GatewayClient.call
#       -> render         (normalizer + reports)
#       -> usage line
#
# BOUNDARY RULE:
#   run_operation() never raises.  Validation, upstream, transport and
#   integrity failures all come back as "❌ Error <doing what>: <why>".
#
# Nothing here is cached or retried: each invocation is one fresh round trip.
# =============================================================================

from dataclasses import dataclass
import logging
from typing import Any, Callable, Optional

from pricing_core.errors import IntegrityError, PricingError
from pricing_core.gateway import GatewayClient
from pricing_core.models import Envelope
from pricing_core.normalizer import (
    parse_product_history,
    parse_product_offers,
    parse_products,
    parse_schedule_entries,
    parse_usage,
)
from pricing_core.reports import (
    NO_SCHEDULED_PRODUCTS,
    format_offers,
    format_price_history,
    format_product,
    format_product_batch,
    format_retailer_offers,
    format_schedule_list,
    format_scheduled,
    format_unscheduled,
    format_usage,
    with_usage,
)
from pricing_core.validation import (
    join_identifiers,
    normalize_retailer,
    require_date,
    require_identifier,
    require_schedule,
)

logger = logging.getLogger(__name__)

Params = dict[str, Any]


@dataclass(frozen=True)
class Operation:
    """One callable unit at the tool boundary."""

    name: str
    description: str
    endpoint: str
    method: str
    build_params: Callable[[dict], Params]
    render: Callable[[Envelope, Params], str]
    failure: str                           # "looking up product" -> "❌ Error looking up product: ..."
    metered: bool = True                   # metered calls must carry a meta block
    free_action: Optional[str] = None      # wording for the zero-cost usage line
    quote_meta: bool = True                # False when the report body already shows the credit balance


def run_operation(client: GatewayClient, operation: Operation, **arguments: Any) -> str:
    """Execute one operation end to end and return its report.

    Always returns text; failures are formatted, logged, and returned.
    """
    logger.info("%s: starting", operation.name)
    try:
        params = operation.build_params(arguments)
        envelope = client.call(
            operation.endpoint,
            operation.method,
            params,
            require_meta=operation.metered,
        )
        report = operation.render(envelope, params)
    except PricingError as e:
        logger.error("%s failed: %s", operation.name, e)
        return f"❌ Error {operation.failure}: {e}"
    except Exception as e:
        logger.exception("%s failed unexpectedly", operation.name)
        return f"❌ Error {operation.failure}: unexpected {type(e).__name__}: {e}"

    if envelope.meta is not None:
        logger.info(
            "%s: %d credits used, %d remaining",
            operation.name,
            envelope.meta.credits_used,
            envelope.meta.credits_remaining,
        )
    footer_meta = envelope.meta if operation.quote_meta else None
    return with_usage(report, footer_meta, operation.free_action)


# =============================================================================
# Parameter builders (validation happens here)
# =============================================================================
def _single_product_params(args: dict) -> Params:
    return {"ids": require_identifier(args.get("identifier"))}


def _batch_params(args: dict) -> Params:
    return {"ids": join_identifiers(args.get("identifiers"))}


def _retailer_offer_params(args: dict) -> Params:
    return {
        "ids": require_identifier(args.get("identifier")),
        "retailer": normalize_retailer(args.get("retailer"), required=True),
    }


def _history_params(args: dict) -> Params:
    return {
        "ids": require_identifier(args.get("identifier")),
        "start": require_date(args.get("start_date"), "start_date"),
        "end": require_date(args.get("end_date"), "end_date"),
        "retailer": normalize_retailer(args.get("retailer")),
    }


def _schedule_params(args: dict) -> Params:
    return {
        "ids": join_identifiers(args.get("identifiers")),
        "schedule": require_schedule(args.get("schedule")),
        "retailer": normalize_retailer(args.get("retailer")),
    }


def _no_params(args: dict) -> Params:
    return {}


# =============================================================================
# Renderers
# =============================================================================
def _not_found(params: Params) -> str:
    ids = params.get("ids", "")
    noun = "products" if "," in ids else "product"
    label = "identifiers" if "," in ids else "identifier"
    return f"❌ No {noun} found for {label}: {ids}"


def _render_lookup(envelope: Envelope, params: Params) -> str:
    products = parse_products(envelope)
    if not products:
        return _not_found(params)
    return format_product(products[0])


def _render_batch(envelope: Envelope, params: Params) -> str:
    products = parse_products(envelope)
    if not products:
        return _not_found(params)
    return format_product_batch(products)


def _render_offers(envelope: Envelope, params: Params) -> str:
    products = parse_product_offers(envelope)
    if not products:
        return _not_found(params)
    return format_offers(products[0])


def _render_retailer_offers(envelope: Envelope, params: Params) -> str:
    products = parse_product_offers(envelope)
    if not products:
        return _not_found(params)
    return format_retailer_offers(products[0], params["retailer"])


def _render_history(envelope: Envelope, params: Params) -> str:
    products = parse_product_history(envelope)
    if not products:
        return _not_found(params)
    return format_price_history(products[0], params["start"], params["end"])


def _render_scheduled(envelope: Envelope, params: Params) -> str:
    entries = parse_schedule_entries(envelope)
    if not entries:
        return _not_found(params)
    return format_scheduled(entries, params["schedule"], params.get("retailer"))


def _render_unscheduled(envelope: Envelope, params: Params) -> str:
    return format_unscheduled(params["ids"])


def _render_schedule_list(envelope: Envelope, params: Params) -> str:
    entries = parse_schedule_entries(envelope)
    if not entries:
        return NO_SCHEDULED_PRODUCTS
    return format_schedule_list(entries)


def _render_usage(envelope: Envelope, params: Params) -> str:
    usage = parse_usage(envelope)
    if usage is None:
        raise IntegrityError("Unable to retrieve usage statistics")
    return format_usage(usage)


# =============================================================================
# The catalog
# =============================================================================
# Order here is the order tools are registered (and listed to the assistant).
# =============================================================================
_CATALOG = [
    Operation(
        name="product_lookup",
        description="Look up a product by barcode, ASIN, URL, model number, or ShopSavvy product ID",
        endpoint="/products",
        method="GET",
        build_params=_single_product_params,
        render=_render_lookup,
        failure="looking up product",
    ),
    Operation(
        name="product_lookup_batch",
        description="Look up multiple products at once using comma-separated identifiers",
        endpoint="/products",
        method="GET",
        build_params=_batch_params,
        render=_render_batch,
        failure="in batch lookup",
    ),
    Operation(
        name="product_offers",
        description="Get current pricing offers for a product from all retailers",
        endpoint="/products/offers",
        method="GET",
        build_params=_single_product_params,
        render=_render_offers,
        failure="getting offers",
    ),
    Operation(
        name="product_offers_retailer",
        description="Get current pricing offers for a product from a specific retailer",
        endpoint="/products/offers",
        method="GET",
        build_params=_retailer_offer_params,
        render=_render_retailer_offers,
        failure="getting retailer offers",
    ),
    Operation(
        name="product_price_history",
        description="Get historical pricing data for a product within a specific date range",
        endpoint="/products/offers/history",
        method="GET",
        build_params=_history_params,
        render=_render_history,
        failure="getting price history",
    ),
    Operation(
        name="product_schedule",
        description="Schedule products for automatic price monitoring at regular intervals",
        endpoint="/products/scheduled",
        method="PUT",
        build_params=_schedule_params,
        render=_render_scheduled,
        failure="scheduling products",
    ),
    Operation(
        name="product_unschedule",
        description="Remove products from the automatic price monitoring schedule",
        endpoint="/products/scheduled",
        method="DELETE",
        build_params=_batch_params,
        render=_render_unscheduled,
        failure="unscheduling products",
        metered=False,
        free_action="unscheduling",
    ),
    Operation(
        name="scheduled_products_list",
        description="View all products currently scheduled for automatic price monitoring",
        endpoint="/products/scheduled",
        method="GET",
        build_params=_no_params,
        render=_render_schedule_list,
        failure="getting scheduled products",
        metered=False,
        free_action="listing scheduled products",
    ),
    Operation(
        name="api_usage",
        description="View current API usage statistics and credit consumption",
        endpoint="/usage",
        method="GET",
        build_params=_no_params,
        render=_render_usage,
        failure="getting usage statistics",
        metered=False,
        free_action="usage statistics",
        quote_meta=False,
    ),
]

OPERATIONS: dict[str, Operation] = {op.name: op for op in _CATALOG}


def get_operation(name: str) -> Operation:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise KeyError(f"Unknown operation: {name}") from None
