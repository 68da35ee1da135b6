# =============================================================================
# pricing_core/reports.py  -  Markdown Reports & Credit Usage Line
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns normalized models into the markdown text a tool call returns, and
#   appends the credit usage line every successful report ends with.
#
# CREDIT ACCOUNTING RULE:
#   A report always ends with exactly one "**Usage:**" line.
#     - meta present  ->  "{used} credit(s) used, {remaining} remaining"
#     - credit-free operation without meta  ->  "0 credits used (...)"
#   The caller therefore always gets an accounting signal.
#
# The exact wording of everything else is presentation, not contract.
# =============================================================================

from datetime import datetime
from typing import Optional

from pricing_core.models import (
    CreditUsage,
    Product,
    ProductHistory,
    ProductOffers,
    ScheduleEntry,
    UsagePeriod,
)
from pricing_core.normalizer import group_by_schedule, sort_offers

HIGH_USAGE_PERCENT = 90
USAGE_NOTICE_PERCENT = 75


# =============================================================================
# Credit & Usage Reporter
# =============================================================================
def usage_line(meta: Optional[CreditUsage], free_action: Optional[str] = None) -> str:
    """The single accounting line appended to a report."""
    if meta is not None:
        unit = "credit" if meta.credits_used == 1 else "credits"
        return f"**Usage:** {meta.credits_used} {unit} used, {meta.credits_remaining} remaining"
    if free_action:
        return f"**Usage:** 0 credits used (no charge for {free_action})"
    return "**Usage:** 0 credits used"


def with_usage(
    report: str, meta: Optional[CreditUsage], free_action: Optional[str] = None
) -> str:
    return f"{report.rstrip()}\n\n{usage_line(meta, free_action)}"


# -----------------------------------------------------------------------------
# Small helpers
# -----------------------------------------------------------------------------
def format_price(price: Optional[float], missing: str = "Price unavailable") -> str:
    return f"${price:,.2f}" if price is not None else missing


def format_date(timestamp: str) -> str:
    """Show the calendar date of an ISO timestamp; fall back to the raw text."""
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return timestamp


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _number(value: float) -> str:
    return f"{value:,}" if isinstance(value, int) else f"{value:,g}"


# =============================================================================
# Product lookup
# =============================================================================
def format_product(product: Product) -> str:
    return "\n".join([
        "## 🛍️ Product Found",
        "",
        f"**{product.title}**",
        "",
        "**Details:**",
        f"- Brand: {product.brand}",
        f"- Category: {product.category}",
        f"- Color: {product.color}",
        f"- Model: {product.model}",
        f"- MPN: {product.mpn}",
        f"- Barcode: {product.barcode}",
        f"- Amazon ASIN: {product.asin}",
        f"- ShopSavvy ID: {product.shopsavvy_id}",
        "",
        f"**Images:** {product.image_count} available",
    ])


def format_product_batch(products: list[Product]) -> str:
    lines = [f"## 🛍️ Found {len(products)} Products", ""]
    for index, product in enumerate(products, start=1):
        lines += [
            f"### {index}. {product.title}",
            f"- Brand: {product.brand}",
            f"- Category: {product.category}",
            f"- Barcode: {product.barcode}",
            f"- ASIN: {product.asin}",
            "",
        ]
    return "\n".join(lines)


# =============================================================================
# Offers
# =============================================================================
def format_offers(product: ProductOffers) -> str:
    """All-retailer view: cheapest first, unpriced offers at the bottom."""
    lines = [f"## 💰 Current Offers for {product.title}", ""]
    if not product.offers:
        lines.append("❌ No current offers available for this product.")
        return "\n".join(lines)

    offers = sort_offers(product.offers)
    lines += [f"**{len(offers)} offers found:**", ""]
    for index, offer in enumerate(offers, start=1):
        lines.append(f"{index}. **{offer.retailer}** - {format_price(offer.price)}")
        lines.append(f"   - Availability: {offer.availability}")
        lines.append(f"   - Condition: {offer.condition}")
        if offer.seller:
            lines.append(f"   - Seller: {offer.seller}")
        lines.append(f"   - [View Offer]({offer.url})")
        lines.append("")
    return "\n".join(lines)


def format_retailer_offers(product: ProductOffers, retailer: str) -> str:
    lines = [f"## 💰 {retailer} Offers for {product.title}", ""]
    if not product.offers:
        lines.append(f"❌ No current offers available from {retailer} for this product.")
        return "\n".join(lines)

    for index, offer in enumerate(product.offers, start=1):
        lines.append(f"**Offer {index}:**")
        lines.append(f"- Price: {format_price(offer.price)}")
        lines.append(f"- Availability: {offer.availability}")
        lines.append(f"- Condition: {offer.condition}")
        if offer.seller:
            lines.append(f"- Seller: {offer.seller}")
        lines.append(f"- [View Offer]({offer.url})")
        lines.append("")
    return "\n".join(lines)


# =============================================================================
# Price history
# =============================================================================
def format_price_history(product: ProductHistory, start_date: str, end_date: str) -> str:
    lines = [
        f"## 📈 Price History for {product.title}",
        f"**Period:** {start_date} to {end_date}",
        "",
    ]
    if not product.offers:
        lines.append(
            "❌ No price history available for this product in the specified date range."
        )
        return "\n".join(lines)

    for offer in product.offers:
        lines.append(f"### {offer.retailer}")
        if offer.points:
            lines += [f"**{len(offer.points)} price points:**", ""]
            for point in offer.points:
                lines.append(
                    f"- {format_date(point.timestamp)}: "
                    f"{format_price(point.price, 'N/A')} ({point.availability})"
                )
        else:
            lines.append("No historical data available")
        lines.append("")
    return "\n".join(lines)


# =============================================================================
# Scheduling
# =============================================================================
def format_scheduled(entries: list[ScheduleEntry], schedule: str, retailer: Optional[str]) -> str:
    lines = [
        f"## ⏰ Successfully Scheduled {len(entries)} Products",
        "",
        f"**Monitoring Frequency:** {_capitalize(schedule)}",
    ]
    if retailer:
        lines.append(f"**Retailer Filter:** {retailer}")
    lines += ["", "**Scheduled Products:**", ""]

    for index, entry in enumerate(entries, start=1):
        lines.append(f"{index}. {entry.title}")
        lines.append(f"   - ShopSavvy ID: {entry.shopsavvy_id}")
        lines.append(f"   - Schedule: {entry.schedule}")
        if entry.retailer:
            lines.append(f"   - Retailer: {entry.retailer}")
        lines.append("")
    return "\n".join(lines)


def format_unscheduled(identifiers: str) -> str:
    return (
        "✅ Successfully removed products from monitoring schedule.\n\n"
        f"**Identifiers:** {identifiers}"
    )


def format_schedule_list(entries: list[ScheduleEntry]) -> str:
    lines = [f"## ⏰ Scheduled Products ({len(entries)} total)", ""]

    for schedule, group in group_by_schedule(entries).items():
        lines += [f"### {_capitalize(schedule)} ({len(group)})", ""]
        for index, entry in enumerate(group, start=1):
            lines.append(f"{index}. **{entry.title}**")
            lines.append(f"   - ShopSavvy ID: {entry.shopsavvy_id}")
            if entry.barcode:
                lines.append(f"   - Barcode: {entry.barcode}")
            if entry.asin:
                lines.append(f"   - ASIN: {entry.asin}")
            if entry.retailer:
                lines.append(f"   - Retailer Filter: {entry.retailer}")
            lines.append("")
    return "\n".join(lines)


NO_SCHEDULED_PRODUCTS = (
    "📭 No products are currently scheduled for monitoring.\n\n"
    "Use the `product_schedule` tool to start monitoring products."
)


# =============================================================================
# Usage statistics
# =============================================================================
def format_usage(usage: UsagePeriod) -> str:
    pct = _number(usage.usage_percentage)
    lines = [
        "## 📊 API Usage Statistics",
        "",
        f"**Current Billing Period:** {usage.start_date} to {usage.end_date}",
        "",
        "**Credit Usage:**",
        f"- Used: {_number(usage.credits_used)} credits",
        f"- Limit: {_number(usage.credits_limit)} credits",
        f"- Remaining: {_number(usage.credits_remaining)} credits",
        f"- Usage: {pct}%",
        "",
        f"**Requests Made:** {_number(usage.requests_made)}",
        "",
    ]
    if usage.usage_percentage >= HIGH_USAGE_PERCENT:
        lines.append(f"⚠️ **High Usage Warning:** You've used {pct}% of your monthly credits.")
    elif usage.usage_percentage >= USAGE_NOTICE_PERCENT:
        lines.append(f"⚡ **Usage Notice:** You've used {pct}% of your monthly credits.")
    else:
        lines.append(f"✅ **Usage Status:** Good - {pct}% of monthly credits used.")
    return "\n".join(lines)
