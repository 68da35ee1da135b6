# =============================================================================
# pricing_core/normalizer.py  -  Envelope -> Models
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Converts the raw `data` records of a successful envelope into the
#   dataclasses in models.py.  Every function here is pure and tolerant:
#   records that are not JSON objects are skipped, and missing optional
#   fields become NOT_AVAILABLE instead of disappearing.
#
# ORDERING RULES:
#   - Products, schedule entries and history points keep upstream order.
#   - Offers get exactly one sort: ascending price, unpriced offers last.
#   - Schedule grouping is insertion-ordered, not sorted.
# =============================================================================

from typing import Any, Optional

from pricing_core.models import (
    NOT_AVAILABLE,
    CreditUsage,
    Envelope,
    HistoryPoint,
    Offer,
    OfferHistory,
    Product,
    ProductHistory,
    ProductOffers,
    ScheduleEntry,
    UsagePeriod,
)

UNTITLED = "Untitled product"
UNKNOWN_RETAILER = "Unknown retailer"
UNKNOWN_SCHEDULE = "unknown"


# -----------------------------------------------------------------------------
# Field coercion
# -----------------------------------------------------------------------------
def _text(record: dict, key: str, default: str = NOT_AVAILABLE) -> str:
    value = record.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return str(value)


def _optional_text(record: dict, key: str) -> Optional[str]:
    value = record.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return str(value)


def _price(value: Any) -> Optional[float]:
    """Numeric price or None.  Booleans and strings are not prices."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _count(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0:
        return None
    return int(value)


def _list(record: dict, key: str) -> list[dict]:
    value = record.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


# -----------------------------------------------------------------------------
# meta
# -----------------------------------------------------------------------------
def parse_meta(raw: Any) -> Optional[CreditUsage]:
    """Return CreditUsage when both counters are non-negative integers."""
    if not isinstance(raw, dict):
        return None
    used = _count(raw.get("credits_used"))
    remaining = _count(raw.get("credits_remaining"))
    if used is None or remaining is None:
        return None
    return CreditUsage(credits_used=used, credits_remaining=remaining)


# -----------------------------------------------------------------------------
# Products
# -----------------------------------------------------------------------------
def parse_product(record: dict) -> Product:
    images = record.get("images")
    return Product(
        title=_text(record, "title", UNTITLED),
        brand=_text(record, "brand"),
        category=_text(record, "category"),
        color=_text(record, "color"),
        model=_text(record, "model"),
        mpn=_text(record, "mpn"),
        barcode=_text(record, "barcode"),
        asin=_text(record, "amazon"),
        shopsavvy_id=_text(record, "shopsavvy"),
        image_count=len(images) if isinstance(images, list) else 0,
    )


def parse_products(envelope: Envelope) -> list[Product]:
    return [parse_product(record) for record in envelope.records]


# -----------------------------------------------------------------------------
# Offers
# -----------------------------------------------------------------------------
def parse_offer(record: dict) -> Offer:
    return Offer(
        retailer=_text(record, "retailer", UNKNOWN_RETAILER),
        price=_price(record.get("price")),
        availability=_text(record, "availability", "Unknown"),
        condition=_text(record, "condition"),
        seller=_optional_text(record, "seller"),
        # ShopSavvy spells the listing link "URL"
        url=_text(record, "URL", _text(record, "url")),
    )


def sort_offers(offers: list[Offer]) -> list[Offer]:
    """Cheapest first; offers without a price go last in their original order."""
    return sorted(offers, key=lambda o: (o.price is None, o.price or 0.0))


def parse_product_offers(envelope: Envelope) -> list[ProductOffers]:
    return [
        ProductOffers(
            title=_text(record, "title", UNTITLED),
            offers=[parse_offer(offer) for offer in _list(record, "offers")],
        )
        for record in envelope.records
    ]


# -----------------------------------------------------------------------------
# Price history
# -----------------------------------------------------------------------------
def parse_history_point(record: dict) -> HistoryPoint:
    return HistoryPoint(
        timestamp=_text(record, "timestamp"),
        price=_price(record.get("price")),
        availability=_text(record, "availability", "Unknown"),
    )


def parse_product_history(envelope: Envelope) -> list[ProductHistory]:
    products = []
    for record in envelope.records:
        offers = [
            OfferHistory(
                retailer=_text(offer, "retailer", UNKNOWN_RETAILER),
                points=[parse_history_point(p) for p in _list(offer, "history")],
            )
            for offer in _list(record, "offers")
        ]
        products.append(ProductHistory(title=_text(record, "title", UNTITLED), offers=offers))
    return products


# -----------------------------------------------------------------------------
# Schedules
# -----------------------------------------------------------------------------
def parse_schedule_entry(record: dict) -> ScheduleEntry:
    return ScheduleEntry(
        title=_text(record, "title", UNTITLED),
        shopsavvy_id=_text(record, "shopsavvy"),
        schedule=_text(record, "schedule", UNKNOWN_SCHEDULE),
        retailer=_optional_text(record, "retailer"),
        barcode=_optional_text(record, "barcode"),
        asin=_optional_text(record, "amazon"),
    )


def parse_schedule_entries(envelope: Envelope) -> list[ScheduleEntry]:
    return [parse_schedule_entry(record) for record in envelope.records]


def group_by_schedule(entries: list[ScheduleEntry]) -> dict[str, list[ScheduleEntry]]:
    """Bucket entries by frequency.

    Buckets appear in the order their frequency is first seen, and entries
    keep their relative order inside a bucket (dicts preserve insertion order).
    """
    groups: dict[str, list[ScheduleEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.schedule, []).append(entry)
    return groups


# -----------------------------------------------------------------------------
# Usage
# -----------------------------------------------------------------------------
def parse_usage(envelope: Envelope) -> Optional[UsagePeriod]:
    """Flatten /usage's {current_period: {...}, usage_percentage} shape."""
    data = envelope.data
    if not isinstance(data, dict):
        return None
    period = data.get("current_period")
    if not isinstance(period, dict):
        period = {}

    percentage = data.get("usage_percentage", period.get("usage_percentage"))
    if isinstance(percentage, bool) or not isinstance(percentage, (int, float)):
        percentage = 0

    return UsagePeriod(
        start_date=_text(period, "start_date"),
        end_date=_text(period, "end_date"),
        credits_used=_count(period.get("credits_used")) or 0,
        credits_limit=_count(period.get("credits_limit")) or 0,
        credits_remaining=_count(period.get("credits_remaining")) or 0,
        requests_made=_count(period.get("requests_made")) or 0,
        usage_percentage=percentage,
    )
