# =============================================================================
# pricing_core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of everything the normalizer pulls out
# of a ShopSavvy envelope.  They carry no behavior; the reports module
# decides how they read.
#
# PLACEHOLDER RULE:
#   Optional text fields are never left empty.  The normalizer fills them
#   with NOT_AVAILABLE so a reader (human or LLM) can tell "ShopSavvy has
#   no brand for this" apart from "the field was dropped".  Prices are the
#   exception: they stay None so sorting can push them last.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional

NOT_AVAILABLE = "N/A"


# -----------------------------------------------------------------------------
# CreditUsage - the `meta` block every metered response carries
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CreditUsage:
    """Credits charged for one call and the balance left afterwards."""

    credits_used: int
    credits_remaining: int


# -----------------------------------------------------------------------------
# Envelope - a successful upstream body, already classified by the gateway
# -----------------------------------------------------------------------------
@dataclass
class Envelope:
    """Top-level ShopSavvy response: `data` records plus `meta` accounting."""

    data: Any                                   # list for product endpoints, dict for /usage
    meta: Optional[CreditUsage] = None          # None only on credit-free endpoints

    @property
    def records(self) -> list[dict]:
        """The `data` list with non-object entries dropped, upstream order kept."""
        if isinstance(self.data, list):
            return [item for item in self.data if isinstance(item, dict)]
        if isinstance(self.data, dict):
            return [self.data]
        return []


# -----------------------------------------------------------------------------
# Product - one catalog entry from /products
# -----------------------------------------------------------------------------
@dataclass
class Product:
    """A product as ShopSavvy identifies it."""

    title: str
    brand: str = NOT_AVAILABLE
    category: str = NOT_AVAILABLE
    color: str = NOT_AVAILABLE
    model: str = NOT_AVAILABLE
    mpn: str = NOT_AVAILABLE
    barcode: str = NOT_AVAILABLE
    asin: str = NOT_AVAILABLE              # upstream key: "amazon"
    shopsavvy_id: str = NOT_AVAILABLE      # upstream key: "shopsavvy"
    image_count: int = 0


# -----------------------------------------------------------------------------
# Offer - one retailer listing from /products/offers
# -----------------------------------------------------------------------------
@dataclass
class Offer:
    """A current price at one retailer."""

    retailer: str
    price: Optional[float]                 # None = retailer lists no price
    availability: str = "Unknown"
    condition: str = NOT_AVAILABLE
    seller: Optional[str] = None           # only marketplace listings have one
    url: str = NOT_AVAILABLE


@dataclass
class ProductOffers:
    """A product together with the offers ShopSavvy found for it."""

    title: str
    offers: list[Offer] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Price history - /products/offers/history
# -----------------------------------------------------------------------------
@dataclass
class HistoryPoint:
    """One observation of an offer.  Order within a history is upstream's."""

    timestamp: str
    price: Optional[float]
    availability: str = "Unknown"


@dataclass
class OfferHistory:
    """All observations for one retailer inside the requested date window."""

    retailer: str
    points: list[HistoryPoint] = field(default_factory=list)


@dataclass
class ProductHistory:
    title: str
    offers: list[OfferHistory] = field(default_factory=list)


# -----------------------------------------------------------------------------
# ScheduleEntry - a product ShopSavvy refreshes on a timer
# -----------------------------------------------------------------------------
# Schedules live upstream.  These objects are a read-only snapshot of what
# /products/scheduled returned; nothing here is cached between calls.
# -----------------------------------------------------------------------------
@dataclass
class ScheduleEntry:
    title: str
    shopsavvy_id: str
    schedule: str                          # hourly | daily | weekly ("unknown" if absent)
    retailer: Optional[str] = None
    barcode: Optional[str] = None
    asin: Optional[str] = None


# -----------------------------------------------------------------------------
# UsagePeriod - /usage snapshot for the current billing period
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class UsagePeriod:
    start_date: str
    end_date: str
    credits_used: int
    credits_limit: int
    credits_remaining: int
    requests_made: int
    usage_percentage: float
