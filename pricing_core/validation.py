# =============================================================================
# pricing_core/validation.py  -  Argument Checks
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Checks and normalizes tool arguments BEFORE a request is built.  Every
#   function is pure: it returns the cleaned value or raises ValidationError.
#
# WHAT IT DOES NOT DO:
#   - It does not decide whether an identifier matches a product.  Barcodes,
#     ASINs, URLs, model numbers and ShopSavvy IDs are opaque strings here.
#   - It does not check start_date <= end_date.  ShopSavvy owns valid ranges.
# =============================================================================

from datetime import date
import re
from typing import Optional

from pricing_core.errors import ValidationError

SCHEDULE_FREQUENCIES = ("hourly", "daily", "weekly")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SCHEME_PREFIX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def require_identifier(value: Optional[str], field: str = "identifier") -> str:
    """Return the identifier exactly as given.

    Whitespace-only values are rejected, but nothing is trimmed or
    rewritten; URL escaping happens in the request builder.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string")
    return value


def join_identifiers(value: Optional[str], field: str = "identifiers") -> str:
    """Normalize a batch of identifiers into ShopSavvy's comma-joined form.

    "a, b ,c" becomes "a,b,c".  Every item must be non-empty after
    trimming; "a,,b" is rejected rather than silently collapsed.
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a non-empty string")

    items = value.split(",")
    cleaned = []
    for position, item in enumerate(items, start=1):
        if not item.strip():
            raise ValidationError(
                f"{field} contains an empty entry at position {position}"
            )
        cleaned.append(item.strip())

    return ",".join(cleaned)


def require_date(value: Optional[str], field: str) -> str:
    """Require an ISO calendar date (YYYY-MM-DD) that actually exists."""
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise ValidationError(
            f"{field} must be in YYYY-MM-DD format (e.g., '2024-01-31'), got {value!r}"
        )
    value = value.strip()
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"{field} is not a valid calendar date: {value!r}") from e
    return value


def require_schedule(value: Optional[str]) -> str:
    """Require one of hourly / daily / weekly, exactly."""
    if value not in SCHEDULE_FREQUENCIES:
        allowed = ", ".join(SCHEDULE_FREQUENCIES)
        raise ValidationError(f"schedule must be one of: {allowed} (got {value!r})")
    return value


def normalize_retailer(value: Optional[str], required: bool = False) -> Optional[str]:
    """Reduce a retailer filter to a bare domain like "bestbuy.com".

    Optional filters treat None/blank as "all retailers" and return None.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError("retailer must be a non-empty domain name")
        return None
    if not isinstance(value, str):
        raise ValidationError("retailer must be a string")

    domain = _SCHEME_PREFIX.sub("", value.strip().lower())
    if domain.startswith("www."):
        domain = domain[len("www."):]
    domain = domain.rstrip("/")

    if not domain or any(ch.isspace() for ch in domain):
        raise ValidationError(
            f"retailer must be a domain name like 'amazon.com', got {value!r}"
        )
    return domain
