# =============================================================================
# pricing_core/errors.py  -  Failure kinds
# =============================================================================
#
# Every failure an operation can hit is one of these.  Only
# ConfigurationError is fatal (startup); the dispatcher turns the others
# into a readable failure message for the assistant.
# =============================================================================


class PricingError(Exception):
    """Base class for every error raised by pricing_core."""


class ConfigurationError(PricingError):
    """Missing or malformed credential/base URL.  Raised at startup only."""


class ValidationError(PricingError):
    """Operation arguments failed a local check; no request was built."""


class UpstreamError(PricingError):
    """ShopSavvy answered with a non-2xx status."""

    def __init__(self, status: int, message: str = "Unknown error") -> None:
        self.status = status
        self.message = message or "Unknown error"
        super().__init__(f"ShopSavvy API Error ({status}): {self.message}")


class TransportError(PricingError):
    """The request never produced a usable response (network, timeout, bad JSON)."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Request to ShopSavvy failed: {cause}")


class IntegrityError(PricingError):
    """A 2xx response whose envelope breaks the data/meta contract."""
