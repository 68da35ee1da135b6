# =============================================================================
# pricing_core/gateway.py  -  Request Builder & Gateway Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns (endpoint, method, params) into an authenticated ShopSavvy request,
#   sends it, and classifies what came back:
#
#     2xx + JSON object with `data` (+ `meta`)  ->  Envelope
#     non-2xx                                   ->  UpstreamError(status, message)
#     network failure / timeout / bad JSON      ->  TransportError(cause)
#     2xx but the envelope contract is broken   ->  IntegrityError
#
# THE UPSTREAM CONTRACT:
#   ShopSavvy takes every parameter in the query string, for GET, PUT and
#   DELETE alike.  Requests never carry a body.
#
# WHAT THIS MODULE DOES NOT DO:
#   No retries, no backoff, no caching, no client-side timeout.  A 429 is
#   reported like any other status; the caller decides whether to try again.
#
# THREAD SAFETY:
#   GatewayClient holds only the frozen ApiConfig and the opener function.
#   Each call builds its own Request, so concurrent tool calls need no locks.
# =============================================================================

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Callable, Mapping, Optional
import urllib.error
import urllib.request
from urllib.parse import urlencode

from pricing_core.config import ApiConfig
from pricing_core.errors import IntegrityError, TransportError, UpstreamError
from pricing_core.models import Envelope
from pricing_core.normalizer import parse_meta

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "PUT", "DELETE")
CONTENT_TYPE = "application/json"


# =============================================================================
# Request Builder
# =============================================================================
@dataclass(frozen=True)
class GatewayRequest:
    """A fully-built upstream call.  No body, ever."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)

    def to_urllib(self) -> urllib.request.Request:
        return urllib.request.Request(self.url, headers=dict(self.headers), method=self.method)


def build_headers(config: ApiConfig) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": CONTENT_TYPE,
        "User-Agent": config.user_agent,
    }


def build_request(
    config: ApiConfig,
    endpoint: str,
    method: str = "GET",
    params: Optional[Mapping[str, Any]] = None,
) -> GatewayRequest:
    """Build the request for one operation.

    Every param whose value is not None becomes a query parameter, in the
    mapping's order, with its value passed through str().  Only standard
    URL escaping is applied.

    Raises:
        ValueError: for a method ShopSavvy does not use.
    """
    method = method.upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    url = f"{config.base_url}/{endpoint.lstrip('/')}"
    query = [(key, str(value)) for key, value in (params or {}).items() if value is not None]
    if query:
        url = f"{url}?{urlencode(query)}"

    return GatewayRequest(method=method, url=url, headers=build_headers(config))


# =============================================================================
# Gateway Client
# =============================================================================
Opener = Callable[[urllib.request.Request], Any]


class GatewayClient:
    """Executes built requests against ShopSavvy and classifies the result.

    Args:
        config: The immutable ApiConfig produced at startup.
        opener: Callable that performs the HTTP exchange.  Defaults to
                urllib.request.urlopen; tests inject a fake.
    """

    def __init__(self, config: ApiConfig, opener: Optional[Opener] = None) -> None:
        self.config = config
        self._opener = opener or urllib.request.urlopen

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
    ) -> GatewayRequest:
        return build_request(self.config, endpoint, method, params)

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        require_meta: bool = True,
    ) -> Envelope:
        """Send one request and return the parsed envelope.

        Args:
            endpoint: Path under the base URL (e.g., "/products/offers").
            method: GET, PUT or DELETE.
            params: Query parameters; None values are dropped.
            require_meta: Treat a missing/invalid `meta` block as an
                IntegrityError.  Credit-free endpoints pass False.

        Raises:
            UpstreamError, TransportError, IntegrityError
        """
        gateway_request = self.request(endpoint, method, params)
        logger.debug("%s %s", gateway_request.method, gateway_request.url)

        status, body = self._send(gateway_request)
        return self._parse_envelope(gateway_request, status, body, require_meta)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _send(self, gateway_request: GatewayRequest) -> tuple[int, bytes]:
        try:
            with self._opener(gateway_request.to_urllib()) as response:
                return response.status, response.read()
        except urllib.error.HTTPError as e:
            # HTTPError must be handled before URLError (it is a subclass).
            raise UpstreamError(e.code, _error_message(e)) from e
        except urllib.error.URLError as e:
            raise TransportError(e.reason) from e
        except OSError as e:
            # socket timeouts, connection resets, ...
            raise TransportError(e) from e

    @staticmethod
    def _parse_envelope(
        gateway_request: GatewayRequest,
        status: int,
        body: bytes,
        require_meta: bool,
    ) -> Envelope:
        if not 200 <= status < 300:
            raise UpstreamError(status, _message_from_body(body))

        if status == 204:
            if require_meta:
                raise IntegrityError("ShopSavvy returned no content where credit usage was expected")
            return Envelope(data=[], meta=None)

        try:
            payload = json.loads(body.decode("utf-8"))
        except ValueError as e:
            raise TransportError(
                f"invalid JSON from {gateway_request.method} {gateway_request.url.split('?')[0]}"
            ) from e

        if not isinstance(payload, dict) or "data" not in payload:
            raise IntegrityError("ShopSavvy response is missing the 'data' field")

        meta = parse_meta(payload.get("meta"))
        if meta is None and require_meta:
            raise IntegrityError(
                "ShopSavvy response is missing credit usage ('meta' block)"
            )

        return Envelope(data=payload["data"], meta=meta)


def _message_from_body(body: bytes) -> str:
    """Pull the upstream `error` field out of an error body, if there is one."""
    try:
        payload = json.loads(body.decode("utf-8"))
    except ValueError:
        return "Unknown error"
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return "Unknown error"


def _error_message(error: urllib.error.HTTPError) -> str:
    try:
        body = error.read() or b""
    except OSError:
        body = b""
    return _message_from_body(body)
