# =============================================================================
# pricing_core/config.py  -  Startup Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the ShopSavvy credential (and an optional base URL override) from
#   the process environment ONCE, validates it, and freezes it into an
#   ApiConfig.  The gateway receives that value at construction time and
#   never looks at os.environ again.
#
# FAILURE MODE:
#   A missing or malformed key raises ConfigurationError.  main.py turns
#   that into a diagnostic on stderr and exits before any tool exists.
#
# The API key is never logged.  ApiConfig's repr masks it.
# =============================================================================

from dataclasses import dataclass, field
import os
import re
from typing import Mapping, Optional
from urllib.parse import urlparse

from pricing_core import __version__
from pricing_core.errors import ConfigurationError

DEFAULT_BASE_URL = "https://shopsavvy.com/api/v1"
SIGNUP_URL = "https://shopsavvy.com/data"

API_KEY_ENV = "SHOPSAVVY_API_KEY"
BASE_URL_ENV = "SHOPSAVVY_BASE_URL"

# ss_live_ / ss_test_ followed by exactly 32 alphanumerics
_API_KEY_PATTERN = re.compile(r"^ss_(live|test)_[a-zA-Z0-9]{32}$")


@dataclass(frozen=True)
class ApiConfig:
    """Immutable connection settings shared (read-only) by every tool call."""

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = f"ShopSavvy-MCP-Server/{__version__}"

    @property
    def is_test_key(self) -> bool:
        return self.api_key.startswith("ss_test_")


def validate_api_key(api_key: Optional[str]) -> str:
    """Return the key unchanged if it has the ss_(live|test)_ shape."""
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV} environment variable is required. "
            f"Get your API key at: {SIGNUP_URL}"
        )
    if not _API_KEY_PATTERN.match(api_key):
        raise ConfigurationError(
            f"Invalid {API_KEY_ENV} format. API key should start with "
            "'ss_live_' or 'ss_test_' followed by 32 characters."
        )
    return api_key


def validate_base_url(base_url: str) -> str:
    parsed = urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"{BASE_URL_ENV} is not a valid http(s) URL: '{base_url}'"
        )
    return base_url.rstrip("/")


def load_config(environ: Optional[Mapping[str, str]] = None) -> ApiConfig:
    """Build the ApiConfig from environment variables.

    Args:
        environ: Mapping to read from.  Defaults to os.environ; tests pass
                 a plain dict.

    Raises:
        ConfigurationError: key missing or malformed, or bad base URL.
    """
    env = os.environ if environ is None else environ

    api_key = validate_api_key((env.get(API_KEY_ENV) or "").strip())
    base_url = validate_base_url(
        (env.get(BASE_URL_ENV) or "").strip() or DEFAULT_BASE_URL
    )
    return ApiConfig(api_key=api_key, base_url=base_url)
