# =============================================================================
# pricing_core/__init__.py
# =============================================================================
# This package contains ALL gateway logic for the ShopSavvy tool server.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any tool-calling framework.
#   Every module here is plain Python plus the standard library's HTTP
#   stack, so it can be exercised from a REPL or a test with a fake opener.
#
# LAYERS (leaf first):
#   errors      ->  the four failure kinds every operation can hit
#   config      ->  immutable credential + base URL
#   models      ->  dataclasses for products, offers, history, schedules
#   validation  ->  argument checks that run before any request exists
#   gateway     ->  request builder + HTTP client + envelope classification
#   normalizer  ->  envelope `data` -> models
#   reports     ->  markdown reports + the credit usage line
#   operations  ->  the catalog and the single dispatch pipeline
# =============================================================================

__version__ = "1.0.0"
