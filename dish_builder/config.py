"""
Configuration Module for Dish Builder
=====================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the dish builder. Values are parsed once at module
load time so configuration errors surface early.

Configuration Categories:
-------------------------
- **Dish Defaults**: The placeholder note attached to a submitted dish when the
  customer leaves the note empty, and the default currency label.

- **Catalog Source**: Where the customization catalog (steps and their
  options) is loaded from and how long a loaded catalog is trusted.

- **CORS Settings**: Cross-Origin Resource Sharing configuration for the
  storefront. Defaults allow all origins for development.

Environment Variables:
----------------------
- DEFAULT_DISH_NOTE: Note sent when the customer supplies none (default: "Custom dish")
- DEFAULT_CURRENCY: Currency label for prices (default: "VND")
- CATALOG_PATH: Path to the catalog JSON document (default: "catalog.json")
- CATALOG_TTL_SECONDS: Seconds before the catalog is re-read (default: 300)
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")

Usage:
------
    from dish_builder.config import DEFAULT_DISH_NOTE, CATALOG_PATH
"""

import os
from typing import List


# =============================================================================
# Dish Defaults
# =============================================================================

# The ordering backend requires a note on every custom dish.
DEFAULT_DISH_NOTE: str = os.getenv("DEFAULT_DISH_NOTE", "Custom dish")

# Prices are integers in the smallest unit of this currency.
DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "VND")


def get_default_dish_note() -> str:
    """
    Return the placeholder note for dishes submitted without one.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return DEFAULT_DISH_NOTE


# =============================================================================
# Catalog Source
# =============================================================================
# The catalog is a JSON document with the ordered steps and, per category,
# the options offered in that step.

CATALOG_PATH: str = os.getenv("CATALOG_PATH", "catalog.json")

# How long a loaded catalog stays cached before the file is read again
CATALOG_TTL_SECONDS: int = int(os.getenv("CATALOG_TTL_SECONDS", "300"))  # 5 minutes


# =============================================================================
# CORS Configuration
# =============================================================================

# Format: comma-separated list of origins, e.g., "https://shop.example,https://admin.shop.example"
_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]
