"""
Routes Package for Dish Builder
===============================

API route definitions organized by screen. Each module defines a FastAPI
APIRouter with related endpoints grouped together.

- builder.py: Catalog, composition preview and submission normalization
- cart.py: Ingredient changes on placed dishes and cart totals

Router Registration:
--------------------
All routers are registered in app_factory.create_app under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths

Route Dependencies:
-------------------
- get_catalog: The current catalog index (overridden in tests)
"""

from .builder import builder_router
from .cart import cart_router

__all__ = [
    "builder_router",
    "cart_router",
]
