"""
Services Package for Dish Builder
=================================

Host-side logic that sits around the composition engine: cart totals and
the per-dish update guard for ingredient changes.

Usage:
------
    from dish_builder.services import CartEditor, compute_cart_totals
"""

from .cart import CartEditor, CartTotals, compute_cart_totals

__all__ = [
    "CartEditor",
    "CartTotals",
    "compute_cart_totals",
]
