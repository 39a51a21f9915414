"""
Cart Schemas for Dish Builder
=============================

Pydantic models for the cart summary: which dishes are selected for
checkout, the promotion applied, and the resulting totals. Prices are
integers in the smallest currency unit.

Promotions:
-----------
- ``PERCENT``: discount is ``subtotal * discountValue / 100``
- anything else: ``discountValue`` is a fixed amount

The final total never goes below zero.
"""

from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator

from ..coercion import coerce_amount, coerce_id, coerce_quantity
from .base import CamelModel


class CartDishIn(CamelModel):
    dish_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("dishId", "dish_id", "id"),
    )
    price: int = 0
    quantity: int = 1

    @field_validator("dish_id", mode="before")
    @classmethod
    def coerce_dish_id(cls, v: Any) -> Optional[int]:
        return coerce_id(v)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> int:
        return coerce_amount(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_or_one(cls, v: Any) -> int:
        return coerce_quantity(v)


class PromotionIn(CamelModel):
    discount_type: str = "AMOUNT"
    discount_value: int = 0

    @field_validator("discount_type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> str:
        return str(v or "AMOUNT").upper()

    @field_validator("discount_value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> int:
        return coerce_amount(v)


class CartTotalsRequest(CamelModel):
    dishes: List[CartDishIn] = Field(default_factory=list)
    selected_dish_ids: Optional[List[int]] = None
    promotion: Optional[PromotionIn] = None


class CartTotalsOut(CamelModel):
    subtotal: int
    discount: int
    total: int
