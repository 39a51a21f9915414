"""
Catalog Schemas for Dish Builder
================================

This module defines Pydantic models for the customization catalog: the
ordered steps a customer walks through when building a dish, and the options
(ingredients) offered in each step.

Catalog Structure:
------------------
Each step is bound to exactly one category. The options of that category
populate the step:

```
Step 1 "Base"     (category 3) -> Rice, Noodles, Salad
Step 2 "Protein"  (category 5) -> Chicken, Tofu
Step 3 "Sauce"    (category 8) -> Teriyaki, Chili mayo
```

Steps are ordered by ``stepNumber``. Options carry a price in the smallest
currency unit and a calorie count; both are coerced to non-negative integers
when parsed, so a missing or malformed value reads as 0.

Catalog Document:
-----------------
The catalog is loaded from a JSON document in one of two forms:

    {"currency": "VND", "basePrice": 0,
     "steps": [...], "optionsByCategory": {"3": [...], "5": [...]}}

    {"currency": "VND", "basePrice": 0,
     "steps": [...], "items": [{"menuItemId": 10, "category": {"categoryId": 3}, ...}]}

The second form is the daily menu listing, grouped by category on load.
"""

from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from ..coercion import coerce_amount, coerce_id
from .base import CamelModel


class CatalogOption(CamelModel):
    """
    A selectable ingredient offered in a step.

    Inactive options are never offered for new picks but still resolve, so a
    previously saved dish that references one keeps its price and calories.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    price: int = 0
    cal: int = 0
    is_active: bool = True
    image_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("price", "cal", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> int:
        return coerce_amount(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v: Any) -> bool:
        return True if v is None else v


class CatalogStep(CamelModel):
    """
    One ordered stage of customization.

    Attributes:
        id: Step identity
        name: Display name (e.g. "Protein")
        description: Optional helper text shown with the step
        step_number: Ordinal used for strict sequencing
        category_id: Category whose options populate the step
        min_picks: Minimum number of distinct options before moving on (wire: "min")
        max_picks: Maximum number of distinct options, None for unbounded (wire: "max")
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    description: Optional[str] = None
    step_number: int = 0
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    is_active: bool = True
    min_picks: int = Field(default=0, alias="min")
    max_picks: Optional[int] = Field(default=None, alias="max")

    @field_validator("step_number", "min_picks", mode="before")
    @classmethod
    def coerce_counts(cls, v: Any) -> int:
        return coerce_amount(v)

    @field_validator("max_picks", mode="before")
    @classmethod
    def coerce_max(cls, v: Any) -> Optional[int]:
        if v is None:
            return None
        return coerce_amount(v) or None

    @field_validator("category_id", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Optional[int]:
        return coerce_id(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v: Any) -> bool:
        # Steps listed without a flag are live
        return True if v is None else v


class MenuItemCategory(CamelModel):
    category_id: Optional[int] = None
    name: Optional[str] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Optional[int]:
        return coerce_id(v)


class DailyMenuItem(CamelModel):
    """An entry of the daily menu listing, tagged with its category."""
    menu_item_id: int
    name: str = ""
    price: int = 0
    cal: int = 0
    is_active: bool = True
    image_url: Optional[str] = None
    description: Optional[str] = None
    category: Optional[MenuItemCategory] = None

    @field_validator("price", "cal", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> int:
        return coerce_amount(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v: Any) -> bool:
        return True if v is None else v

    def to_option(self) -> CatalogOption:
        return CatalogOption(
            id=self.menu_item_id,
            name=self.name,
            price=self.price,
            cal=self.cal,
            is_active=self.is_active,
            image_url=self.image_url,
            description=self.description,
        )


class CatalogDocument(CamelModel):
    """The JSON catalog document the builder is loaded from."""
    currency: Optional[str] = None
    base_price: int = 0
    steps: List[CatalogStep] = Field(default_factory=list)
    options_by_category: Dict[int, List[CatalogOption]] = Field(default_factory=dict)
    items: List[DailyMenuItem] = Field(default_factory=list)

    @field_validator("base_price", mode="before")
    @classmethod
    def coerce_base_price(cls, v: Any) -> int:
        return coerce_amount(v)


class BuilderStepOut(CamelModel):
    """A step as shown to the customer, with the options it currently offers."""
    id: int
    name: str
    description: Optional[str] = None
    step_number: int
    category_id: Optional[int] = None
    min_picks: int = Field(alias="min")
    max_picks: Optional[int] = Field(default=None, alias="max")
    options: List[CatalogOption]


class BuilderCatalogOut(CamelModel):
    currency: str
    base_price: int
    steps: List[BuilderStepOut]
