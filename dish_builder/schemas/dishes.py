"""
Dish Schemas for Dish Builder
=============================

This module defines Pydantic models for dish compositions as they travel
between the storefront and the ordering backend.

Read Shapes:
------------
The backend exposes the composition of a placed dish in two shapes:

- **Nested** (``steps``): one entry per step, each with its chosen items.

      {"steps": [{"stepId": 1, "stepName": "Base",
                  "items": [{"menuItemId": 10, "menuItemName": "Rice",
                             "quantity": 1, "extraPrice": 0, "cal": 150}]}]}

- **Flat** (``selections``): one entry per chosen option.

      {"selections": [{"stepId": 1, "stepName": "Base", "optionId": 10,
                       "optionName": "Rice", "quantity": 1, "extraPrice": 0}]}

Both may be present on the same dish. The nested shape is authoritative; see
``DishRead.shape``. Some read paths send either list as a JSON string, which
is decoded on validation.

Write Shapes:
-------------
Create and update requests carry only ids and quantities; names and prices
are derived again server-side:

    {"note": "Custom dish", "isCustom": true,
     "selections": [{"stepId": 1, "items": [{"menuItemId": 10, "quantity": 1}]}]}

Naming Conventions:
-------------------
- *Read: shapes consumed from the backend
- *Request: shapes produced for the backend
- *Out: shapes returned by this service's own endpoints
"""

from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from ..coercion import coerce_amount, coerce_id, coerce_quantity, maybe_json_list
from .base import CamelModel


# =============================================================================
# Read Shapes
# =============================================================================

class DishItem(CamelModel):
    """An option chosen within one step of the nested read shape."""
    menu_item_id: Optional[int] = None
    menu_item_name: Optional[str] = None
    quantity: int = 1
    extra_price: int = 0
    cal: int = 0
    image_url: Optional[str] = None

    @field_validator("menu_item_id", mode="before")
    @classmethod
    def coerce_item_id(cls, v: Any) -> Optional[int]:
        return coerce_id(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_or_one(cls, v: Any) -> int:
        return coerce_quantity(v)

    @field_validator("extra_price", "cal", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> int:
        return coerce_amount(v)


class DishStep(CamelModel):
    step_id: Optional[int] = None
    step_name: Optional[str] = None
    items: List[DishItem] = Field(default_factory=list)

    @field_validator("step_id", mode="before")
    @classmethod
    def coerce_step_id(cls, v: Any) -> Optional[int]:
        return coerce_id(v)

    @field_validator("items", mode="before")
    @classmethod
    def items_list(cls, v: Any) -> Any:
        return [item for item in maybe_json_list(v) or [] if item is not None]


class FlatSelection(CamelModel):
    """One chosen option in the flat read shape."""
    step_id: Optional[int] = None
    step_name: Optional[str] = None
    option_id: Optional[int] = None
    option_name: Optional[str] = None
    quantity: int = 1
    extra_price: int = 0

    @field_validator("step_id", "option_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Optional[int]:
        return coerce_id(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_or_one(cls, v: Any) -> int:
        return coerce_quantity(v)

    @field_validator("extra_price", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> int:
        return coerce_amount(v)


class DishRead(CamelModel):
    """
    A placed dish (order line) as read back from the backend.

    Attributes:
        dish_id: Dish identity (wire: "dishId" or "id")
        name: Display name of the dish
        price: Line price as computed by the backend
        cal: Calorie count as computed by the backend
        quantity: Number of this dish in the order
        note: Free-text note
        is_custom: Whether the dish was composed by the customer
        steps: Nested composition, if the read path sent it
        selections: Flat composition, if the read path sent it
    """
    dish_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("dishId", "dish_id", "id"),
    )
    name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("name", "menuItemName", "menu_item_name"),
    )
    price: int = 0
    cal: int = 0
    quantity: int = 1
    note: Optional[str] = None
    is_custom: bool = False
    steps: Optional[List[DishStep]] = None
    selections: Optional[List[FlatSelection]] = None

    @field_validator("dish_id", mode="before")
    @classmethod
    def coerce_dish_id(cls, v: Any) -> Optional[int]:
        return coerce_id(v)

    @field_validator("price", "cal", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> int:
        return coerce_amount(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_or_one(cls, v: Any) -> int:
        return coerce_quantity(v)

    @field_validator("is_custom", mode="before")
    @classmethod
    def default_custom(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("steps", "selections", mode="before")
    @classmethod
    def decode_lists(cls, v: Any) -> Any:
        entries = maybe_json_list(v)
        if entries is None:
            return None
        return [entry for entry in entries if entry is not None]

    @property
    def shape(self) -> Optional[Literal["steps", "selections"]]:
        """
        Which read shape carries this dish's composition.

        A non-empty nested ``steps`` list wins; a non-empty flat
        ``selections`` list is the fallback; otherwise None (no composition).
        """
        if self.steps:
            return "steps"
        if self.selections:
            return "selections"
        return None


# =============================================================================
# Write Shapes
# =============================================================================

class SubmissionItem(CamelModel):
    menu_item_id: int
    quantity: int = Field(ge=1)


class StepSubmission(CamelModel):
    """The picks of one step in a create/update request."""
    step_id: int
    items: List[SubmissionItem] = Field(min_length=1)


class CreateCustomDishRequest(CamelModel):
    """Body for adding a newly composed dish to the current order."""
    store_id: Optional[int] = None
    note: str
    selections: List[StepSubmission]
    is_custom: bool = True


class UpdateDishRequest(CamelModel):
    """Body for updating the composition of an existing dish."""
    note: Optional[str] = None
    selections: List[StepSubmission]


# =============================================================================
# Service Endpoint Shapes
# =============================================================================

class SelectionPreviewRequest(CamelModel):
    selections: List[StepSubmission] = Field(default_factory=list)


class SubmissionDraftRequest(CamelModel):
    """A composition the storefront wants turned into a create request."""
    store_id: Optional[int] = None
    note: Optional[str] = None
    selections: List[StepSubmission] = Field(default_factory=list)


class IngredientChangeRequest(CamelModel):
    """Change one ingredient quantity on a dish already in the cart."""
    dish: DishRead
    step_id: int
    option_id: int
    quantity: int


class SummaryLineOut(CamelModel):
    option_id: int
    name: str
    quantity: int
    unit_price: int
    line_price: int
    line_calories: int
    image_url: Optional[str] = None


class StepSummaryOut(CamelModel):
    step_id: int
    step_name: str
    lines: List[SummaryLineOut]
    subtotal_price: int
    subtotal_calories: int


class SelectionPreviewOut(CamelModel):
    currency: str
    base_price: int
    itemized_price: int
    total_price: int
    total_calories: int
    steps: List[StepSummaryOut]
