"""
Schemas Package for Dish Builder
================================

Pydantic models (schemas) for every wire shape the dish builder reads or
writes. Models use camelCase aliases on the wire and snake_case in Python.

Schema Organization:
--------------------
- **catalog.py**: Steps, options and the catalog document
- **dishes.py**: Dish read shapes (nested and flat) and submission shapes
- **cart.py**: Cart totals and promotions

Usage:
------
    from dish_builder.schemas import DishRead, UpdateDishRequest
    dish = DishRead.model_validate(payload)
"""

# Catalog schemas
from .catalog import (
    CatalogOption,
    CatalogStep,
    MenuItemCategory,
    DailyMenuItem,
    CatalogDocument,
    BuilderStepOut,
    BuilderCatalogOut,
)

# Dish schemas
from .dishes import (
    DishItem,
    DishStep,
    FlatSelection,
    DishRead,
    SubmissionItem,
    StepSubmission,
    CreateCustomDishRequest,
    UpdateDishRequest,
    SelectionPreviewRequest,
    SubmissionDraftRequest,
    IngredientChangeRequest,
    SummaryLineOut,
    StepSummaryOut,
    SelectionPreviewOut,
)

# Cart schemas
from .cart import (
    CartDishIn,
    PromotionIn,
    CartTotalsRequest,
    CartTotalsOut,
)

__all__ = [
    # Catalog
    "CatalogOption",
    "CatalogStep",
    "MenuItemCategory",
    "DailyMenuItem",
    "CatalogDocument",
    "BuilderStepOut",
    "BuilderCatalogOut",
    # Dishes
    "DishItem",
    "DishStep",
    "FlatSelection",
    "DishRead",
    "SubmissionItem",
    "StepSubmission",
    "CreateCustomDishRequest",
    "UpdateDishRequest",
    "SelectionPreviewRequest",
    "SubmissionDraftRequest",
    "IngredientChangeRequest",
    "SummaryLineOut",
    "StepSummaryOut",
    "SelectionPreviewOut",
    # Cart
    "CartDishIn",
    "PromotionIn",
    "CartTotalsRequest",
    "CartTotalsOut",
]
