"""
Builder Routes for Dish Builder
===============================

Endpoints backing the custom dish builder in the storefront.

Endpoints:
----------
- GET /builder/catalog: Ordered steps with the options each currently offers
- POST /builder/preview: Totals and per-step summary for a composition
- POST /builder/submission: Normalized create request for a composition

Usage:
------
    POST /builder/preview
    {"selections": [{"stepId": 1, "items": [{"menuItemId": 10, "quantity": 1}]}]}

    {"currency": "VND", "basePrice": 0, "itemizedPrice": 20000,
     "totalPrice": 20000, "totalCalories": 150, "steps": [...]}
"""

import logging
from dataclasses import asdict
from typing import Iterable

from fastapi import APIRouter, Depends, HTTPException

from ..builder.aggregation import AggregationEngine
from ..builder.catalog_index import CatalogIndex
from ..builder.selection_store import SelectionStore
from ..builder.wire_adapter import build_create_request
from ..catalog_cache import get_catalog
from ..errors import EmptyCompositionError
from ..schemas.catalog import BuilderCatalogOut, BuilderStepOut
from ..schemas.dishes import (
    CreateCustomDishRequest,
    SelectionPreviewOut,
    SelectionPreviewRequest,
    StepSubmission,
    StepSummaryOut,
    SubmissionDraftRequest,
)


logger = logging.getLogger(__name__)

builder_router = APIRouter(prefix="/builder", tags=["Builder"])


def store_from_submission(selections: Iterable[StepSubmission], catalog: CatalogIndex) -> SelectionStore:
    """Load submission-shaped selections into a store bound to the catalog."""
    return SelectionStore.from_pairs(
        (
            (step.step_id, item.menu_item_id, item.quantity)
            for step in selections
            for item in step.items
        ),
        catalog=catalog,
    )


def unoffered_picks(selections: Iterable[StepSubmission], catalog: CatalogIndex) -> list[tuple[int, int]]:
    """(step_id, option_id) pairs the catalog does not offer for a new pick."""
    return [
        (step.step_id, item.menu_item_id)
        for step in selections
        for item in step.items
        if not catalog.is_offered(step.step_id, item.menu_item_id)
    ]


@builder_router.get("/catalog", response_model=BuilderCatalogOut)
def get_builder_catalog(catalog: CatalogIndex = Depends(get_catalog)) -> BuilderCatalogOut:
    """Return the steps in order with their active options."""
    steps = [
        BuilderStepOut(
            id=step.id,
            name=step.name,
            description=step.description,
            step_number=step.step_number,
            category_id=step.category_id,
            min_picks=step.min_picks,
            max_picks=step.max_picks,
            options=catalog.offered_options(step.id),
        )
        for step in catalog.steps_ordered()
    ]
    return BuilderCatalogOut(currency=catalog.currency, base_price=catalog.base_price, steps=steps)


@builder_router.post("/preview", response_model=SelectionPreviewOut)
def preview_selection(
    body: SelectionPreviewRequest,
    catalog: CatalogIndex = Depends(get_catalog),
) -> SelectionPreviewOut:
    """Compute totals and step summaries for a composition."""
    store = store_from_submission(body.selections, catalog)
    engine = AggregationEngine(catalog)
    totals = engine.compute_totals(store)
    return SelectionPreviewOut(
        currency=catalog.currency,
        base_price=catalog.base_price,
        itemized_price=engine.itemized_price(store),
        total_price=totals.total_price,
        total_calories=totals.total_calories,
        steps=[
            StepSummaryOut.model_validate(asdict(summary))
            for summary in engine.summarize_steps(store)
        ],
    )


@builder_router.post(
    "/submission",
    response_model=CreateCustomDishRequest,
    response_model_exclude_none=True,
)
def build_submission(
    body: SubmissionDraftRequest,
    catalog: CatalogIndex = Depends(get_catalog),
) -> CreateCustomDishRequest:
    """
    Normalize a composition into the create request for a custom dish.

    Responds 422 when nothing is selected, or when a pick is not offered
    by its step (unknown step, inactive option, or an option of another
    step's category).
    """
    rejected = unoffered_picks(body.selections, catalog)
    if rejected:
        logger.info("Rejected submission with %d picks not on offer", len(rejected))
        raise HTTPException(
            status_code=422,
            detail=[
                f"Option {option_id} is not offered in step {step_id}"
                for step_id, option_id in rejected
            ],
        )

    store = store_from_submission(body.selections, catalog)
    try:
        return build_create_request(store, note=body.note, store_id=body.store_id, catalog=catalog)
    except EmptyCompositionError as e:
        raise HTTPException(status_code=422, detail=e.reason)
