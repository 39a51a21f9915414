"""
Wire Adapter between SelectionStore and the backend dish shapes.

Read side (edit-mode prefill):
    The backend returns a placed dish's composition either nested by step
    (``steps``) or flat (``selections``). ``DishRead.shape`` decides which one
    is authoritative (nested wins), so everything past this module works over
    one canonical list of (step_id, option_id, quantity) triples.

Write side (submission):
    Create/update requests carry ``selections: [{stepId, items: [{menuItemId,
    quantity}]}]``. Steps with no picks are left out of the payload entirely.
"""

import logging
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from .. import config
from ..errors import EmptyCompositionError
from ..schemas.dishes import (
    CreateCustomDishRequest,
    DishRead,
    StepSubmission,
    SubmissionItem,
    UpdateDishRequest,
)
from .catalog_index import CatalogIndex
from .selection_store import SelectionStore

logger = logging.getLogger(__name__)


def as_dish(dish: DishRead | Mapping[str, Any] | None) -> DishRead:
    """Validate a raw dish payload at the boundary; None reads as an empty dish."""
    if isinstance(dish, DishRead):
        return dish
    if dish is None:
        return DishRead()
    return DishRead.model_validate(dish)


# =============================================================================
# Read side
# =============================================================================

def extract_picks(dish: DishRead | Mapping[str, Any] | None) -> list[tuple[int, int, int]]:
    """
    Extract a dish's composition as (step_id, option_id, quantity) triples.

    Nested ``steps`` take precedence over flat ``selections``; a dish with
    neither has no composition and yields an empty list. Flat entries are
    grouped by first-seen step id. Entries missing a step or option id are
    skipped, and an option repeated within a step is merged by summing its
    quantities.
    """
    dish = as_dish(dish)
    grouped: dict[int, dict[int, int]] = {}

    if dish.shape == "steps":
        for step in dish.steps:
            if step.step_id is None:
                continue
            for item in step.items:
                if item.menu_item_id is None:
                    continue
                _merge(grouped, step.step_id, item.menu_item_id, item.quantity)
    elif dish.shape == "selections":
        for selection in dish.selections:
            if selection.step_id is None or selection.option_id is None:
                continue
            _merge(grouped, selection.step_id, selection.option_id, selection.quantity)
    else:
        logger.debug("Dish %s carries no composition", dish.dish_id)

    return [
        (step_id, option_id, quantity)
        for step_id, options in grouped.items()
        for option_id, quantity in options.items()
    ]


def _merge(grouped: dict[int, dict[int, int]], step_id: int, option_id: int, quantity: int) -> None:
    options = grouped.setdefault(step_id, {})
    options[option_id] = options.get(option_id, 0) + quantity


def deserialize(
    dish: DishRead | Mapping[str, Any] | None,
    catalog: CatalogIndex | None = None,
) -> SelectionStore:
    """Populate a SelectionStore from a placed dish (edit mode)."""
    return SelectionStore.from_pairs(extract_picks(dish), catalog=catalog)


# =============================================================================
# Write side
# =============================================================================

def group_by_step(entries: Iterable[tuple[int, int, int]]) -> list[StepSubmission]:
    """
    Re-group (step_id, option_id, quantity) triples into the submission shape.

    Steps keep first-seen order. Entries with a quantity below 1 are dropped,
    so a step left with nothing does not appear.
    """
    grouped: dict[int, list[SubmissionItem]] = {}
    for step_id, option_id, quantity in entries:
        if quantity < 1:
            continue
        grouped.setdefault(step_id, []).append(
            SubmissionItem(menu_item_id=option_id, quantity=quantity)
        )
    return [StepSubmission(step_id=step_id, items=items) for step_id, items in grouped.items()]


def serialize(store: SelectionStore, catalog: CatalogIndex | None = None) -> list[StepSubmission]:
    """
    Serialize a store into the submission ``selections`` list.

    Steps are emitted in catalog order when a catalog is known (the given
    one, else the store's), otherwise in first-selected order.
    """
    catalog = catalog or store.catalog
    step_ids = catalog.sort_step_ids(store.step_ids()) if catalog else store.step_ids()
    return group_by_step(
        (step_id, pick.option_id, pick.quantity)
        for step_id in step_ids
        for pick in store.picks(step_id)
    )


def _note_or_default(note: str | None) -> str:
    note = (note or "").strip()
    return note or config.get_default_dish_note()


def build_create_request(
    store: SelectionStore,
    note: str | None = None,
    store_id: int | None = None,
    catalog: CatalogIndex | None = None,
) -> CreateCustomDishRequest:
    """
    Build the body for adding a newly composed dish to the order.

    Raises:
        EmptyCompositionError: If nothing has been selected
    """
    if not store.has_any_selection():
        raise EmptyCompositionError()
    request = CreateCustomDishRequest(
        store_id=store_id,
        note=_note_or_default(note),
        selections=serialize(store, catalog),
        is_custom=True,
    )
    logger.info("Built custom dish request with %d steps", len(request.selections))
    return request


def build_update_request(
    store: SelectionStore,
    note: str | None = None,
    catalog: CatalogIndex | None = None,
    dish_id: int | None = None,
) -> UpdateDishRequest:
    """
    Build the body for saving an edited composition of an existing dish.

    No ``isCustom`` flag is sent; the dish already exists.

    Raises:
        EmptyCompositionError: If the edit removed every pick
    """
    if not store.has_any_selection():
        raise EmptyCompositionError(dish_id=dish_id)
    request = UpdateDishRequest(note=_note_or_default(note), selections=serialize(store, catalog))
    logger.info("Built update request for dish %s with %d steps", dish_id, len(request.selections))
    return request


def to_payload(model: BaseModel) -> dict[str, Any]:
    """Dump a request model as camelCase JSON-ready data, omitting unset optionals."""
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")
