"""
Custom dish composition engine.

- catalog_index: steps and options, resolved by (step, option)
- selection_store: the picks of one dish being composed or edited
- aggregation: price/calorie totals and per-step summaries
- wire_adapter: dish read shapes -> store -> submission shape
- mutation: single-ingredient changes on dishes already in the cart

Everything here is synchronous and free of I/O.
"""

from .catalog_index import CatalogIndex, build_catalog, group_menu_items
from .selection_store import Pick, SelectionStore
from .aggregation import (
    AggregateTotals,
    AggregationEngine,
    StepSummary,
    SummaryLine,
    compute_totals,
    itemized_price,
    summarize_steps,
)
from .wire_adapter import (
    as_dish,
    build_create_request,
    build_update_request,
    deserialize,
    extract_picks,
    group_by_step,
    serialize,
    to_payload,
)
from .mutation import (
    decrement_dish_ingredient,
    dish_quantity_of,
    increment_dish_ingredient,
    mutate_dish_ingredient,
)

__all__ = [
    "CatalogIndex",
    "build_catalog",
    "group_menu_items",
    "Pick",
    "SelectionStore",
    "AggregateTotals",
    "AggregationEngine",
    "StepSummary",
    "SummaryLine",
    "compute_totals",
    "itemized_price",
    "summarize_steps",
    "as_dish",
    "build_create_request",
    "build_update_request",
    "deserialize",
    "extract_picks",
    "group_by_step",
    "serialize",
    "to_payload",
    "decrement_dish_ingredient",
    "dish_quantity_of",
    "increment_dish_ingredient",
    "mutate_dish_ingredient",
]
