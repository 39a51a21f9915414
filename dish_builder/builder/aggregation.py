"""
Aggregation Engine for Dish Compositions.

Derives price and calorie totals, and per-step display summaries, from a
SelectionStore by resolving every pick against the CatalogIndex.

Totals are never stored; they are recomputed from (store x catalog) on every
change. Selection sets are bounded by step count times options per step, so
the O(total picks) fold needs no memoization.

The fold is total over malformed data: a pick whose option cannot be resolved
(retired item, wrong category) contributes zero, and every price or calorie
read is coerced to a finite non-negative integer before it is accumulated.
"""

import logging
from dataclasses import dataclass, field

from ..coercion import coerce_amount
from .catalog_index import CatalogIndex
from .selection_store import SelectionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateTotals:
    total_price: int = 0
    total_calories: int = 0


@dataclass(frozen=True)
class SummaryLine:
    """One resolved pick, priced for display."""
    option_id: int
    name: str
    quantity: int
    unit_price: int
    line_price: int
    line_calories: int
    image_url: str | None = None


@dataclass
class StepSummary:
    """The resolved picks of one step and their subtotals."""
    step_id: int
    step_name: str
    lines: list[SummaryLine] = field(default_factory=list)
    subtotal_price: int = 0
    subtotal_calories: int = 0


class AggregationEngine:
    """
    Computes totals and summaries for selections against one catalog.

    The catalog's base price (price of the empty dish) seeds the price total.
    """

    def __init__(self, catalog: CatalogIndex):
        self._catalog = catalog

    @property
    def catalog(self) -> CatalogIndex:
        return self._catalog

    def compute_totals(self, store: SelectionStore, include_base_price: bool = True) -> AggregateTotals:
        """
        Fold every pick into price and calorie totals.

        Args:
            store: The selections to total
            include_base_price: Seed the price with the catalog base price

        Returns:
            AggregateTotals with finite, non-negative integers
        """
        total_price = coerce_amount(self._catalog.base_price) if include_base_price else 0
        total_calories = 0

        for step_id, picks in store.items():
            for pick in picks:
                option = self._catalog.resolve_option(step_id, pick.option_id)
                if option is None:
                    logger.debug(
                        "Option %s in step %s not in catalog; contributes 0",
                        pick.option_id, step_id,
                    )
                    continue
                quantity = coerce_amount(pick.quantity)
                total_price += coerce_amount(option.price) * quantity
                total_calories += coerce_amount(option.cal) * quantity

        return AggregateTotals(total_price=total_price, total_calories=total_calories)

    def itemized_price(self, store: SelectionStore) -> int:
        """Sum of the picked options only, without the base price."""
        return self.compute_totals(store, include_base_price=False).total_price

    def summarize_steps(self, store: SelectionStore) -> list[StepSummary]:
        """
        Build per-step summaries in catalog order.

        Unresolvable picks are left out of the lines. Steps the catalog does
        not know follow the known ones, with an empty name.
        """
        summaries = []
        for step_id in self._catalog.sort_step_ids(store.step_ids()):
            step = self._catalog.get_step(step_id)
            summary = StepSummary(step_id=step_id, step_name=step.name if step else "")
            for pick in store.picks(step_id):
                option = self._catalog.resolve_option(step_id, pick.option_id)
                if option is None:
                    continue
                unit_price = coerce_amount(option.price)
                line = SummaryLine(
                    option_id=option.id,
                    name=option.name,
                    quantity=pick.quantity,
                    unit_price=unit_price,
                    line_price=unit_price * pick.quantity,
                    line_calories=coerce_amount(option.cal) * pick.quantity,
                    image_url=option.image_url,
                )
                summary.lines.append(line)
                summary.subtotal_price += line.line_price
                summary.subtotal_calories += line.line_calories
            summaries.append(summary)
        return summaries


def compute_totals(
    store: SelectionStore,
    catalog: CatalogIndex,
    include_base_price: bool = True,
) -> AggregateTotals:
    """Shortcut for ``AggregationEngine(catalog).compute_totals(store)``."""
    return AggregationEngine(catalog).compute_totals(store, include_base_price=include_base_price)


def summarize_steps(store: SelectionStore, catalog: CatalogIndex) -> list[StepSummary]:
    return AggregationEngine(catalog).summarize_steps(store)


def itemized_price(store: SelectionStore, catalog: CatalogIndex) -> int:
    return AggregationEngine(catalog).itemized_price(store)
