"""
Catalog Index for the Dish Builder.

This module indexes the customization catalog (ordered steps, each bound to a
category of options) so that an option can be resolved by identity in O(1)
given the step it was picked under.

Two construction paths:
- ``CatalogIndex(steps, options_by_category)`` indexes exactly what it is
  given. Used when the caller already holds clean catalog data.
- ``build_catalog(...)`` / ``CatalogIndex.from_payload(...)`` assembles the
  index the way the storefront loads it: inactive steps dropped, daily menu
  items grouped by category, steps with nothing to offer dropped, and default
  pick bounds filled in.
"""

import logging
from collections import defaultdict
from typing import Any, Iterable, Mapping

from ..coercion import coerce_amount
from ..config import DEFAULT_CURRENCY
from ..schemas.catalog import CatalogDocument, CatalogOption, CatalogStep, DailyMenuItem

logger = logging.getLogger(__name__)


def _as_step(step: CatalogStep | Mapping[str, Any]) -> CatalogStep:
    if isinstance(step, CatalogStep):
        return step
    return CatalogStep.model_validate(step)


def _as_option(option: CatalogOption | Mapping[str, Any]) -> CatalogOption:
    if isinstance(option, CatalogOption):
        return option
    return CatalogOption.model_validate(option)


class CatalogIndex:
    """
    Read-only index over the steps and options of one catalog.

    Options are looked up through the category bound to a step, so an option
    id only resolves under the step(s) whose category declares it.
    """

    def __init__(
        self,
        steps: Iterable[CatalogStep | Mapping[str, Any]],
        options_by_category: Mapping[int, Iterable[CatalogOption | Mapping[str, Any]]] | None = None,
        base_price: Any = 0,
        currency: str | None = None,
    ):
        """
        Initialize the catalog index.

        Args:
            steps: Step definitions, in any order
            options_by_category: category_id -> options of that category
            base_price: Price of the empty dish, added to every total
            currency: Currency label; defaults to DEFAULT_CURRENCY
        """
        self._steps: dict[int, CatalogStep] = {}
        for raw_step in steps:
            step = _as_step(raw_step)
            if step.id in self._steps:
                logger.warning("Duplicate step id %s in catalog; keeping the first", step.id)
                continue
            self._steps[step.id] = step

        # sorted() is stable, so steps sharing an ordinal keep their input order
        self._ordered: list[CatalogStep] = sorted(self._steps.values(), key=lambda s: s.step_number)
        self._positions: dict[int, int] = {step.id: pos for pos, step in enumerate(self._ordered)}

        self._options: dict[int, dict[int, CatalogOption]] = {}
        for category_id, options in (options_by_category or {}).items():
            indexed: dict[int, CatalogOption] = {}
            for raw_option in options:
                option = _as_option(raw_option)
                indexed.setdefault(option.id, option)
            self._options[category_id] = indexed

        self.base_price: int = coerce_amount(base_price)
        self.currency: str = currency or DEFAULT_CURRENCY

    @classmethod
    def from_payload(cls, payload: CatalogDocument | Mapping[str, Any]) -> "CatalogIndex":
        """Build an index from a catalog JSON document (see schemas.catalog)."""
        if not isinstance(payload, CatalogDocument):
            payload = CatalogDocument.model_validate(payload)
        return build_catalog(
            payload.steps,
            options_by_category=payload.options_by_category,
            menu_items=payload.items,
            base_price=payload.base_price,
            currency=payload.currency,
        )

    # =========================================================================
    # Steps
    # =========================================================================

    def steps_ordered(self) -> list[CatalogStep]:
        """Steps ascending by step number; authoritative for sequencing."""
        return list(self._ordered)

    def get_step(self, step_id: int) -> CatalogStep | None:
        return self._steps.get(step_id)

    def has_step(self, step_id: int) -> bool:
        return step_id in self._steps

    def step_position(self, step_id: int) -> int | None:
        """Zero-based position of a step in catalog order, None if unknown."""
        return self._positions.get(step_id)

    def sort_step_ids(self, step_ids: Iterable[int]) -> list[int]:
        """
        Order step ids by catalog position.

        Ids the catalog does not know keep their relative order and follow
        the known ones.
        """
        step_ids = list(step_ids)
        known = sorted((sid for sid in step_ids if sid in self._positions), key=self._positions.__getitem__)
        unknown = [sid for sid in step_ids if sid not in self._positions]
        return known + unknown

    # =========================================================================
    # Options
    # =========================================================================

    def resolve_option(self, step_id: int, option_id: int) -> CatalogOption | None:
        """
        Resolve an option picked under a step.

        Searches only the options of the step's category. Inactive options
        still resolve so saved compositions keep their prices.

        Returns:
            The option, or None when the step or option is unknown
        """
        step = self._steps.get(step_id)
        if step is None or step.category_id is None:
            return None
        return self._options.get(step.category_id, {}).get(option_id)

    def options_for_step(self, step_id: int) -> list[CatalogOption]:
        """All options of the step's category, including inactive ones."""
        step = self._steps.get(step_id)
        if step is None or step.category_id is None:
            return []
        return list(self._options.get(step.category_id, {}).values())

    def offered_options(self, step_id: int) -> list[CatalogOption]:
        """Options a customer may pick now (active only), in catalog order."""
        return [opt for opt in self.options_for_step(step_id) if opt.is_active]

    def is_offered(self, step_id: int, option_id: int) -> bool:
        option = self.resolve_option(step_id, option_id)
        return option is not None and option.is_active

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"CatalogIndex(steps={len(self._steps)}, categories={len(self._options)})"


def group_menu_items(menu_items: Iterable[DailyMenuItem | Mapping[str, Any]]) -> dict[int, list[CatalogOption]]:
    """
    Group daily menu items into options per category.

    Items without a category cannot be bound to a step and are skipped.
    """
    grouped: dict[int, list[CatalogOption]] = defaultdict(list)
    for raw_item in menu_items:
        item = raw_item if isinstance(raw_item, DailyMenuItem) else DailyMenuItem.model_validate(raw_item)
        category_id = item.category.category_id if item.category else None
        if category_id is None:
            logger.debug("Skipping menu item %s without a category", item.menu_item_id)
            continue
        grouped[category_id].append(item.to_option())
    return dict(grouped)


def build_catalog(
    steps: Iterable[CatalogStep | Mapping[str, Any]],
    options_by_category: Mapping[int, Iterable[CatalogOption | Mapping[str, Any]]] | None = None,
    menu_items: Iterable[DailyMenuItem | Mapping[str, Any]] = (),
    base_price: Any = 0,
    currency: str | None = None,
) -> CatalogIndex:
    """
    Assemble a catalog index the way the storefront builder loads it.

    - Inactive steps are dropped.
    - Daily menu items are grouped by category and appended to the options
      of that category.
    - Steps whose category offers no active option are dropped.
    - Steps that do not declare a maximum get ``max(1, offered option count)``.

    Args:
        steps: Step definitions from the steps listing
        options_by_category: Options already grouped by category
        menu_items: Daily menu items tagged with a category
        base_price: Price of the empty dish
        currency: Currency label

    Returns:
        A CatalogIndex over the usable steps
    """
    grouped: dict[int, list[CatalogOption]] = {
        category_id: [_as_option(opt) for opt in options]
        for category_id, options in (options_by_category or {}).items()
    }
    for category_id, options in group_menu_items(menu_items).items():
        grouped.setdefault(category_id, []).extend(options)

    usable_steps: list[CatalogStep] = []
    for raw_step in steps:
        step = _as_step(raw_step)
        if not step.is_active:
            continue
        offered = [opt for opt in grouped.get(step.category_id, []) if opt.is_active]
        if not offered:
            logger.debug("Dropping step %s (%s): no options offered", step.id, step.name)
            continue
        if step.max_picks is None:
            step = step.model_copy(update={"max_picks": max(1, len(offered))})
        usable_steps.append(step)

    catalog = CatalogIndex(usable_steps, grouped, base_price=base_price, currency=currency)
    logger.info(
        "Built catalog with %d steps across %d categories",
        len(catalog),
        len(grouped),
    )
    return catalog
