"""
Selection Store for one dish composition.

The store maps a step id to the options picked in that step, each with a
positive quantity. It is the single source of truth for what the customer
has chosen so far, and toggle/increment/decrement are its only mutation
surface.

Invariants (enforced by construction):
- a step with no picks has no entry (empty lists are deleted, not kept)
- no pick has quantity <= 0 (decrement to zero removes the pick)
- an option id appears at most once per step (repeats are quantity increments)

A catalog may be attached. It is used for validation only: new picks must be
offered by the step, and step pick bounds (min/max) are honored. A store
without a catalog accepts any pick.
"""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Iterable, Mapping

if TYPE_CHECKING:
    from .catalog_index import CatalogIndex
    from ..schemas.dishes import DishRead

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pick:
    """A chosen option plus a positive quantity."""
    option_id: int
    quantity: int = 1

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Pick quantity must be at least 1, got {self.quantity}")


class SelectionStore:
    """In-memory selection state for one dish being composed or edited."""

    def __init__(self, catalog: "CatalogIndex | None" = None):
        self.catalog = catalog
        self._selections: dict[int, list[Pick]] = {}

    @classmethod
    def from_pairs(
        cls,
        entries: Iterable[tuple[int, int, int]],
        catalog: "CatalogIndex | None" = None,
    ) -> "SelectionStore":
        """
        Build a store from (step_id, option_id, quantity) triples.

        Used when loading an existing composition, so the catalog is not
        consulted: a saved dish may reference options no longer offered.
        Repeated (step, option) pairs are merged by summing quantities;
        entries with a quantity below 1 are ignored.
        """
        store = cls(catalog=catalog)
        for step_id, option_id, quantity in entries:
            if quantity < 1:
                continue
            picks = store._selections.setdefault(step_id, [])
            idx = _index_of(picks, option_id)
            if idx is None:
                picks.append(Pick(option_id, quantity))
            else:
                picks[idx] = replace(picks[idx], quantity=picks[idx].quantity + quantity)
        return store

    @classmethod
    def load(
        cls,
        dish: "DishRead | Mapping[str, Any]",
        catalog: "CatalogIndex | None" = None,
    ) -> "SelectionStore":
        """Populate a store from a placed dish (edit mode). See wire_adapter.deserialize."""
        from .wire_adapter import deserialize

        return deserialize(dish, catalog=catalog)

    # =========================================================================
    # Mutations
    # =========================================================================

    def toggle(self, step_id: int, option_id: int) -> bool:
        """
        Select or deselect an option.

        An existing pick is removed entirely. Otherwise a new pick with
        quantity 1 is inserted, subject to the attached catalog: the option
        must be offered by the step, a single-select step (max 1) replaces
        its current pick, and a multi-select step at its max ignores the
        insertion.

        Returns:
            True if the store changed
        """
        picks = self._selections.get(step_id, [])
        idx = _index_of(picks, option_id)
        if idx is not None:
            del picks[idx]
            if not picks:
                del self._selections[step_id]
            return True

        if not self._may_insert(step_id, option_id):
            return False

        max_picks = self._max_picks(step_id)
        if max_picks == 1:
            self._selections[step_id] = [Pick(option_id)]
            return True
        if max_picks is not None and len(picks) >= max_picks:
            logger.debug("Step %s already has %d picks (max %d)", step_id, len(picks), max_picks)
            return False

        self._selections.setdefault(step_id, []).append(Pick(option_id))
        return True

    def increment(self, step_id: int, option_id: int) -> bool:
        """Add one to an existing pick. No-op when the pick does not exist."""
        picks = self._selections.get(step_id, [])
        idx = _index_of(picks, option_id)
        if idx is None:
            return False
        picks[idx] = replace(picks[idx], quantity=picks[idx].quantity + 1)
        return True

    def decrement(self, step_id: int, option_id: int) -> bool:
        """Remove one from an existing pick; a pick reaching zero is removed."""
        picks = self._selections.get(step_id, [])
        idx = _index_of(picks, option_id)
        if idx is None:
            return False
        next_quantity = picks[idx].quantity - 1
        if next_quantity <= 0:
            del picks[idx]
            if not picks:
                del self._selections[step_id]
        else:
            picks[idx] = replace(picks[idx], quantity=next_quantity)
        return True

    def clear(self) -> None:
        self._selections.clear()

    # =========================================================================
    # Queries
    # =========================================================================

    def has_any_selection(self) -> bool:
        """True iff at least one step has a pick. Gate for submission."""
        return any(self._selections.values())

    def can_advance(self, step_id: int) -> bool:
        """
        Check the pick count of a step against its bounds.

        A step the catalog does not bound (or a store without a catalog)
        always allows moving on.
        """
        count = len(self._selections.get(step_id, []))
        step = self.catalog.get_step(step_id) if self.catalog else None
        if step is None:
            return True
        if count < step.min_picks:
            return False
        return step.max_picks is None or count <= step.max_picks

    def picks(self, step_id: int) -> tuple[Pick, ...]:
        return tuple(self._selections.get(step_id, ()))

    def quantity_of(self, step_id: int, option_id: int) -> int:
        """Quantity picked for an option, 0 when not selected."""
        for pick in self._selections.get(step_id, ()):
            if pick.option_id == option_id:
                return pick.quantity
        return 0

    def step_ids(self) -> list[int]:
        """Steps with picks, in first-selected order."""
        return list(self._selections)

    def items(self) -> list[tuple[int, tuple[Pick, ...]]]:
        return [(step_id, tuple(picks)) for step_id, picks in self._selections.items()]

    def total_picks(self) -> int:
        """Number of distinct (step, option) picks across all steps."""
        return sum(len(picks) for picks in self._selections.values())

    def as_dict(self) -> dict[int, list[tuple[int, int]]]:
        return {
            step_id: [(pick.option_id, pick.quantity) for pick in picks]
            for step_id, picks in self._selections.items()
        }

    def copy(self) -> "SelectionStore":
        clone = SelectionStore(catalog=self.catalog)
        clone._selections = {step_id: list(picks) for step_id, picks in self._selections.items()}
        return clone

    def __len__(self) -> int:
        return len(self._selections)

    def __repr__(self) -> str:
        return f"SelectionStore({self.as_dict()!r})"

    # =========================================================================
    # Catalog validation
    # =========================================================================

    def _may_insert(self, step_id: int, option_id: int) -> bool:
        if self.catalog is None:
            return True
        if not self.catalog.is_offered(step_id, option_id):
            logger.debug("Option %s is not offered in step %s; ignoring pick", option_id, step_id)
            return False
        return True

    def _max_picks(self, step_id: int) -> int | None:
        if self.catalog is None:
            return None
        step = self.catalog.get_step(step_id)
        return step.max_picks if step else None


def _index_of(picks: list[Pick], option_id: int) -> int | None:
    for idx, pick in enumerate(picks):
        if pick.option_id == option_id:
            return idx
    return None
