"""
Cart Services for Dish Builder
==============================

Host-side logic around the dishes in a customer's current order.

Key Functions:
--------------
- compute_cart_totals: Subtotal, promotion discount and final total for the
  dishes selected for checkout
- CartEditor: Dispatches single-ingredient changes for dishes in the cart,
  keeping at most one update per dish in flight

Update Ordering:
----------------
Every ingredient change is computed from the dish as last fetched. Two
changes computed from the same stale dish would overwrite each other, so
CartEditor refuses a second change for a dish while the first is still being
dispatched. Different dishes never block each other.
"""

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, TypeVar

from ..builder.mutation import mutate_dish_ingredient
from ..builder.wire_adapter import as_dish, to_payload
from ..errors import DishUpdateInProgressError
from ..schemas.cart import CartDishIn, PromotionIn
from ..schemas.dishes import DishRead

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Cart Totals
# =============================================================================

@dataclass(frozen=True)
class CartTotals:
    subtotal: int
    discount: int
    total: int


def compute_cart_totals(
    dishes: Iterable[CartDishIn | Mapping[str, Any]],
    selected_ids: Optional[Iterable[int]] = None,
    promotion: Optional[PromotionIn | Mapping[str, Any]] = None,
) -> CartTotals:
    """
    Compute the checkout totals for the selected dishes.

    Args:
        dishes: Dishes in the current order (price and quantity per line)
        selected_ids: Dish ids selected for checkout; None selects every dish
        promotion: Optional promotion to apply

    Returns:
        CartTotals; the discount never exceeds the subtotal
    """
    selected = set(selected_ids) if selected_ids is not None else None
    subtotal = 0
    for raw in dishes:
        dish = raw if isinstance(raw, CartDishIn) else CartDishIn.model_validate(raw)
        if selected is not None and dish.dish_id not in selected:
            continue
        subtotal += dish.price * dish.quantity

    discount = 0
    if promotion is not None:
        if not isinstance(promotion, PromotionIn):
            promotion = PromotionIn.model_validate(promotion)
        if promotion.discount_type == "PERCENT":
            discount = subtotal * promotion.discount_value // 100
        else:
            discount = promotion.discount_value
    discount = min(discount, subtotal)

    return CartTotals(subtotal=subtotal, discount=discount, total=max(0, subtotal - discount))


# =============================================================================
# Ingredient Changes
# =============================================================================

class CartEditor:
    """
    Dispatches ingredient changes for dishes in the cart.

    The update itself is performed by a caller-supplied function
    ``update_dish(dish_id, payload)`` (the transport layer). This class only
    computes the payload and serializes updates per dish.

    A dish stays held until its dispatch completes. For a synchronous
    transport that is when ``update_dish`` returns. A transport that returns
    a future (asyncio or concurrent.futures) releases the dish when the
    future is done. A transport that returns any other awaitable gets back
    a wrapping coroutine which releases the dish once awaited; callers must
    await it. Async hosts can use ``change_ingredient_quantity_async``.
    """

    def __init__(self, update_dish: Callable[[int, dict[str, Any]], T]):
        self._update_dish = update_dish
        self._in_flight: set[int] = set()
        self._lock = threading.Lock()

    def is_updating(self, dish_id: int) -> bool:
        with self._lock:
            return dish_id in self._in_flight

    def change_ingredient_quantity(
        self,
        dish: DishRead | Mapping[str, Any],
        step_id: int,
        option_id: int,
        new_quantity: int,
    ) -> Optional[T]:
        """
        Change one ingredient's quantity on a dish and dispatch the update.

        Returns:
            Whatever ``update_dish`` returns (wrapped when it is a bare
            awaitable), or None when there was nothing to update

        Raises:
            EmptyCompositionError: If the change would remove the last
                ingredient (nothing is dispatched)
            DishUpdateInProgressError: If an update for this dish is still
                pending
            ValueError: If the dish has no id
        """
        dish_id, payload = self._prepare(dish, step_id, option_id, new_quantity)
        if payload is None:
            return None

        self._acquire(dish_id)
        try:
            logger.info("Updating dish %s: option %s in step %s -> %s",
                        dish_id, option_id, step_id, new_quantity)
            result = self._update_dish(dish_id, payload)
        except BaseException:
            self._release(dish_id)
            raise
        return self._release_when_done(dish_id, result)

    async def change_ingredient_quantity_async(
        self,
        dish: DishRead | Mapping[str, Any],
        step_id: int,
        option_id: int,
        new_quantity: int,
    ) -> Any:
        """Async form of ``change_ingredient_quantity``; the dish is held until the update is awaited."""
        dish_id, payload = self._prepare(dish, step_id, option_id, new_quantity)
        if payload is None:
            return None

        self._acquire(dish_id)
        try:
            logger.info("Updating dish %s: option %s in step %s -> %s",
                        dish_id, option_id, step_id, new_quantity)
            result = self._update_dish(dish_id, payload)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            self._release(dish_id)

    def _prepare(
        self,
        dish: DishRead | Mapping[str, Any],
        step_id: int,
        option_id: int,
        new_quantity: int,
    ) -> tuple[int, Optional[dict[str, Any]]]:
        dish = as_dish(dish)
        if dish.dish_id is None:
            raise ValueError("Cannot update a dish without an id")
        request = mutate_dish_ingredient(dish, step_id, option_id, new_quantity)
        return dish.dish_id, to_payload(request) if request is not None else None

    def _release_when_done(self, dish_id: int, result: Any) -> Any:
        if callable(getattr(result, "add_done_callback", None)):
            result.add_done_callback(lambda _: self._release(dish_id))
            return result
        if inspect.isawaitable(result):
            return self._await_then_release(dish_id, result)
        self._release(dish_id)
        return result

    async def _await_then_release(self, dish_id: int, pending: Awaitable[Any]) -> Any:
        try:
            return await pending
        finally:
            self._release(dish_id)

    def _acquire(self, dish_id: int) -> None:
        with self._lock:
            if dish_id in self._in_flight:
                raise DishUpdateInProgressError(dish_id)
            self._in_flight.add(dish_id)

    def _release(self, dish_id: int) -> None:
        with self._lock:
            self._in_flight.discard(dish_id)
