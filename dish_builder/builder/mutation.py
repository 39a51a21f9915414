"""
Cart-side ingredient mutation for dishes already placed on an order.

Unlike live composition, the source of truth here is the dish as last fetched
from the backend, not a SelectionStore. Each change is computed from that
dish, one ingredient at a time, and produces an independent update request:

1. extract the dish's picks (nested ``steps`` preferred, flat ``selections``
   as fallback); a dish with neither has nothing to mutate
2. apply the quantity change to the matching pick; a quantity <= 0 removes it
3. reject the change if the dish would be left with no picks at all
4. re-group the remaining picks into the submission shape

The dish object passed in is never modified. Hosts must keep at most one
update per dish in flight, since every change starts from the last fetched
state (see services.cart.CartEditor).
"""

import logging
from typing import Any, Mapping

from ..errors import EmptyCompositionError
from ..schemas.dishes import DishRead, UpdateDishRequest
from .wire_adapter import as_dish, extract_picks, group_by_step

logger = logging.getLogger(__name__)


def mutate_dish_ingredient(
    dish: DishRead | Mapping[str, Any],
    step_id: int,
    option_id: int,
    new_quantity: int,
) -> UpdateDishRequest | None:
    """
    Compute the update request for changing one ingredient's quantity.

    Args:
        dish: The dish as last fetched
        step_id: Step the ingredient was picked under
        option_id: The ingredient (menu item) id
        new_quantity: Desired quantity; <= 0 removes the ingredient

    Returns:
        The update request body, or None when there is nothing to update
        (no composition, ingredient not on the dish, or quantity unchanged)

    Raises:
        EmptyCompositionError: If the change would remove the last ingredient
    """
    dish = as_dish(dish)
    current = extract_picks(dish)
    if not current:
        logger.debug("Dish %s has no composition; nothing to mutate", dish.dish_id)
        return None

    target = next(
        (quantity for s_id, o_id, quantity in current if s_id == step_id and o_id == option_id),
        None,
    )
    if target is None:
        logger.debug("Option %s not on dish %s in step %s", option_id, dish.dish_id, step_id)
        return None
    if target == new_quantity:
        return None

    updated = []
    for s_id, o_id, quantity in current:
        if s_id == step_id and o_id == option_id:
            if new_quantity <= 0:
                continue
            quantity = new_quantity
        updated.append((s_id, o_id, quantity))

    if not updated:
        logger.warning("Rejected change on dish %s: it would remove the last ingredient", dish.dish_id)
        raise EmptyCompositionError(dish_id=dish.dish_id)

    return UpdateDishRequest(selections=group_by_step(updated))


def dish_quantity_of(dish: DishRead | Mapping[str, Any], step_id: int, option_id: int) -> int:
    """Quantity of an ingredient on a dish, 0 when absent."""
    for s_id, o_id, quantity in extract_picks(dish):
        if s_id == step_id and o_id == option_id:
            return quantity
    return 0


def increment_dish_ingredient(
    dish: DishRead | Mapping[str, Any],
    step_id: int,
    option_id: int,
) -> UpdateDishRequest | None:
    dish = as_dish(dish)
    current = dish_quantity_of(dish, step_id, option_id)
    if current == 0:
        return None
    return mutate_dish_ingredient(dish, step_id, option_id, current + 1)


def decrement_dish_ingredient(
    dish: DishRead | Mapping[str, Any],
    step_id: int,
    option_id: int,
) -> UpdateDishRequest | None:
    dish = as_dish(dish)
    current = dish_quantity_of(dish, step_id, option_id)
    if current == 0:
        return None
    return mutate_dish_ingredient(dish, step_id, option_id, current - 1)
