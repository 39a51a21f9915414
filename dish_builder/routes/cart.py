"""
Cart Routes for Dish Builder
============================

Endpoints backing the cart page.

Endpoints:
----------
- POST /cart/dishes/{dish_id}/ingredients: Update request for changing one
  ingredient's quantity on a dish already in the cart
- POST /cart/totals: Subtotal, discount and total for the selected dishes

Responses for ingredient changes:
---------------------------------
- 200: the update request body to send for the dish
- 204: nothing to update (no composition, ingredient absent, same quantity)
- 422: the change would remove the last ingredient
"""

import logging

from fastapi import APIRouter, HTTPException, Response

from ..builder.mutation import mutate_dish_ingredient
from ..errors import EmptyCompositionError
from ..schemas.cart import CartTotalsOut, CartTotalsRequest
from ..schemas.dishes import IngredientChangeRequest, UpdateDishRequest
from ..services.cart import compute_cart_totals


logger = logging.getLogger(__name__)

cart_router = APIRouter(prefix="/cart", tags=["Cart"])


@cart_router.post(
    "/dishes/{dish_id}/ingredients",
    response_model=UpdateDishRequest,
    response_model_exclude_none=True,
)
def change_dish_ingredient(dish_id: int, body: IngredientChangeRequest):
    dish = body.dish
    if dish.dish_id is None:
        dish = dish.model_copy(update={"dish_id": dish_id})
    elif dish.dish_id != dish_id:
        raise HTTPException(status_code=400, detail="Dish id does not match the path")

    try:
        request = mutate_dish_ingredient(dish, body.step_id, body.option_id, body.quantity)
    except EmptyCompositionError as e:
        raise HTTPException(status_code=422, detail=e.reason)

    if request is None:
        return Response(status_code=204)
    return request


@cart_router.post("/totals", response_model=CartTotalsOut)
def cart_totals(body: CartTotalsRequest) -> CartTotalsOut:
    totals = compute_cart_totals(body.dishes, body.selected_dish_ids, body.promotion)
    return CartTotalsOut(subtotal=totals.subtotal, discount=totals.discount, total=totals.total)
