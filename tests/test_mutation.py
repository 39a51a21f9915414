"""
Unit tests for cart-side ingredient mutation.

Run with: pytest tests/test_mutation.py -v
"""

import copy

import pytest

from dish_builder.builder.mutation import (
    decrement_dish_ingredient,
    dish_quantity_of,
    increment_dish_ingredient,
    mutate_dish_ingredient,
)
from dish_builder.builder.wire_adapter import extract_picks, to_payload
from dish_builder.errors import EmptyCompositionError
from dish_builder.schemas.dishes import DishRead


@pytest.fixture
def single_pick_dish():
    return {
        "dishId": 12,
        "steps": [{"stepId": 1, "items": [{"menuItemId": 10, "quantity": 1}]}],
    }


# =============================================================================
# Single-Pick Dish Tests
# =============================================================================

class TestSinglePickDish:
    """A dish whose whole composition is one pick."""

    def test_decrement_last_pick_rejected(self, single_pick_dish):
        with pytest.raises(EmptyCompositionError) as exc_info:
            decrement_dish_ingredient(single_pick_dish, 1, 10)
        assert exc_info.value.dish_id == 12
        assert exc_info.value.reason == "At least one ingredient is required."

    def test_rejected_change_leaves_dish_unchanged(self, single_pick_dish):
        before = copy.deepcopy(single_pick_dish)
        with pytest.raises(EmptyCompositionError):
            mutate_dish_ingredient(single_pick_dish, 1, 10, 0)
        assert single_pick_dish == before
        assert extract_picks(single_pick_dish) == [(1, 10, 1)]

    def test_negative_quantity_also_rejected(self, single_pick_dish):
        with pytest.raises(EmptyCompositionError):
            mutate_dish_ingredient(single_pick_dish, 1, 10, -2)

    def test_increment(self, single_pick_dish):
        request = increment_dish_ingredient(single_pick_dish, 1, 10)
        assert to_payload(request) == {
            "selections": [{"stepId": 1, "items": [{"menuItemId": 10, "quantity": 2}]}],
        }

    def test_error_message_names_dish(self, single_pick_dish):
        with pytest.raises(EmptyCompositionError, match="dish 12"):
            decrement_dish_ingredient(single_pick_dish, 1, 10)


# =============================================================================
# Multi-Pick Dish Tests
# =============================================================================

class TestMultiPickDish:
    """Tests against the nested fixture dish (10x1 in step 1, 20x2 + 21x1 in step 2)."""

    def test_set_quantity(self, nested_dish):
        request = mutate_dish_ingredient(nested_dish, 2, 20, 5)
        assert [(s.step_id, [(i.menu_item_id, i.quantity) for i in s.items]) for s in request.selections] == [
            (1, [(10, 1)]),
            (2, [(20, 5), (21, 1)]),
        ]

    def test_remove_one_pick_keeps_others(self, nested_dish):
        request = mutate_dish_ingredient(nested_dish, 2, 21, 0)
        assert [(s.step_id, [(i.menu_item_id, i.quantity) for i in s.items]) for s in request.selections] == [
            (1, [(10, 1)]),
            (2, [(20, 2)]),
        ]

    def test_removing_a_whole_step_is_allowed(self, nested_dish):
        request = mutate_dish_ingredient(nested_dish, 1, 10, 0)
        assert [s.step_id for s in request.selections] == [2]

    def test_decrement_above_one(self, nested_dish):
        request = decrement_dish_ingredient(nested_dish, 2, 20)
        assert to_payload(request)["selections"][1]["items"][0] == {"menuItemId": 20, "quantity": 1}

    def test_update_request_sends_no_note(self, nested_dish):
        payload = to_payload(increment_dish_ingredient(nested_dish, 1, 10))
        assert "note" not in payload
        assert "isCustom" not in payload

    def test_accepts_validated_dish(self, nested_dish):
        dish = DishRead.model_validate(nested_dish)
        request = increment_dish_ingredient(dish, 1, 10)
        assert request.selections[0].items[0].quantity == 2

    def test_quantity_of(self, nested_dish):
        assert dish_quantity_of(nested_dish, 2, 20) == 2
        assert dish_quantity_of(nested_dish, 2, 99) == 0


# =============================================================================
# Shape and No-op Tests
# =============================================================================

class TestShapesAndNoops:

    def test_flat_shape_dish(self):
        dish = {
            "id": 3,
            "selections": [
                {"stepId": 1, "optionId": 10, "quantity": 1},
                {"stepId": 2, "optionId": 20, "quantity": 1},
            ],
        }
        request = mutate_dish_ingredient(dish, 2, 20, 0)
        assert to_payload(request) == {
            "selections": [{"stepId": 1, "items": [{"menuItemId": 10, "quantity": 1}]}],
        }

    def test_nested_shape_preferred(self, nested_dish):
        dish = dict(nested_dish)
        dish["selections"] = [{"stepId": 9, "optionId": 90, "quantity": 1}]
        assert mutate_dish_ingredient(dish, 9, 90, 2) is None

    def test_dish_without_composition(self):
        assert mutate_dish_ingredient({"dishId": 1}, 1, 10, 2) is None

    def test_absent_ingredient(self, nested_dish):
        assert mutate_dish_ingredient(nested_dish, 1, 11, 2) is None
        assert increment_dish_ingredient(nested_dish, 1, 11) is None
        assert decrement_dish_ingredient(nested_dish, 1, 11) is None

    def test_ingredient_under_other_step(self, nested_dish):
        assert mutate_dish_ingredient(nested_dish, 2, 10, 3) is None

    def test_unchanged_quantity(self, nested_dish):
        assert mutate_dish_ingredient(nested_dish, 2, 20, 2) is None
