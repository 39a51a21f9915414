"""
Domain errors raised by the dish builder.

Only business rules raise. Malformed catalog or dish data (missing prices,
unknown options, a dish with no composition) is coerced to a safe value
instead, so these classes stay few.
"""

from typing import Optional


EMPTY_COMPOSITION_REASON = "At least one ingredient is required."


class CompositionError(Exception):
    """Base class for rejected composition operations."""


class EmptyCompositionError(CompositionError):
    """Raised when a submission or mutation would leave a dish with no picks."""

    def __init__(self, dish_id: Optional[int] = None, reason: str = EMPTY_COMPOSITION_REASON):
        self.dish_id = dish_id
        self.reason = reason
        if dish_id is not None:
            super().__init__(f"Cannot update dish {dish_id}: {reason}")
        else:
            super().__init__(reason)


class DishUpdateInProgressError(CompositionError):
    """Raised when an update for a dish is requested while another is in flight."""

    def __init__(self, dish_id: int):
        self.dish_id = dish_id
        super().__init__(f"An update for dish {dish_id} is already in progress")
