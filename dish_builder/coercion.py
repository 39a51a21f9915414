"""
Coercion of numbers and ids read from catalog and dish payloads.

Prices and calorie counts arrive from several backend read paths and are not
always well formed: missing, null, NaN, negative or sent as strings. Every
numeric read goes through these helpers so totals stay finite and
non-negative no matter what the upstream data looks like.
"""

import json
import logging
import math
from typing import Any, Optional

logger = logging.getLogger(__name__)


def coerce_amount(value: Any) -> int:
    """
    Coerce a price or calorie value to a finite non-negative integer.

    Examples:
        20000 -> 20000
        "150" -> 150
        12.7 -> 12
        None -> 0
        float("nan") -> 0
        -5 -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Treating unparsable amount %r as 0", value)
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return int(number)


def coerce_quantity(value: Any) -> int:
    """Coerce a wire quantity to a positive integer; anything below 1 reads as 1."""
    quantity = coerce_amount(value)
    return quantity if quantity >= 1 else 1


def coerce_id(value: Any) -> Optional[int]:
    """Coerce an identifier to an int, or None when it cannot be one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        value = value.strip()
        if value.lstrip("-").isdigit():
            return int(value)
    logger.debug("Dropping unusable identifier %r", value)
    return None


def maybe_json_list(value: Any) -> Any:
    """
    Decode list fields that some read paths send as a JSON string.

    Returns the decoded list, the value unchanged when it is already a list,
    and None for anything that is not a list.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = json.loads(text)
        except ValueError:
            logger.debug("Ignoring undecodable JSON list field")
            return None
    if isinstance(value, list):
        return value
    return None
