"""
Supplier form validation.

Runs one layer above the stores: the stores coerce anything they are given,
so callers that want to reject bad input (the CLI, a UI) check it here first.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from activity_store.domain.normalize import coerce_number


def _parse(value: Any) -> Optional[float]:
    number = coerce_number(value, default=math.nan)
    return None if math.isnan(number) else number


def validate_activity_form(
    name: Any,
    category: Any,
    price: Any,
    rating: Any = None,
) -> Dict[str, str]:
    """
    Return a field -> message mapping; empty when the input is acceptable.
    """
    errors: Dict[str, str] = {}
    if not str(name or "").strip():
        errors["name"] = "Name is required"
    if not str(category or "").strip():
        errors["category"] = "Category is required"

    parsed_price = _parse(price)
    if parsed_price is None or parsed_price <= 0:
        errors["price"] = "Enter a valid price"

    if rating is not None and str(rating).strip() != "":
        parsed_rating = _parse(rating)
        if parsed_rating is None or not 0 <= parsed_rating <= 5:
            errors["rating"] = "Rating must be 0-5"
    return errors


__all__ = ["validate_activity_form"]
