"""
Record normalization for the Activity Store.

Turns loosely-shaped input (partial mappings with camelCase or snake_case keys,
or existing models) into canonical records with defaults filled in and numeric
coercion applied. Normalizers never raise: bad input degrades to safe defaults.
"""
from __future__ import annotations

import math
import random
import string
import time
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel

from activity_store.domain.models import PAYOUT_STATUSES, Activity, Booking, Payout

RecordInput = Union[Mapping[str, Any], BaseModel]

PLACEHOLDER_IMAGE_BASE = "https://picsum.photos/seed"
PLACEHOLDER_IMAGE_SIZE = (640, 400)
DEFAULT_IMAGE_SEED = "activity"

_BASE36 = string.digits + string.ascii_lowercase
# Characters encodeURIComponent leaves alone besides the quote() defaults.
_URL_SAFE = "!*'()"


def generate_id(rng: Optional[random.Random] = None) -> str:
    """Return `"{epoch-millis}_{6 random base36 chars}"`."""
    chooser = rng or random
    suffix = "".join(chooser.choice(_BASE36) for _ in range(6))
    return f"{int(time.time() * 1000)}_{suffix}"


def placeholder_image_url(seed: str) -> str:
    """Deterministic placeholder image URL for the given seed string."""
    width, height = PLACEHOLDER_IMAGE_SIZE
    return f"{PLACEHOLDER_IMAGE_BASE}/{quote(seed, safe=_URL_SAFE)}/{width}/{height}"


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Parse `value` as a finite float, returning `default` when it is not numeric.

    Empty strings and None parse to `default`; booleans count as 1/0.
    """
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def coerce_timestamp(value: Any, now: Optional[datetime] = None) -> datetime:
    """
    Coerce `value` to an aware UTC datetime.

    Accepts ISO-8601 strings (date-only and `Z` suffixes included), datetime and
    date objects, and epoch milliseconds. Anything absent or unparsable becomes
    `now`.
    """
    fallback = now or datetime.now(timezone.utc)
    parsed: Optional[datetime] = None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            parsed = None
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            parsed = None

    if parsed is None:
        return fallback
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return fallback


def _as_mapping(source: Any) -> Mapping[str, Any]:
    if isinstance(source, BaseModel):
        return source.model_dump(by_alias=True)
    if isinstance(source, Mapping):
        return source
    return {}


def _pick(source: Mapping[str, Any], *keys: str) -> Any:
    """First non-None value among `keys`."""
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _record_id(source: Mapping[str, Any], rng: Optional[random.Random]) -> str:
    raw = source.get("id")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return generate_id(rng)
    return str(raw)


def normalize_activity(
    source: RecordInput, rng: Optional[random.Random] = None
) -> Activity:
    """
    Build a canonical Activity from loosely-shaped input.

    1. keep `id` if present, otherwise generate one
    2. trim `name`; empty `description`/`category` become ""
    3. `price` parsed as a number, 0 when non-numeric, never negative
    4. `rating` kept only when already numeric, then clamped to [0, 5]
    5. blank `imageUrl` replaced by a placeholder seeded from the name
    """
    data = _as_mapping(source)

    name = str(data.get("name") or "").strip()
    description = data.get("description")
    category = data.get("category")

    rating_raw = data.get("rating")
    if isinstance(rating_raw, (int, float)) and not isinstance(rating_raw, bool):
        rating = coerce_number(rating_raw)
    else:
        rating = 0.0

    image_raw = _pick(data, "imageUrl", "image_url")
    image_url = str(image_raw) if image_raw is not None else ""
    if not image_url.strip():
        image_url = placeholder_image_url(name or DEFAULT_IMAGE_SEED)

    return Activity(
        id=_record_id(data, rng),
        name=name,
        description=str(description) if description else "",
        category=str(category) if category else "",
        price=max(0.0, coerce_number(data.get("price"))),
        rating=clamp(rating, 0.0, 5.0),
        image_url=image_url,
    )


def normalize_booking(
    source: RecordInput,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Booking:
    """Build a canonical Booking; `activity_id` may reference nothing."""
    data = _as_mapping(source)

    activity_id = _pick(data, "activityId", "activity_id")
    activity_name = _pick(data, "activityName", "activity_name")
    customer_name = _pick(data, "customerName", "customer_name")
    quantity = int(coerce_number(data.get("quantity"), default=1.0))

    return Booking(
        id=_record_id(data, rng),
        activity_id=str(activity_id) if activity_id is not None else None,
        activity_name=str(activity_name) if activity_name is not None else "Activity",
        customer_name=str(customer_name) if customer_name is not None else "Customer",
        quantity=quantity if quantity >= 1 else 1,
        amount=max(0.0, coerce_number(data.get("amount"))),
        date=coerce_timestamp(data.get("date"), now=now),
    )


def normalize_payout(
    source: RecordInput,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Payout:
    """Build a canonical Payout; unknown statuses fall back to "scheduled"."""
    data = _as_mapping(source)

    status = data.get("status")
    if status not in PAYOUT_STATUSES:
        status = "scheduled"

    return Payout(
        id=_record_id(data, rng),
        amount=max(0.0, coerce_number(data.get("amount"))),
        status=status,
        date=coerce_timestamp(data.get("date"), now=now),
    )


__all__ = [
    "RecordInput",
    "clamp",
    "coerce_number",
    "coerce_timestamp",
    "generate_id",
    "normalize_activity",
    "normalize_booking",
    "normalize_payout",
    "placeholder_image_url",
]
