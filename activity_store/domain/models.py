"""
Domain models for the Activity Store.

Defines the three record kinds persisted by the stores. Field names are
snake_case in Python and camelCase on disk (via aliases), matching the
persisted layout under `lap_activities`, `lap_bookings` and `lap_payouts`.
Models are frozen: records are never updated in place.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

PayoutStatus = Literal["paid", "pending", "scheduled"]
PAYOUT_STATUSES: tuple[str, ...] = ("paid", "pending", "scheduled")


def to_iso_timestamp(value: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 string with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


IsoTimestamp = Annotated[datetime, PlainSerializer(to_iso_timestamp, return_type=str)]


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=False,
    )

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the persisted (camelCase, JSON-safe) representation."""
        return self.model_dump(mode="json", by_alias=True)


class Activity(_Record):
    """
    A bookable experience offered by a supplier.
    """

    id: str = Field(..., description="Stable identifier; generated when absent.")
    name: str = Field("", description="Trimmed display name.")
    description: str = Field("", description="Free-form description.")
    category: str = Field("", description="Category label, e.g. 'Food'.")
    price: float = Field(0.0, ge=0, description="Price per person.")
    rating: float = Field(0.0, ge=0, le=5, description="Average rating in [0, 5].")
    image_url: str = Field("", alias="imageUrl", description="Cover image URL.")


class Booking(_Record):
    """
    A customer's reservation of an activity.

    `activity_id` is a weak reference: it may point at an activity that no
    longer exists, so resolve it with `ActivityStore.get`.
    """

    id: str
    activity_id: Optional[str] = Field(None, alias="activityId")
    activity_name: str = Field("Activity", alias="activityName")
    customer_name: str = Field("Customer", alias="customerName")
    quantity: int = Field(1, ge=1)
    amount: float = Field(0.0, ge=0)
    date: IsoTimestamp


class Payout(_Record):
    """
    A transfer of earnings to the supplier.
    """

    id: str
    amount: float = Field(0.0, ge=0)
    status: PayoutStatus = "scheduled"
    date: IsoTimestamp


__all__ = [
    "Activity",
    "Booking",
    "Payout",
    "PayoutStatus",
    "PAYOUT_STATUSES",
    "IsoTimestamp",
    "to_iso_timestamp",
]
