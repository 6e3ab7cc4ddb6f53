"""
Identity keys and stable de-duplication.

A record's identity key is its `id` when one is present; otherwise the
`name|price` composite. Works on models and on raw mappings alike so that
externally supplied lists can be filtered before display.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

KEY_SEPARATOR = "|"


def _field(record: Any, name: str) -> Any:
    if isinstance(record, BaseModel):
        return getattr(record, name, None)
    if isinstance(record, Mapping):
        return record.get(name)
    return None


def _format_price(price: Any) -> str:
    # 1200 and 1200.0 must produce the same key.
    if isinstance(price, float) and price.is_integer():
        return str(int(price))
    return "" if price is None else str(price)


def signature(record: Any) -> str:
    """The `name|price` composite, regardless of id."""
    name = _field(record, "name")
    return f"{'' if name is None else name}{KEY_SEPARATOR}{_format_price(_field(record, 'price'))}"


def identity_key(record: Any) -> str:
    record_id: Optional[Any] = _field(record, "id")
    if record_id is not None:
        return str(record_id)
    return signature(record)


def dedupe(records: Iterable[T]) -> List[T]:
    """
    Drop later records whose identity key was already seen.

    Stable: the survivors keep the relative order of their first occurrence.
    """
    seen: set[str] = set()
    out: List[T] = []
    for record in records:
        key = identity_key(record)
        if key not in seen:
            seen.add(key)
            out.append(record)
    return out


__all__ = ["KEY_SEPARATOR", "dedupe", "identity_key", "signature"]
