"""Pure list operations over identified entities (trips, albums, photos).

Helpers never mutate their inputs; they return new lists so callers can
publish the result as a single state update.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar


class _Identified(Protocol):
    id: str


class _Named(Protocol):
    id: str
    name: str


T = TypeVar("T", bound=_Identified)
N = TypeVar("N", bound=_Named)


def filter_by_name(items: Sequence[N], query: str) -> list[N]:
    """Return items whose name contains `query`, case-insensitively.

    An empty query returns every item. Original order is preserved.
    """
    if not query:
        return list(items)
    needle = query.casefold()
    return [it for it in items if needle in it.name.casefold()]


def index_of(items: Sequence[T], item_id: str) -> int | None:
    """Return the position of the item with `item_id`, or None."""
    for idx, it in enumerate(items):
        if it.id == item_id:
            return idx
    return None


def remove_ids(items: Sequence[T], ids: Iterable[str]) -> list[T]:
    """Return `items` without the entries whose id is in `ids`."""
    removed = set(ids)
    return [it for it in items if it.id not in removed]


def ids_at_offsets(items: Sequence[T], offsets: Iterable[int]) -> list[str]:
    """Translate positional offsets into ids, skipping out-of-range offsets."""
    picked = sorted({o for o in offsets if 0 <= o < len(items)})
    return [items[o].id for o in picked]


def move_item(items: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy with the item at `from_index` moved to `to_index`.

    Out-of-range indices leave the order unchanged; `to_index` is clamped to
    the last position.
    """
    result = list(items)
    if not 0 <= from_index < len(result) or to_index < 0:
        return result
    item = result.pop(from_index)
    result.insert(min(to_index, len(result)), item)
    return result
