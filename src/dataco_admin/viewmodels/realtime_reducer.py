# Rev 0.1.2
from __future__ import annotations
from typing import Callable, List, Optional, Sequence, TypeVar

from ..models.events import RealtimeEvent

T = TypeVar("T")


def apply_event(
    collection: Sequence[T],
    event: RealtimeEvent[T],
    in_scope: Optional[Callable[[T], bool]] = None,
) -> List[T]:
    """
    Next state of `collection` (insertion-ordered, records with an ``id``) after `event`.
    Pure: the input sequence is never modified.

    in_scope: when given, inserts outside the scope are ignored and an update that
    moves a record out of scope removes it (e.g. a task moved to another project).
    """
    current = list(collection)

    if event.kind == "insert":
        rec = event.record
        if rec is None or (in_scope is not None and not in_scope(rec)):
            return current
        if any(item.id == rec.id for item in current):
            return current
        return current + [rec]

    if event.kind == "update":
        rec = event.record
        if rec is None:
            return current
        if in_scope is not None and not in_scope(rec):
            return [item for item in current if item.id != rec.id]
        return [rec if item.id == rec.id else item for item in current]

    if event.kind == "delete":
        old = event.old
        if old is None:
            return current
        return [item for item in current if item.id != old.id]

    return current
