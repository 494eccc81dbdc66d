# Rev 0.1.1
"""Realtime change events, validated at the subscription boundary."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .types import EventKind

T = TypeVar("T")

_KINDS: Dict[str, EventKind] = {"INSERT": "insert", "UPDATE": "update", "DELETE": "delete"}


@dataclass(frozen=True)
class RealtimeEvent(Generic[T]):
    kind: EventKind
    record: Optional[T] = None   # new row (insert/update)
    old: Optional[T] = None      # previous row (delete, sometimes update)


def parse_event(payload: Any, factory: Callable[[Dict[str, Any]], T]) -> RealtimeEvent[T]:
    """
    Turn a raw ``{eventType, new, old}`` payload into a RealtimeEvent.
    Raises ValueError when the payload does not carry what its kind needs.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"realtime payload must be an object, got {type(payload).__name__}")

    raw_kind = str(payload.get("eventType") or payload.get("kind") or "").upper()
    kind = _KINDS.get(raw_kind)
    if kind is None:
        raise ValueError(f"unknown realtime event type {raw_kind!r}")

    new_raw = payload.get("new") or payload.get("record") or None
    old_raw = payload.get("old") or None

    record = factory(new_raw) if isinstance(new_raw, dict) else None
    old = factory(old_raw) if isinstance(old_raw, dict) else None

    if kind in ("insert", "update") and record is None:
        raise ValueError(f"{raw_kind} event without a new record")
    if kind == "delete" and old is None:
        raise ValueError("DELETE event without an old record")
    return RealtimeEvent(kind=kind, record=record, old=old)
