# Rev 0.1.0
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..models.types import SUBTASK_TYPES, SUBTASK_TYPES_WITH_LOOPS


@dataclass(frozen=True)
class PageConfig:
    """Behaviour switches that used to differ between copies of the task pages."""
    recalculate_amount: bool = True
    allow_loops: bool = False
    poll_interval: float = 30.0
    poll_immediate: bool = False

    @property
    def subtask_types(self) -> Tuple[str, ...]:
        return SUBTASK_TYPES_WITH_LOOPS if self.allow_loops else SUBTASK_TYPES

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "PageConfig":
        pages = settings.get("pages", {})
        realtime = settings.get("realtime", {})
        return cls(
            recalculate_amount=bool(pages.get("recalculate_amount", True)),
            allow_loops=bool(pages.get("allow_loops", False)),
            poll_interval=float(realtime.get("interval", 30.0)),
            poll_immediate=bool(realtime.get("immediate", False)),
        )
