# src/dataco_admin/services/field_rules.py
"""Field-level rules shared by the task and subtask forms."""
from __future__ import annotations
from typing import List, Optional

DATACO_PREFIX = "DATACO-"

_DIGITS = frozenset("0123456789")


def sanitize_dataco(text: Optional[str]) -> str:
    """Keep only ASCII digits, in order. ``"DA12TA-34"`` -> ``"1234"``."""
    if not text:
        return ""
    return "".join(ch for ch in text if ch in _DIGITS)


def format_dataco(number: Optional[str]) -> str:
    if not number:
        return ""
    return f"{DATACO_PREFIX}{number}"


def priority_label(priority: Optional[int]) -> str:
    """1-3 high, 4-6 medium, 7-10 low; anything else has no priority."""
    if priority is None:
        return "none"
    if 1 <= priority <= 3:
        return "high"
    if 4 <= priority <= 6:
        return "medium"
    if 7 <= priority <= 10:
        return "low"
    return "none"


def validate_required(title: Optional[str], dataco_number: Optional[str]) -> List[str]:
    problems: List[str] = []
    if not (title or "").strip():
        problems.append("Title is required")
    if not sanitize_dataco(dataco_number):
        problems.append("DATACO number is required")
    return problems
