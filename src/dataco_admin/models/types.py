# dataco-admin type definitions
# Rev 0.1.0

from __future__ import annotations
from typing import Literal, Tuple

TaskType = Literal["events", "hours"]
SubtaskType = Literal["events", "hours", "loops"]
DayTime = Literal["day", "night", "dusk", "dawn"]
Weather = Literal["Clear", "Fog", "Overcast", "Rain", "Snow", "Mixed"]
Scene = Literal["Highway", "Urban", "Rural", "Sub-Urban", "Test Track", "Mixed"]
EventKind = Literal["insert", "update", "delete"]

TASK_TYPES: Tuple[str, ...] = ("events", "hours")
SUBTASK_TYPES: Tuple[str, ...] = ("events", "hours")
SUBTASK_TYPES_WITH_LOOPS: Tuple[str, ...] = ("events", "hours", "loops")
DAY_TIMES: Tuple[str, ...] = ("day", "night", "dusk", "dawn")
WEATHERS: Tuple[str, ...] = ("Clear", "Fog", "Overcast", "Rain", "Snow", "Mixed")
SCENES: Tuple[str, ...] = ("Highway", "Urban", "Rural", "Sub-Urban", "Test Track", "Mixed")
