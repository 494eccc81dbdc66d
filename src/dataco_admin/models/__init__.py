from .entities import Project, Subtask, Task, TaskDescription
from .events import RealtimeEvent, parse_event

__all__ = ["Project", "Subtask", "Task", "TaskDescription", "RealtimeEvent", "parse_event"]
