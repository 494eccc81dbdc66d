# Rev 0.1.4
"""Wire entities for the DATACO admin API.

The API speaks camelCase JSON and identifies records by ``_id`` (REST reads)
or ``id`` (realtime payloads); ``from_wire`` accepts either.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .types import DayTime, Scene, SubtaskType, TaskType, Weather


def _record_id(data: Dict[str, Any]) -> str:
    rid = data.get("_id", data.get("id"))
    if rid is None or rid == "":
        raise ValueError("record has no identifier")
    return str(rid)


def _str_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Project:
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=_record_id(data),
            name=data.get("name") or "",
            description=data.get("description"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_wire(self) -> Dict[str, Any]:
        return {"_id": self.id, "name": self.name, "description": self.description}


@dataclass
class TaskDescription:
    main: str = ""
    how_to_execute: str = ""

    @classmethod
    def from_wire(cls, data: Any) -> "TaskDescription":
        if isinstance(data, str):
            return cls(main=data)
        data = data or {}
        return cls(main=data.get("main") or "", how_to_execute=data.get("howToExecute") or "")

    def to_wire(self) -> Dict[str, str]:
        return {"main": self.main, "howToExecute": self.how_to_execute}


@dataclass
class Task:
    id: Optional[str]
    title: str
    dataco_number: str
    project_id: str
    description: TaskDescription = field(default_factory=TaskDescription)
    subtitle: Optional[str] = None
    images: List[str] = field(default_factory=list)
    type: List[TaskType] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)
    amount_needed: int = 0
    target_car: List[str] = field(default_factory=list)
    lidar: bool = False
    day_time: List[DayTime] = field(default_factory=list)
    priority: int = 0
    is_visible: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=_record_id(data),
            title=data.get("title") or "",
            subtitle=data.get("subtitle"),
            images=_str_list(data.get("images")),
            dataco_number=str(data.get("datacoNumber") or ""),
            description=TaskDescription.from_wire(data.get("description")),
            project_id=str(data.get("projectId", data.get("project_id")) or ""),
            type=_str_list(data.get("type")),
            locations=_str_list(data.get("locations")),
            amount_needed=_int(data.get("amountNeeded")),
            target_car=_str_list(data.get("targetCar")),
            lidar=bool(data.get("lidar", False)),
            day_time=_str_list(data.get("dayTime")),
            priority=_int(data.get("priority")),
            is_visible=bool(data.get("isVisible", True)),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_wire(self) -> Dict[str, Any]:
        """Request body for POST/PUT; identifiers and timestamps stay server-side."""
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "images": list(self.images),
            "datacoNumber": self.dataco_number,
            "description": self.description.to_wire(),
            "projectId": self.project_id,
            "type": list(self.type),
            "locations": list(self.locations),
            "amountNeeded": self.amount_needed,
            "targetCar": list(self.target_car),
            "lidar": self.lidar,
            "dayTime": list(self.day_time),
            "priority": self.priority,
            "isVisible": self.is_visible,
        }


@dataclass
class Subtask:
    id: Optional[str]
    task_id: str
    title: str
    dataco_number: str
    type: SubtaskType = "events"
    subtitle: Optional[str] = None
    images: List[str] = field(default_factory=list)
    amount_needed: int = 0
    labels: List[str] = field(default_factory=list)
    target_car: List[str] = field(default_factory=list)
    weather: Weather = "Clear"
    scene: Scene = "Urban"
    day_time: List[DayTime] = field(default_factory=list)
    is_visible: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "Subtask":
        return cls(
            id=_record_id(data),
            task_id=str(data.get("taskId", data.get("task_id")) or ""),
            title=data.get("title") or "",
            subtitle=data.get("subtitle"),
            images=_str_list(data.get("images")),
            dataco_number=str(data.get("datacoNumber") or ""),
            type=data.get("type") or "events",
            amount_needed=_int(data.get("amountNeeded")),
            labels=_str_list(data.get("labels")),
            target_car=_str_list(data.get("targetCar")),
            weather=data.get("weather") or "Clear",
            scene=data.get("scene") or "Urban",
            day_time=_str_list(data.get("dayTime")),
            is_visible=data.get("isVisible"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_wire(self, *, include_target_car: bool = True) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "taskId": self.task_id,
            "title": self.title,
            "subtitle": self.subtitle,
            "images": list(self.images),
            "datacoNumber": self.dataco_number,
            "type": self.type,
            "amountNeeded": self.amount_needed,
            "labels": list(self.labels),
            "weather": self.weather,
            "scene": self.scene,
            "dayTime": list(self.day_time),
        }
        if include_target_car:
            body["targetCar"] = list(self.target_car)
        if self.is_visible is not None:
            body["isVisible"] = self.is_visible
        return body
