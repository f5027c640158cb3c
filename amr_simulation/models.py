"""Data models: graph nodes, zones, AMRs, workflow tasks, cargo and log entries."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .enums import (
    AMRStatus, CargoStatus, CargoType, LogType, StepAction, TaskStatus,
    WorkflowType, ZoneType,
)
from .constants import AMR_STATUS_COLORS

Position = tuple[float, float]


def new_id() -> str:
    return str(uuid.uuid4())


class GraphNode:
    """A named waypoint on the warehouse floor."""

    def __init__(self, node_id: str, position: Position, neighbors: list[str]) -> None:
        self.id: str = node_id
        self.position: Position = position
        self.neighbors: list[str] = neighbors

    def __repr__(self) -> str:
        return f"GraphNode({self.id!r}, {self.position}, {self.neighbors})"


@dataclass
class Zone:
    """A logical warehouse region made of one or more graph nodes."""

    id: str
    name: str
    zone_type: ZoneType
    node_ids: list[str]
    capabilities: list[StepAction]
    capacity: int
    color: str
    current_load: int = 0       # declared only, never enforced


@dataclass(frozen=True)
class TaskStep:
    """One atomic unit of a workflow task."""

    action: StepAction
    target_node_id: str
    description: str
    duration_ms: float = 0.0
    id: str = field(default_factory=new_id)


class WorkflowTask:
    """An ordered list of steps bound to at most one AMR at a time."""

    def __init__(
        self,
        task_type: WorkflowType,
        steps: list[TaskStep],
        priority: int = 1,
        created_at: float = 0.0,
    ) -> None:
        self.id: str = new_id()
        self.type: WorkflowType = task_type
        self.steps: list[TaskStep] = steps
        self.current_step_index: int = 0
        self.assigned_to: str | None = None
        self.status: TaskStatus = TaskStatus.PENDING
        self.priority: int = priority      # 1 = highest, 10 = lowest
        self.created_at: float = created_at
        self.started_at: float | None = None
        self.completed_at: float | None = None
        self.path_failures: int = 0
        self.failure_reason: str | None = None

    @property
    def current_step(self) -> TaskStep | None:
        """Return the step at ``current_step_index``, or ``None`` once past the end."""
        if self.current_step_index < len(self.steps):
            return self.steps[self.current_step_index]
        return None

    @property
    def duration_ms(self) -> float | None:
        if self.started_at is None or self.completed_at is None:
            return None
        return self.completed_at - self.started_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "status": self.status.value,
            "assigned_to": self.assigned_to,
            "current_step_index": self.current_step_index,
            "steps": [
                {
                    "id": s.id,
                    "action": s.action.value,
                    "target_node_id": s.target_node_id,
                    "description": s.description,
                    "duration_ms": s.duration_ms,
                }
                for s in self.steps
            ],
            "priority": self.priority,
            "created_at": self.created_at,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "failure_reason": self.failure_reason,
        }


class AMR:
    """An autonomous mobile robot.

    ``healthy`` is the fault flag; ``status`` is what the robot is doing and
    reads ``ERROR`` while faulted. Whether the robot may receive a task is
    derived from both (see :attr:`available`).
    """

    def __init__(self, amr_id: str, position: Position) -> None:
        self.id: str = amr_id
        self.status: AMRStatus = AMRStatus.IDLE
        self.position: Position = position
        self.battery: float = 100.0
        self.path: list[Position] = []
        self.current_task: str | None = None
        self.healthy: bool = True
        self.target_node_id: str | None = None
        self.distance_traveled: float = 0.0

    @property
    def available(self) -> bool:
        """``True`` if the robot may be bound to a new task."""
        return self.healthy and self.current_task is None and self.status == AMRStatus.IDLE

    def get_color(self) -> tuple[int, int, int]:
        return AMR_STATUS_COLORS[self.status]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status.value,
            "position": {"x": self.position[0], "y": self.position[1]},
            "battery": round(self.battery, 3),
            "healthy": self.healthy,
            "current_task": self.current_task,
            "path": [{"x": x, "y": y} for x, y in self.path],
            "target_node_id": self.target_node_id,
        }


class Cargo:
    """A unit of goods created on load and resolved on unload."""

    def __init__(
        self,
        weight: int,
        location: str,
        cargo_type: CargoType = CargoType.PALLET,
        status: CargoStatus = CargoStatus.IN_TRANSIT,
    ) -> None:
        self.id: str = new_id()
        self.type: CargoType = cargo_type
        self.weight: int = weight
        self.status: CargoStatus = status
        self.location: str = location      # node id or AMR id
        self.assigned_amr: str | None = None
        self.pickup_time: float | None = None
        self.delivery_time: float | None = None

    @property
    def total_transit_time(self) -> float | None:
        if self.pickup_time is None or self.delivery_time is None:
            return None
        return self.delivery_time - self.pickup_time

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "weight": self.weight,
            "status": self.status.value,
            "location": self.location,
            "assigned_amr": self.assigned_amr,
            "pickup_time": self.pickup_time,
            "delivery_time": self.delivery_time,
            "total_transit_time": self.total_transit_time,
        }


class LogEntry:
    """One line of the user-facing log stream."""

    def __init__(self, message: str, log_type: LogType, timestamp_ms: float) -> None:
        self.id: str = new_id()
        self.timestamp_ms: float = timestamp_ms
        self.message: str = message
        self.type: LogType = log_type

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp_ms": self.timestamp_ms,
            "message": self.message,
            "type": self.type.value,
        }


@dataclass(frozen=True)
class DemoScenario:
    """A named preset of fleet size and speed."""

    id: str
    name: str
    description: str
    amr_count: int
    task_pattern: str           # sequential | parallel | burst
    speed: float
    duration_s: int


DEMO_SCENARIOS: dict[str, DemoScenario] = {
    "single": DemoScenario(
        "single", "Single Robot", "One AMR running the inbound workflow",
        amr_count=1, task_pattern="sequential", speed=1.0, duration_s=60,
    ),
    "standard": DemoScenario(
        "standard", "Standard Shift", "Three AMRs sharing the processing zone",
        amr_count=3, task_pattern="parallel", speed=1.0, duration_s=120,
    ),
    "rush": DemoScenario(
        "rush", "Inbound Rush", "Full fleet at double speed",
        amr_count=5, task_pattern="parallel", speed=2.0, duration_s=120,
    ),
    "stress": DemoScenario(
        "stress", "Stress Test", "Full fleet at maximum speed",
        amr_count=5, task_pattern="burst", speed=5.0, duration_s=180,
    ),
}
