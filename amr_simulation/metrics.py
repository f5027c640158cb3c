"""Aggregate metrics, per-robot performance and the exported run report."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .enums import CargoStatus, TaskStatus
from .constants import REPORT_LOG_ENTRIES

if TYPE_CHECKING:
    from .models import AMR, Cargo, WorkflowTask
    from .store import SimulationStore

MS_PER_HOUR = 3_600_000.0


def _average(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_metrics(
    tasks: list[WorkflowTask],
    cargos: list[Cargo],
    sim_time_ms: float,
) -> dict[str, float | int]:
    """Compute the fleet-level figures shown in the panel and the report."""
    completed = [t for t in tasks if t.status == TaskStatus.COMPLETED]
    failed = sum(1 for t in tasks if t.status == TaskStatus.FAILED)
    active = sum(1 for t in tasks if t.status == TaskStatus.ACTIVE)
    pending = sum(1 for t in tasks if t.status == TaskStatus.PENDING)
    stored = sum(1 for c in cargos if c.status == CargoStatus.STORED)

    durations = [t.duration_ms for t in completed if t.duration_ms is not None]
    hours = sim_time_ms / MS_PER_HOUR
    finished = len(completed) + failed

    return {
        "total_tasks_completed": len(completed),
        "total_tasks_failed": failed,
        "active_tasks": active,
        "pending_tasks": pending,
        "total_cargo_moved": stored,
        "average_task_completion_time_ms": round(_average(durations), 6),
        "throughput_per_hour": round(len(completed) / hours, 6) if hours > 0 else 0.0,
        "system_efficiency": round(len(completed) / finished * 100.0, 6) if finished else 0.0,
        "sim_time_ms": sim_time_ms,
    }


def robot_performance(
    amrs: list[AMR],
    tasks: list[WorkflowTask],
    cargos: list[Cargo],
) -> list[dict]:
    rows = []
    for amr in amrs:
        done = [
            t for t in tasks
            if t.assigned_to == amr.id and t.status == TaskStatus.COMPLETED
        ]
        durations = [t.duration_ms for t in done if t.duration_ms is not None]
        moved = sum(
            1 for c in cargos
            if c.assigned_amr == amr.id and c.status == CargoStatus.STORED
        )
        rows.append({
            "id": amr.id,
            "status": amr.status.value,
            "battery": round(amr.battery, 3),
            "healthy": amr.healthy,
            "tasks_completed": len(done),
            "cargo_moved": moved,
            "distance_traveled": round(amr.distance_traveled, 3),
            "average_completion_time_ms": round(_average(durations), 6),
        })
    return rows


def build_report(store: SimulationStore) -> dict:
    """Snapshot of the run; every value is JSON-serialisable."""
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "summary": compute_metrics(store.workflow_tasks, store.cargos, store.now_ms),
        "robots": robot_performance(store.amrs, store.workflow_tasks, store.cargos),
        "zones": [
            {
                "id": zone.id,
                "name": zone.name,
                "type": zone.zone_type.value,
                "nodes": list(zone.node_ids),
                "capacity": zone.capacity,
                "current_load": zone.current_load,
            }
            for zone in store.zones.values()
        ],
        "recent_logs": [entry.to_dict() for entry in store.logs[:REPORT_LOG_ENTRIES]],
    }
