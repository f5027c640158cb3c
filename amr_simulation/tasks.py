"""Workflow task generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .enums import StepAction, WorkflowType
from .constants import (
    DEFAULT_DOCK_NODE, DEFAULT_PROCESSING_NODE, DEFAULT_STORAGE_NODE,
    LOAD_DURATION_MS, UNLOAD_DURATION_MS,
)
from .models import TaskStep, WorkflowTask
from .zones import (
    ZONES, find_best_processing_node, find_best_storage_node, get_first_available_node,
)

if TYPE_CHECKING:
    from .models import GraphNode, Zone

logger = logging.getLogger(__name__)


def generate_inbound_task(
    graph: dict[str, GraphNode],
    start_node_id: str | None = None,
    zones: dict[str, Zone] | None = None,
    now_ms: float = 0.0,
) -> WorkflowTask:
    """Build a pending inbound-to-storage task.

    Steps: move to processing, load, move to storage, unload, return to
    *start_node_id* (the first dock node when no start is given). Targets are
    resolved through the zone registry relative to the start node; without a
    start node the fixed defaults are used so the task can be queued ahead of
    assignment.
    """
    if zones is None:
        zones = ZONES
    if start_node_id is not None and start_node_id not in graph:
        logger.error("Unknown start node %s, using default task targets", start_node_id)
        start_node_id = None

    if start_node_id is not None:
        processing_node = find_best_processing_node(graph, start_node_id, zones)
        storage_node = find_best_storage_node(graph, processing_node, zones)
        dock_node = start_node_id
    else:
        processing_node = DEFAULT_PROCESSING_NODE
        storage_node = DEFAULT_STORAGE_NODE
        dock = zones.get("DOCK_LEFT")
        dock_node = (get_first_available_node(dock) if dock else None) or DEFAULT_DOCK_NODE

    steps = [
        TaskStep(StepAction.MOVE, processing_node, "Navigate to Pallet Pickup Zone"),
        TaskStep(
            StepAction.LOAD, processing_node,
            "Loading cargo at Pallet Pickup Zone", LOAD_DURATION_MS,
        ),
        TaskStep(StepAction.MOVE, storage_node, "Transport cargo to Storage"),
        TaskStep(
            StepAction.UNLOAD, storage_node,
            "Unloading cargo at Storage", UNLOAD_DURATION_MS,
        ),
        TaskStep(StepAction.MOVE, dock_node, "Return to Dock"),
    ]
    return WorkflowTask(WorkflowType.INBOUND, steps, priority=1, created_at=now_ms)
