"""
AMR Warehouse Simulation package.

Public API re-exports.
"""

from .enums import (
    AMRStatus, StepAction, WorkflowType, TaskStatus, ZoneType,
    CargoType, CargoStatus, LogType,
)
from .constants import *  # noqa: F401,F403
from .models import (
    GraphNode, Zone, TaskStep, WorkflowTask, AMR, Cargo, LogEntry,
    DemoScenario, DEMO_SCENARIOS,
)
from .graph import GraphValidationError, build_graph, validate_graph, verify_graph
from .pathfinding import find_path, find_nearest_node, get_reachable_nodes
from .zones import (
    ZONES, ZoneConfigError, find_best_processing_node, find_best_storage_node,
)
from .tasks import generate_inbound_task
from .scheduler import EventQueue, ScheduledEvent
from .store import SimulationStore
from .movement import MovementDriver
from .metrics import compute_metrics, robot_performance, build_report
from .settings import Settings, load_settings
from .headless import run_headless

__all__ = [
    "AMRStatus", "StepAction", "WorkflowType", "TaskStatus", "ZoneType",
    "CargoType", "CargoStatus", "LogType",
    "GraphNode", "Zone", "TaskStep", "WorkflowTask", "AMR", "Cargo", "LogEntry",
    "DemoScenario", "DEMO_SCENARIOS",
    "GraphValidationError", "build_graph", "validate_graph", "verify_graph",
    "find_path", "find_nearest_node", "get_reachable_nodes",
    "ZONES", "ZoneConfigError", "find_best_processing_node", "find_best_storage_node",
    "generate_inbound_task",
    "EventQueue", "ScheduledEvent",
    "SimulationStore",
    "MovementDriver",
    "compute_metrics", "robot_performance", "build_report",
    "Settings", "load_settings",
    "run_headless",
]
