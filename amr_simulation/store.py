"""Simulation store: authoritative fleet/task state and the workflow state machine."""

from __future__ import annotations

import json
import logging
import math
import random
from collections import deque
from typing import TYPE_CHECKING

from .enums import AMRStatus, CargoStatus, LogType, StepAction, TaskStatus
from .constants import (
    AUTO_ASSIGN_DELAY_MS, CARGO_WEIGHT_MAX, CARGO_WEIGHT_MIN, CHARGE_NODE,
    DEFAULT_DOCK_NODE, FALLBACK_POSITION, INITIAL_POSITIONS, LOAD_DURATION_MS,
    LOG_CAPACITY, LOW_BATTERY_THRESHOLD, MAX_PATH_ATTEMPTS, PATH_RETRY_DELAY_MS,
    SAFETY_RADIUS, START_DELAY_MS, STEP_ADVANCE_DELAY_MS, UNLOAD_DURATION_MS,
)
from .graph import build_graph
from .metrics import build_report, compute_metrics
from .models import AMR, Cargo, DEMO_SCENARIOS, LogEntry, WorkflowTask
from .pathfinding import find_nearest_node, find_path
from .scheduler import EventQueue
from .tasks import generate_inbound_task
from .zones import build_zones, validate_zones

if TYPE_CHECKING:
    from .models import GraphNode, Position, TaskStep, Zone

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    LogType.INFO: logging.INFO,
    LogType.WARNING: logging.WARNING,
    LogType.ERROR: logging.ERROR,
}


class SimulationStore:
    """Owns every robot, task, cargo record and log line, and is the only write path.

    Commands never raise for unknown ids or refused transitions: they write a
    log entry and return ``False``/``None``. Deferred work (step chaining,
    load/unload timers, auto-assignment) is scheduled on :attr:`clock` and tied
    to the robot and task it affects so resets can cancel it.
    """

    def __init__(
        self,
        graph: dict[str, GraphNode] | None = None,
        zones: dict[str, Zone] | None = None,
        clock: EventQueue | None = None,
        seed: int | None = None,
        collision_radius: float = SAFETY_RADIUS,
        max_path_attempts: int = MAX_PATH_ATTEMPTS,
        auto_assign: bool = True,
        collision_avoidance: bool = False,
    ) -> None:
        self.graph: dict[str, GraphNode] = graph if graph is not None else build_graph()
        self.zones: dict[str, Zone] = zones if zones is not None else build_zones()
        validate_zones(self.zones, self.graph)
        self.clock: EventQueue = clock if clock is not None else EventQueue()
        self.rng = random.Random(seed)
        self.collision_radius: float = collision_radius
        self.max_path_attempts: int = max_path_attempts

        self.is_running: bool = False
        self.speed: float = 1.0
        self.amrs: list[AMR] = []
        self.selected_amr_id: str | None = None
        self.show_heatmap: bool = False
        self.auto_assign_tasks: bool = auto_assign
        self.collision_avoidance_enabled: bool = collision_avoidance
        self.workflow_tasks: list[WorkflowTask] = []
        self.cargos: list[Cargo] = []
        self.node_visits: dict[str, int] = {}
        self.active_demo_scenario: str | None = None
        self._logs: deque[LogEntry] = deque(maxlen=LOG_CAPACITY)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def now_ms(self) -> float:
        return self.clock.now_ms

    @property
    def robots(self) -> list[AMR]:
        return list(self.amrs)

    @property
    def tasks(self) -> list[WorkflowTask]:
        return list(self.workflow_tasks)

    @property
    def logs(self) -> list[LogEntry]:
        """Newest first."""
        return list(self._logs)

    def get_robot(self, robot_id: str | None) -> AMR | None:
        for amr in self.amrs:
            if amr.id == robot_id:
                return amr
        return None

    def get_task(self, task_id: str | None) -> WorkflowTask | None:
        for task in self.workflow_tasks:
            if task.id == task_id:
                return task
        return None

    def get_robot_task(self, robot_id: str) -> WorkflowTask | None:
        amr = self.get_robot(robot_id)
        if amr is None or amr.current_task is None:
            return None
        return self.get_task(amr.current_task)

    def active_tasks(self) -> list[WorkflowTask]:
        return [t for t in self.workflow_tasks if t.status == TaskStatus.ACTIVE]

    def pending_tasks(self) -> list[WorkflowTask]:
        """Unassigned tasks, highest priority then oldest first."""
        pending = [t for t in self.workflow_tasks if t.status == TaskStatus.PENDING]
        pending.sort(key=lambda t: (t.priority, t.created_at))
        return pending

    def metrics(self) -> dict:
        return compute_metrics(self.workflow_tasks, self.cargos, self.now_ms)

    def report(self) -> dict:
        return build_report(self)

    def export_report(self, indent: int = 2) -> str:
        return json.dumps(self.report(), indent=indent)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def add_log(self, message: str, log_type: LogType = LogType.INFO) -> LogEntry:
        entry = LogEntry(message, log_type, self.now_ms)
        self._logs.appendleft(entry)
        logger.log(_LOG_LEVELS[log_type], "%s", message)
        return entry

    # ------------------------------------------------------------------
    # Global toggles
    # ------------------------------------------------------------------

    def toggle_simulation(self) -> bool:
        """Flip the running flag; on start, hand a task to every available robot."""
        self.is_running = not self.is_running
        self.add_log("Simulation started" if self.is_running else "Simulation paused")
        if self.is_running and self.auto_assign_tasks:
            started = self._assign_available()
            if started:
                self.add_log(f"Auto-assigned tasks to {len(started)} AMRs")
        return self.is_running

    def set_speed(self, speed: float) -> bool:
        if speed <= 0:
            self.add_log(f"Invalid speed {speed}", LogType.WARNING)
            return False
        self.speed = speed
        return True

    def toggle_heatmap(self) -> bool:
        self.show_heatmap = not self.show_heatmap
        return self.show_heatmap

    def toggle_auto_assign(self) -> bool:
        self.auto_assign_tasks = not self.auto_assign_tasks
        self.add_log(f"Auto-assign {'enabled' if self.auto_assign_tasks else 'disabled'}")
        return self.auto_assign_tasks

    def toggle_collision_avoidance(self) -> bool:
        self.collision_avoidance_enabled = not self.collision_avoidance_enabled
        self.add_log(
            f"Collision avoidance {'enabled' if self.collision_avoidance_enabled else 'disabled'}"
        )
        return self.collision_avoidance_enabled

    # ------------------------------------------------------------------
    # Fleet commands
    # ------------------------------------------------------------------

    def initialize_fleet(self, count: int) -> list[AMR]:
        """Replace the fleet and its tasks with *count* fresh robots."""
        if count < 0:
            self.add_log(f"Invalid fleet size {count}, using 0", LogType.WARNING)
            count = 0
        self.clock.cancel_all()
        self.amrs = [
            AMR(
                f"AMR-{i + 1}",
                INITIAL_POSITIONS[i % len(INITIAL_POSITIONS)] if INITIAL_POSITIONS else FALLBACK_POSITION,
            )
            for i in range(count)
        ]
        self.workflow_tasks = []
        if self.get_robot(self.selected_amr_id) is None:
            self.selected_amr_id = None

        if self.is_running and self.auto_assign_tasks:
            self._assign_available()
            self.add_log(f"Initialized {count} AMRs with active workflow tasks")
        else:
            self.add_log(f"Initialized {count} AMRs ready for workflow tasks")
        return self.amrs

    def select_robot(self, robot_id: str | None) -> bool:
        if robot_id is not None and self.get_robot(robot_id) is None:
            return False
        self.selected_amr_id = robot_id
        return True

    def update_position(self, robot_id: str, position: Position) -> bool:
        amr = self.get_robot(robot_id)
        if amr is None:
            return False
        amr.position = position
        return True

    def update_status(self, robot_id: str, status: AMRStatus) -> bool:
        """Set a robot's status. ``ERROR`` faults the robot; anything else clears a fault."""
        amr = self.get_robot(robot_id)
        if amr is None:
            return False
        if status == AMRStatus.ERROR:
            if amr.healthy:
                self._fault(amr, "status forced to error")
            return True
        if not amr.healthy:
            self._clear_fault(amr)
        amr.status = status
        return True

    def toggle_robot_health(self, robot_id: str) -> bool:
        """Fault a healthy robot or clear a faulted one. Returns the new health."""
        amr = self.get_robot(robot_id)
        if amr is None:
            return False
        if amr.healthy:
            self._fault(amr, "fault injected")
        else:
            self._clear_fault(amr)
        return amr.healthy

    def queue_waypoints(self, robot_id: str, waypoints: list[Position]) -> bool:
        amr = self.get_robot(robot_id)
        if amr is None:
            return False
        if not amr.healthy:
            self.add_log(f"{robot_id} is faulted, waypoints ignored", LogType.WARNING)
            return False
        amr.path.extend(waypoints)
        if amr.path:
            amr.status = AMRStatus.MOVING
        return True

    def shift_waypoint(self, robot_id: str) -> bool:
        """Pop the head of the path queue once the movement driver reaches it.

        An emptied queue completes the current move step, or ends a manual
        navigation (charging when it ended at the charger).
        """
        amr = self.get_robot(robot_id)
        if amr is None or not amr.path:
            return False
        reached = amr.path.pop(0)
        node_id = find_nearest_node(self.graph, reached)
        if node_id is not None:
            self.node_visits[node_id] = self.node_visits.get(node_id, 0) + 1

        if amr.path:
            amr.status = AMRStatus.MOVING
            return True

        target = amr.target_node_id
        amr.target_node_id = None
        task = self.get_task(amr.current_task)
        if task is not None:
            step = task.current_step
            if task.status == TaskStatus.ACTIVE and step is not None and step.action == StepAction.MOVE:
                self.complete_current_step(robot_id)
            elif amr.status == AMRStatus.MOVING:
                amr.status = AMRStatus.IDLE
        elif target == CHARGE_NODE and amr.healthy:
            amr.status = AMRStatus.CHARGING
            self.add_log(f"{robot_id} docked at charging station")
        elif amr.healthy:
            amr.status = AMRStatus.IDLE
        return True

    def emergency_stop(self) -> None:
        """Halt the simulation and fault every robot."""
        self.is_running = False
        self.clock.cancel_all()
        for amr in self.amrs:
            task = self.get_task(amr.current_task)
            if task is not None and task.status == TaskStatus.ACTIVE:
                self._fail_task(task, "emergency stop")
            amr.healthy = False
            amr.status = AMRStatus.ERROR
            amr.path = []
            amr.target_node_id = None
        self.add_log("EMERGENCY STOP: all AMRs halted", LogType.ERROR)

    def set_spawn_node(self, robot_id: str, node_id: str) -> bool:
        """Relocate an idle fleet member onto *node_id*; refused while running."""
        if self.is_running:
            self.add_log(f"Cannot move {robot_id} while the simulation is running", LogType.WARNING)
            return False
        node = self.graph.get(node_id)
        if node is None:
            self.add_log(f"Invalid node: {node_id}", LogType.ERROR)
            return False
        amr = self.get_robot(robot_id)
        if amr is None:
            return False

        self.clock.cancel_for_robot(robot_id)
        task = self.get_task(amr.current_task)
        if task is not None and task.status == TaskStatus.ACTIVE:
            self._fail_task(task, "robot relocated")
        amr.current_task = None
        amr.position = node.position
        amr.path = []
        amr.target_node_id = None
        amr.status = AMRStatus.IDLE if amr.healthy else AMRStatus.ERROR
        self.add_log(f"{robot_id} spawned at node {node_id}")
        return True

    def send_to_dock(self, robot_id: str) -> bool:
        return self._navigate(robot_id, DEFAULT_DOCK_NODE, "dock")

    def send_to_charging(self, robot_id: str) -> bool:
        return self._navigate(robot_id, CHARGE_NODE, "charging station")

    def navigate_to_node(self, robot_id: str, node_id: str) -> bool:
        return self._navigate(robot_id, node_id, node_id)

    def finish_charging(self, robot_id: str) -> bool:
        amr = self.get_robot(robot_id)
        if amr is None or amr.status != AMRStatus.CHARGING:
            return False
        amr.battery = 100.0
        amr.status = AMRStatus.IDLE
        self.add_log(f"{robot_id} fully charged")
        self._schedule_auto_assign(amr, START_DELAY_MS)
        return True

    def load_demo_scenario(self, scenario_id: str) -> bool:
        if self.is_running:
            self.add_log("Stop the simulation before loading a scenario", LogType.WARNING)
            return False
        scenario = DEMO_SCENARIOS.get(scenario_id)
        if scenario is None:
            self.add_log(f"Unknown scenario: {scenario_id}", LogType.WARNING)
            return False
        self.set_speed(scenario.speed)
        self.initialize_fleet(scenario.amr_count)
        self.active_demo_scenario = scenario.id
        self.add_log(f"Loaded scenario '{scenario.name}'")
        return True

    # ------------------------------------------------------------------
    # Task commands
    # ------------------------------------------------------------------

    def create_task(self) -> str:
        """Queue a pending inbound task with default targets. Returns its id."""
        task = generate_inbound_task(self.graph, None, self.zones, now_ms=self.now_ms)
        self.workflow_tasks.append(task)
        self.add_log(f"New inbound task created: {task.id}")
        return task.id

    def assign_task(self, robot_id: str, task_id: str) -> bool:
        """Bind a pending task to an available robot (at most one task per robot)."""
        amr = self.get_robot(robot_id)
        task = self.get_task(task_id)
        if amr is None or task is None:
            self.add_log(f"Cannot assign task {task_id} to {robot_id}: not found", LogType.WARNING)
            return False
        if task.status != TaskStatus.PENDING:
            self.add_log(f"Task {task_id} is {task.status.value}, not pending", LogType.WARNING)
            return False
        if not amr.available:
            self.add_log(
                f"{robot_id} is not available for task {task_id} ({amr.status.value})",
                LogType.WARNING,
            )
            return False
        self._bind(amr, task)
        self.add_log(f"Task {task_id} assigned to {robot_id}")
        return True

    def clear_all_tasks(self) -> int:
        """Drop every task and release every robot; refused while running."""
        if self.is_running:
            self.add_log("Stop the simulation before clearing tasks", LogType.WARNING)
            return 0
        self.clock.cancel_all()
        count = len(self.workflow_tasks)
        self.workflow_tasks = []
        for amr in self.amrs:
            amr.current_task = None
            amr.path = []
            amr.target_node_id = None
            if amr.healthy:
                amr.status = AMRStatus.IDLE
        self.add_log(f"Cleared {count} tasks", LogType.WARNING)
        return count

    # ------------------------------------------------------------------
    # Workflow state machine
    # ------------------------------------------------------------------

    def execute_next_step(self, robot_id: str) -> None:
        """Perform the current step of the robot's task, or finish the task."""
        amr = self.get_robot(robot_id)
        if amr is None or amr.current_task is None or not amr.healthy:
            return
        task = self.get_task(amr.current_task)
        if task is None or task.status != TaskStatus.ACTIVE:
            return

        step = task.current_step
        if step is None:
            self._finish_task(amr, task)
            return

        if step.action == StepAction.MOVE:
            self._start_move(amr, task, step)
        elif step.action in (StepAction.LOAD, StepAction.UNLOAD):
            if step.action == StepAction.LOAD:
                amr.status = AMRStatus.LOADING
                self.add_log(f"{robot_id} loading cargo...")
                default = LOAD_DURATION_MS
            else:
                amr.status = AMRStatus.UNLOADING
                self.add_log(f"{robot_id} unloading cargo...")
                default = UNLOAD_DURATION_MS
            self.clock.schedule(
                step.duration_ms or default,
                lambda: self._finish_timed_step(robot_id, task.id, step),
                label=step.action.value, robot_id=robot_id, task_id=task.id,
            )
        elif step.action == StepAction.WAIT:
            self.clock.schedule(
                step.duration_ms,
                lambda: self._finish_timed_step(robot_id, task.id, step),
                label="wait", robot_id=robot_id, task_id=task.id,
            )

    def complete_current_step(self, robot_id: str) -> None:
        """Advance the robot's task by one step and schedule the next one."""
        amr = self.get_robot(robot_id)
        if amr is None or amr.current_task is None:
            return
        task = self.get_task(amr.current_task)
        if task is None or task.status != TaskStatus.ACTIVE:
            return

        task.current_step_index = min(task.current_step_index + 1, len(task.steps))
        if amr.healthy:
            amr.status = AMRStatus.IDLE
        if task.current_step is None:
            self._finish_task(amr, task)
            return
        self.clock.schedule(
            STEP_ADVANCE_DELAY_MS,
            lambda: self.execute_next_step(robot_id),
            label="next-step", robot_id=robot_id, task_id=task.id,
        )

    def _start_move(self, amr: AMR, task: WorkflowTask, step: TaskStep) -> None:
        start_node = find_nearest_node(self.graph, amr.position)
        path = find_path(self.graph, start_node, step.target_node_id) if start_node else []
        if path:
            task.path_failures = 0
            amr.path = []
            self.queue_waypoints(amr.id, path)
            amr.target_node_id = step.target_node_id
            self.add_log(f"{amr.id} moving to {step.target_node_id}")
            return

        task.path_failures += 1
        self.add_log(f"{amr.id}: No path found to {step.target_node_id}", LogType.ERROR)
        if self.max_path_attempts <= 0:
            return
        if task.path_failures >= self.max_path_attempts:
            self._fail_task(task, f"no path to {step.target_node_id}")
            self._schedule_auto_assign(amr, AUTO_ASSIGN_DELAY_MS)
            return
        self.clock.schedule(
            PATH_RETRY_DELAY_MS,
            lambda: self.execute_next_step(amr.id),
            label="path-retry", robot_id=amr.id, task_id=task.id,
        )

    def _finish_timed_step(self, robot_id: str, task_id: str, step: TaskStep) -> None:
        amr = self.get_robot(robot_id)
        task = self.get_task(task_id)
        if amr is None or task is None or not amr.healthy:
            return
        if amr.current_task != task_id or task.status != TaskStatus.ACTIVE:
            return
        if task.current_step is not step:
            return

        if step.action == StepAction.LOAD:
            cargo = Cargo(
                weight=self.rng.randint(CARGO_WEIGHT_MIN, CARGO_WEIGHT_MAX),
                location=robot_id,
            )
            cargo.assigned_amr = robot_id
            cargo.pickup_time = self.now_ms
            self.cargos.append(cargo)
            self.add_log(f"{robot_id} loaded cargo {cargo.id} ({cargo.weight} kg)")
        elif step.action == StepAction.UNLOAD:
            for cargo in self.cargos:
                if cargo.location == robot_id and cargo.status == CargoStatus.IN_TRANSIT:
                    cargo.status = CargoStatus.STORED
                    cargo.location = step.target_node_id
                    cargo.delivery_time = self.now_ms
                    self.add_log(f"{robot_id} stored cargo {cargo.id} at {step.target_node_id}")
        self.complete_current_step(robot_id)

    def _finish_task(self, amr: AMR, task: WorkflowTask) -> None:
        task.status = TaskStatus.COMPLETED
        task.completed_at = self.now_ms
        amr.current_task = None
        amr.target_node_id = None
        amr.status = AMRStatus.IDLE
        self.clock.cancel_for_task(task.id)
        self.add_log(f"{amr.id} completed task {task.id}")

        if not (self.auto_assign_tasks and self.is_running):
            return
        if amr.battery < LOW_BATTERY_THRESHOLD:
            self.add_log(f"{amr.id} battery low ({amr.battery:.0f}%), heading to charger", LogType.WARNING)
            self.send_to_charging(amr.id)
            return
        self._schedule_auto_assign(amr, AUTO_ASSIGN_DELAY_MS)

    def _fail_task(self, task: WorkflowTask, reason: str) -> None:
        task.status = TaskStatus.FAILED
        task.completed_at = self.now_ms
        task.failure_reason = reason
        self.clock.cancel_for_task(task.id)
        amr = self.get_robot(task.assigned_to)
        if amr is not None and amr.current_task == task.id:
            amr.current_task = None
            amr.path = []
            amr.target_node_id = None
            if amr.healthy:
                amr.status = AMRStatus.IDLE
        self.add_log(f"Task {task.id} failed: {reason}", LogType.ERROR)

    # ------------------------------------------------------------------
    # Assignment helpers
    # ------------------------------------------------------------------

    def _bind(self, amr: AMR, task: WorkflowTask) -> None:
        task.assigned_to = amr.id
        task.status = TaskStatus.ACTIVE
        task.started_at = self.now_ms
        amr.current_task = task.id

    def _next_task_for(self, amr: AMR) -> WorkflowTask:
        pending = self.pending_tasks()
        if pending:
            return pending[0]
        start_node = find_nearest_node(self.graph, amr.position)
        task = generate_inbound_task(self.graph, start_node, self.zones, now_ms=self.now_ms)
        self.workflow_tasks.append(task)
        return task

    def _start_task(self, amr: AMR) -> WorkflowTask:
        task = self._next_task_for(amr)
        self._bind(amr, task)
        self.clock.schedule(
            START_DELAY_MS,
            lambda: self.execute_next_step(amr.id),
            label="start", robot_id=amr.id, task_id=task.id,
        )
        return task

    def _assign_available(self) -> list[AMR]:
        started: list[AMR] = []
        for amr in self.amrs:
            if amr.available:
                self._start_task(amr)
                started.append(amr)
        return started

    def _schedule_auto_assign(self, amr: AMR, delay_ms: float) -> None:
        if not (self.auto_assign_tasks and self.is_running):
            return
        self.clock.schedule(
            delay_ms,
            lambda: self._auto_assign(amr.id),
            label="auto-assign", robot_id=amr.id,
        )

    def _auto_assign(self, robot_id: str) -> None:
        amr = self.get_robot(robot_id)
        if amr is None or not amr.available:
            return
        if not (self.auto_assign_tasks and self.is_running):
            return
        task = self._next_task_for(amr)
        self._bind(amr, task)
        self.add_log(f"Task {task.id} assigned to {robot_id}")
        self.execute_next_step(robot_id)

    # ------------------------------------------------------------------
    # Faults and manual navigation
    # ------------------------------------------------------------------

    def _fault(self, amr: AMR, reason: str) -> None:
        self.clock.cancel_for_robot(amr.id)
        amr.healthy = False
        amr.status = AMRStatus.ERROR
        amr.path = []
        amr.target_node_id = None
        self.add_log(f"AMR {amr.id} is now error ({reason})", LogType.ERROR)

        task = self.get_task(amr.current_task)
        if task is None or task.status != TaskStatus.ACTIVE:
            amr.current_task = None
            return
        self._fail_task(task, f"{amr.id} faulted")
        if self.auto_assign_tasks:
            replacement = generate_inbound_task(self.graph, None, self.zones, now_ms=self.now_ms)
            replacement.priority = task.priority
            self.workflow_tasks.append(replacement)
            self.add_log(f"Task {replacement.id} queued to replace {task.id}", LogType.WARNING)
            if self.is_running:
                self._assign_available()

    def _clear_fault(self, amr: AMR) -> None:
        amr.healthy = True
        amr.status = AMRStatus.IDLE
        self.add_log(f"AMR {amr.id} is now idle")
        self._schedule_auto_assign(amr, START_DELAY_MS)

    def _navigate(self, robot_id: str, node_id: str, label: str) -> bool:
        amr = self.get_robot(robot_id)
        if amr is None:
            return False
        if not amr.healthy:
            self.add_log(f"{robot_id} is faulted and cannot move", LogType.WARNING)
            return False
        if amr.current_task is not None:
            self.add_log(f"{robot_id} busy with task {amr.current_task}", LogType.WARNING)
            return False
        if node_id not in self.graph:
            self.add_log(f"Invalid node: {node_id}", LogType.ERROR)
            return False
        start_node = find_nearest_node(self.graph, amr.position)
        path = find_path(self.graph, start_node, node_id) if start_node else []
        if not path:
            self.add_log(f"{robot_id}: No path found to {node_id}", LogType.ERROR)
            return False
        amr.path = list(path)
        amr.target_node_id = node_id
        amr.status = AMRStatus.MOVING
        self.add_log(f"{robot_id} navigating to {label} via graph")
        return True

    # ------------------------------------------------------------------
    # Collision checking
    # ------------------------------------------------------------------

    def collision_blockers(self, robot_id: str, proposed: Position) -> list[str]:
        """Ids of healthy robots within the safety radius of *proposed*."""
        blockers: list[str] = []
        for other in self.amrs:
            if other.id == robot_id or not other.healthy:
                continue
            dist = math.hypot(proposed[0] - other.position[0], proposed[1] - other.position[1])
            if dist < self.collision_radius:
                blockers.append(other.id)
        return blockers

    def check_collision(self, robot_id: str, proposed: Position) -> bool:
        """``True`` if collision avoidance is on and *proposed* is too close to another robot."""
        if not self.collision_avoidance_enabled:
            return False
        return bool(self.collision_blockers(robot_id, proposed))
