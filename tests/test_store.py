"""
Tests for the simulation store: fleet commands, the workflow state machine,
fault handling and path-failure retries.
"""

import json

from amr_simulation import (
    AMRStatus, CargoStatus, LogType, MovementDriver, SimulationStore, StepAction,
    TaskStatus, TaskStep, WorkflowTask, WorkflowType,
)
from amr_simulation.constants import (
    AUTO_ASSIGN_DELAY_MS, LOG_CAPACITY, PATH_RETRY_DELAY_MS, START_DELAY_MS,
)


# -- Helpers ----------------------------------------------------------

def _store(n=1, running=False, **kwargs):
    kwargs.setdefault("seed", 42)
    store = SimulationStore(**kwargs)
    if running:
        store.toggle_simulation()
    store.initialize_fleet(n)
    return store


def _bound_task(store, robot_id="AMR-1"):
    task_id = store.create_task()
    assert store.assign_task(robot_id, task_id)
    return store.get_task(task_id)


def _run_until(store, driver, predicate, max_ticks=5000):
    for _ in range(max_ticks):
        if predicate():
            return True
        driver.tick()
    return predicate()


def _unreachable_task():
    return WorkflowTask(
        WorkflowType.INBOUND,
        [TaskStep(StepAction.MOVE, "NOWHERE", "Go nowhere")],
    )


def _active_assignees(store):
    return [t.assigned_to for t in store.workflow_tasks if t.status == TaskStatus.ACTIVE]


# -- Fleet ------------------------------------------------------------

def test_initialize_fleet_positions_and_ids():
    store = _store(3)
    assert [a.id for a in store.amrs] == ["AMR-1", "AMR-2", "AMR-3"]
    assert store.amrs[0].position == (80.0, 100.0)
    assert store.amrs[2].position == (200.0, 100.0)
    assert all(a.status == AMRStatus.IDLE and a.battery == 100.0 for a in store.amrs)
    assert store.workflow_tasks == []
    assert "Initialized 3 AMRs" in store.logs[0].message


def test_fleet_positions_cycle_past_five():
    store = _store(7)
    assert store.amrs[5].position == store.amrs[0].position


def test_initialize_while_running_assigns_every_robot():
    store = _store(3, running=True)
    active = store.active_tasks()
    assert len(active) == 3
    assert sorted(t.assigned_to for t in active) == ["AMR-1", "AMR-2", "AMR-3"]
    for task in active:
        assert task.current_step_index == 0
        assert task.current_step.action == StepAction.MOVE
    for amr in store.amrs:
        assert amr.current_task is not None


def test_start_is_deferred_then_robot_moves():
    store = _store(1, running=True)
    amr = store.amrs[0]
    assert amr.path == []
    store.clock.advance(START_DELAY_MS)
    assert amr.status == AMRStatus.MOVING
    assert amr.target_node_id == "M3"
    assert amr.path[0] == (80.0, 100.0)


def test_reinitialize_cancels_stale_events():
    store = _store(2, running=True)
    assert len(store.clock) == 2
    store.initialize_fleet(1)
    assert [e.robot_id for e in store.clock.pending()] == ["AMR-1"]


def test_set_speed_rejects_non_positive():
    store = _store()
    assert store.set_speed(2.0)
    assert not store.set_speed(0)
    assert store.speed == 2.0


def test_select_robot():
    store = _store(2)
    assert store.select_robot("AMR-2")
    assert not store.select_robot("AMR-9")
    assert store.selected_amr_id == "AMR-2"
    assert store.select_robot(None)


# -- Assignment -------------------------------------------------------

def test_assign_refuses_busy_robot():
    store = _store(2)
    first = _bound_task(store)
    second = store.create_task()
    assert not store.assign_task("AMR-1", second)
    assert store.get_task(second).status == TaskStatus.PENDING
    assert store.get_robot("AMR-1").current_task == first.id
    assert store.logs[0].type == LogType.WARNING


def test_assign_refuses_non_pending_and_unknown():
    store = _store(2)
    task = _bound_task(store)
    assert not store.assign_task("AMR-2", task.id)
    assert not store.assign_task("AMR-9", store.create_task())
    assert not store.assign_task("AMR-2", "missing")


def test_assign_refuses_navigating_robot():
    store = _store(4, running=True, auto_assign=False)
    driver = MovementDriver(store)
    amr = store.get_robot("AMR-4")
    assert store.send_to_dock("AMR-4")
    task_id = store.create_task()
    assert not store.assign_task("AMR-4", task_id)
    assert "moving" in store.logs[0].message
    assert _run_until(store, driver, lambda: not amr.path)
    assert store.get_task(task_id).status == TaskStatus.PENDING
    assert store.get_task(task_id).current_step_index == 0
    assert amr.status == AMRStatus.IDLE
    assert store.assign_task("AMR-4", task_id)


def test_assign_refuses_charging_robot():
    store = _store(1, running=True, auto_assign=False)
    driver = MovementDriver(store)
    amr = store.amrs[0]
    assert store.send_to_charging("AMR-1")
    assert _run_until(store, driver, lambda: amr.status == AMRStatus.CHARGING)
    task_id = store.create_task()
    assert not store.assign_task("AMR-1", task_id)
    assert amr.current_task is None
    assert store.get_task(task_id).status == TaskStatus.PENDING


def test_no_robot_holds_two_active_tasks():
    store = _store(3)
    ids = [store.create_task() for _ in range(6)]
    for robot_id in ("AMR-1", "AMR-2", "AMR-1", "AMR-3", "AMR-2"):
        for task_id in ids:
            store.assign_task(robot_id, task_id)
    assignees = _active_assignees(store)
    assert len(assignees) == len(set(assignees)) == 3
    assert len(store.pending_tasks()) == 3


def test_pending_tasks_oldest_first():
    store = _store()
    a = store.create_task()
    store.clock.advance(10)
    b = store.create_task()
    assert [t.id for t in store.pending_tasks()] == [a, b]


def test_auto_assign_takes_pending_before_generating():
    store = _store(1)
    queued = store.create_task()
    store.toggle_simulation()
    assert store.get_task(queued).assigned_to == "AMR-1"
    assert len(store.workflow_tasks) == 1


# -- Workflow ---------------------------------------------------------

def test_step_index_advances_by_one_and_schedules_next():
    store = _store(1)
    task = _bound_task(store)
    store.complete_current_step("AMR-1")
    assert task.current_step_index == 1
    assert store.get_robot("AMR-1").status == AMRStatus.IDLE
    assert [e.label for e in store.clock.pending(task_id=task.id)] == ["next-step"]


def test_final_step_cleans_up_immediately():
    store = _store(1)
    task = _bound_task(store)
    task.current_step_index = len(task.steps) - 1
    store.complete_current_step("AMR-1")
    amr = store.get_robot("AMR-1")
    assert task.status == TaskStatus.COMPLETED
    assert task.current_step_index == len(task.steps)
    assert task.completed_at is not None
    assert amr.current_task is None
    assert amr.status == AMRStatus.IDLE
    assert store.clock.pending(task_id=task.id) == []


def test_execute_past_last_step_finishes_task():
    store = _store(1)
    task = _bound_task(store)
    task.current_step_index = len(task.steps)
    store.execute_next_step("AMR-1")
    assert task.status == TaskStatus.COMPLETED
    assert store.get_robot("AMR-1").current_task is None


def test_full_inbound_task_moves_one_cargo():
    store = _store(1, running=True, auto_assign=False)
    driver = MovementDriver(store)
    task = _bound_task(store)
    store.execute_next_step("AMR-1")

    seen = [task.current_step_index]
    cargo_after_load = None

    def done():
        nonlocal cargo_after_load
        if task.current_step_index != seen[-1]:
            seen.append(task.current_step_index)
            if task.current_step_index == 2:
                cargo_after_load = [c.status for c in store.cargos]
        return task.status != TaskStatus.ACTIVE

    assert _run_until(store, driver, done)
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at is not None
    assert task.duration_ms > 0
    assert seen == [0, 1, 2, 3, 4, 5]
    assert cargo_after_load == [CargoStatus.IN_TRANSIT]
    assert len(store.cargos) == 1
    cargo = store.cargos[0]
    assert cargo.status == CargoStatus.STORED
    assert cargo.location == "B3"
    assert cargo.assigned_amr == "AMR-1"
    assert 100 <= cargo.weight <= 599
    assert cargo.total_transit_time > 0
    amr = store.get_robot("AMR-1")
    assert amr.current_task is None
    assert amr.status == AMRStatus.IDLE
    assert amr.position == (80.0, 100.0)
    assert store.node_visits["M3"] >= 1


def test_completion_chains_next_task_when_running():
    store = _store(1, running=True)
    task = store.active_tasks()[0]
    task.current_step_index = len(task.steps) - 1
    store.complete_current_step("AMR-1")
    assert [e.label for e in store.clock.pending(robot_id="AMR-1")] == ["auto-assign"]
    store.clock.advance(AUTO_ASSIGN_DELAY_MS)
    nxt = store.get_robot_task("AMR-1")
    assert nxt is not None and nxt.id != task.id
    assert nxt.status == TaskStatus.ACTIVE


def test_low_battery_goes_to_charger():
    store = _store(1, running=True)
    amr = store.amrs[0]
    task = store.active_tasks()[0]
    task.current_step_index = len(task.steps) - 1
    amr.battery = 10.0
    store.complete_current_step("AMR-1")
    assert amr.target_node_id == "CHARGE"
    assert amr.status == AMRStatus.MOVING
    assert store.clock.pending(robot_id="AMR-1") == []


def test_charging_cycle():
    store = _store(1, running=True, auto_assign=False)
    driver = MovementDriver(store)
    amr = store.amrs[0]
    assert store.send_to_charging("AMR-1")
    assert _run_until(store, driver, lambda: amr.status == AMRStatus.CHARGING)
    assert amr.position == store.graph["CHARGE"].position
    amr.battery = 99.0
    driver.tick()
    assert amr.battery == 99.5
    driver.tick()
    assert amr.battery == 100.0
    assert amr.status == AMRStatus.IDLE


# -- Manual navigation ------------------------------------------------

def test_send_to_dock_from_idle():
    store = _store(4)
    assert store.send_to_dock("AMR-4")
    amr = store.get_robot("AMR-4")
    assert amr.path[-1] == (80.0, 100.0)
    assert amr.status == AMRStatus.MOVING


def test_navigation_refused_with_task_or_fault():
    store = _store(2)
    _bound_task(store)
    assert not store.navigate_to_node("AMR-1", "R3")
    store.toggle_robot_health("AMR-2")
    assert not store.send_to_dock("AMR-2")
    assert not store.navigate_to_node("AMR-9", "R3")


def test_navigate_to_unknown_node():
    store = _store(1)
    assert not store.navigate_to_node("AMR-1", "Z9")
    assert store.logs[0].type == LogType.ERROR


def test_waypoint_queue_and_shift():
    store = _store(1)
    assert store.queue_waypoints("AMR-1", [(90.0, 100.0), (100.0, 100.0)])
    amr = store.get_robot("AMR-1")
    assert amr.status == AMRStatus.MOVING
    assert store.shift_waypoint("AMR-1")
    assert amr.path == [(100.0, 100.0)]
    assert store.shift_waypoint("AMR-1")
    assert amr.status == AMRStatus.IDLE
    assert not store.shift_waypoint("AMR-1")


def test_shift_only_completes_move_steps():
    store = _store(1)
    task = _bound_task(store)
    task.current_step_index = 1                       # load step
    store.queue_waypoints("AMR-1", [(300.0, 300.0)])
    store.shift_waypoint("AMR-1")
    assert task.current_step_index == 1


# -- Spawn / clear ----------------------------------------------------

def test_set_spawn_refused_while_running():
    store = _store(1, running=True)
    assert not store.set_spawn_node("AMR-1", "R3")
    assert store.amrs[0].position == (80.0, 100.0)


def test_set_spawn_relocates_and_fails_task():
    store = _store(1)
    task = _bound_task(store)
    assert store.set_spawn_node("AMR-1", "R3")
    amr = store.amrs[0]
    assert amr.position == (600.0, 300.0)
    assert amr.current_task is None
    assert amr.path == []
    assert task.status == TaskStatus.FAILED
    assert not store.set_spawn_node("AMR-1", "NOPE")


def test_clear_all_tasks():
    store = _store(2, running=True)
    assert store.clear_all_tasks() == 0
    store.toggle_simulation()
    assert store.clear_all_tasks() == 2
    assert store.workflow_tasks == []
    assert all(a.current_task is None for a in store.amrs)
    assert len(store.clock) == 0


# -- Faults -----------------------------------------------------------

def test_fault_fails_task_and_queues_replacement():
    store = _store(2, running=True)
    task = store.get_robot_task("AMR-1")
    assert store.toggle_robot_health("AMR-1") is False
    amr = store.get_robot("AMR-1")
    assert amr.status == AMRStatus.ERROR
    assert not amr.available
    assert amr.current_task is None
    assert task.status == TaskStatus.FAILED
    assert "faulted" in task.failure_reason
    assert store.clock.pending(robot_id="AMR-1") == []
    assert len(store.pending_tasks()) == 1


def test_fault_without_auto_assign_does_not_requeue():
    store = _store(1, auto_assign=False)
    task = _bound_task(store)
    store.toggle_robot_health("AMR-1")
    assert task.status == TaskStatus.FAILED
    assert store.pending_tasks() == []


def test_clearing_fault_restores_availability():
    store = _store(1)
    store.update_status("AMR-1", AMRStatus.ERROR)
    amr = store.amrs[0]
    assert not amr.healthy
    store.update_status("AMR-1", AMRStatus.IDLE)
    assert amr.healthy and amr.available
    store.toggle_robot_health("AMR-1")
    assert store.toggle_robot_health("AMR-1") is True


def test_recovered_robot_picks_up_replacement():
    store = _store(1, running=True)
    store.toggle_robot_health("AMR-1")
    replacement = store.pending_tasks()[0]
    store.toggle_robot_health("AMR-1")
    store.clock.advance(START_DELAY_MS)
    assert replacement.assigned_to == "AMR-1"
    assert replacement.status == TaskStatus.ACTIVE


def test_faulted_robot_ignores_waypoints():
    store = _store(1)
    store.toggle_robot_health("AMR-1")
    assert not store.queue_waypoints("AMR-1", [(1.0, 1.0)])


def test_emergency_stop():
    store = _store(3, running=True)
    store.emergency_stop()
    assert not store.is_running
    assert len(store.clock) == 0
    assert all(a.status == AMRStatus.ERROR and not a.healthy for a in store.amrs)
    assert all(t.status == TaskStatus.FAILED for t in store.workflow_tasks)
    assert store.pending_tasks() == []
    assert store.logs[0].type == LogType.ERROR


# -- Path failures ----------------------------------------------------

def test_unreachable_move_retries_then_fails():
    store = _store(1, auto_assign=False)
    task = _unreachable_task()
    store.workflow_tasks.append(task)
    store.assign_task("AMR-1", task.id)
    store.execute_next_step("AMR-1")
    assert task.path_failures == 1
    assert task.status == TaskStatus.ACTIVE
    store.clock.advance(PATH_RETRY_DELAY_MS)
    assert task.path_failures == 2
    store.clock.advance(PATH_RETRY_DELAY_MS)
    assert task.path_failures == 3
    assert task.status == TaskStatus.FAILED
    assert store.get_robot("AMR-1").current_task is None
    assert store.get_robot("AMR-1").status == AMRStatus.IDLE


def test_zero_attempts_leaves_task_stalled():
    store = _store(1, auto_assign=False, max_path_attempts=0)
    task = _unreachable_task()
    store.workflow_tasks.append(task)
    store.assign_task("AMR-1", task.id)
    store.execute_next_step("AMR-1")
    store.clock.advance(10 * PATH_RETRY_DELAY_MS)
    assert task.status == TaskStatus.ACTIVE
    assert task.path_failures == 1
    assert store.get_robot("AMR-1").current_task == task.id


# -- Logs / scenarios / report ---------------------------------------

def test_log_capacity_newest_first():
    store = _store()
    for i in range(LOG_CAPACITY + 10):
        store.add_log(f"line {i}")
    logs = store.logs
    assert len(logs) == LOG_CAPACITY
    assert logs[0].message == f"line {LOG_CAPACITY + 9}"


def test_logs_mirror_to_logger(caplog):
    store = _store()
    with caplog.at_level("WARNING", logger="amr_simulation.store"):
        store.add_log("battery low", LogType.WARNING)
    assert "battery low" in caplog.text


def test_load_demo_scenario():
    store = _store()
    assert store.load_demo_scenario("rush")
    assert len(store.amrs) == 5
    assert store.speed == 2.0
    assert store.active_demo_scenario == "rush"
    assert not store.load_demo_scenario("nope")
    store.toggle_simulation()
    assert not store.load_demo_scenario("single")


def test_toggles():
    store = _store()
    assert store.toggle_heatmap() is True
    assert store.toggle_auto_assign() is False
    assert store.toggle_collision_avoidance() is True
    assert store.toggle_simulation() is True
    assert store.toggle_simulation() is False


def test_export_report_is_json():
    store = _store(2, running=True)
    data = json.loads(store.export_report())
    assert data["summary"]["active_tasks"] == 2
    assert [r["id"] for r in data["robots"]] == ["AMR-1", "AMR-2"]
    assert len(data["recent_logs"]) <= 20
