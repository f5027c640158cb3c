"""
Tests for the zone registry and inbound task generation.
"""

import logging

import pytest

from amr_simulation import (
    StepAction, TaskStatus, WorkflowType, ZoneConfigError, ZoneType, build_graph,
    find_best_processing_node, find_best_storage_node, generate_inbound_task,
)
from amr_simulation.models import Zone
from amr_simulation.zones import (
    build_zones, get_first_available_node, get_reachable_nodes_from,
    get_zone_by_node_id, get_zones_by_type, validate_zones,
)


# -- Helpers ----------------------------------------------------------

def _targets(task):
    return [(s.action, s.target_node_id) for s in task.steps]


def _isolated_graph():
    return build_graph({
        "A": ((0, 0), ["B"]),
        "B": ((10, 0), ["A"]),
        "M3": ((300, 300), []),
        "B3": ((400, 500), []),
    })


# -- Zones ------------------------------------------------------------

def test_default_zones_validate_against_warehouse():
    validate_zones(build_zones(), build_graph())


def test_zone_lookup():
    assert get_zone_by_node_id("V2").id == "PROCESSING_CENTER"
    assert get_zone_by_node_id("CHARGE").zone_type == ZoneType.CHARGING
    assert get_zone_by_node_id("R2") is None
    storage = get_zones_by_type(ZoneType.STORAGE)
    assert [z.id for z in storage] == ["STORAGE_TOP", "STORAGE_BOTTOM"]


def test_first_available_node():
    zones = build_zones()
    assert get_first_available_node(zones["DOCK_LEFT"]) == "L1"


def test_empty_zone_rejected():
    zones = {"EMPTY": Zone("EMPTY", "Empty", ZoneType.DOCK, [], [], 0, "#000")}
    with pytest.raises(ZoneConfigError, match="no nodes"):
        validate_zones(zones, build_graph())


def test_dangling_zone_node_rejected():
    zones = build_zones()
    zones["DOCK_LEFT"].node_ids.append("L9")
    with pytest.raises(ZoneConfigError, match="L9"):
        validate_zones(zones, build_graph())


def test_build_zones_returns_fresh_copies():
    a = build_zones()
    a["DOCK_LEFT"].current_load = 4
    assert build_zones()["DOCK_LEFT"].current_load == 0


def test_best_nodes_from_dock():
    graph = build_graph()
    assert find_best_processing_node(graph, "L1") == "M3"
    assert find_best_storage_node(graph, "M3") == "T2"


def test_reachable_zone_nodes_keep_zone_order():
    graph = build_graph()
    zone = build_zones()["STORAGE_BOTTOM"]
    assert get_reachable_nodes_from(graph, "L1", zone) == ["B2", "B3", "B4"]


def test_unreachable_zone_falls_back(caplog):
    graph = _isolated_graph()
    with caplog.at_level(logging.WARNING):
        assert find_best_processing_node(graph, "A") == "M3"
        assert find_best_storage_node(graph, "A") == "B3"
    assert "falling back to M3" in caplog.text
    assert "falling back to B3" in caplog.text


def test_empty_zone_table_is_respected():
    graph = build_graph()
    assert find_best_processing_node(graph, "L1", zones={}) == "M3"
    assert find_best_storage_node(graph, "L1", zones={}) == "B3"


# -- Task generation --------------------------------------------------

def test_inbound_task_from_start_node():
    task = generate_inbound_task(build_graph(), "L1", now_ms=1500.0)
    assert task.type == WorkflowType.INBOUND
    assert task.status == TaskStatus.PENDING
    assert task.current_step_index == 0
    assert task.priority == 1
    assert task.created_at == 1500.0
    assert task.assigned_to is None
    assert _targets(task) == [
        (StepAction.MOVE, "M3"),
        (StepAction.LOAD, "M3"),
        (StepAction.MOVE, "T2"),
        (StepAction.UNLOAD, "T2"),
        (StepAction.MOVE, "L1"),
    ]
    assert task.steps[1].duration_ms == 2000.0
    assert task.steps[3].duration_ms == 2000.0


def test_inbound_task_returns_to_its_start():
    task = generate_inbound_task(build_graph(), "R3")
    assert task.steps[-1].target_node_id == "R3"


def test_inbound_task_defaults_without_start():
    task = generate_inbound_task(build_graph())
    assert [t for _, t in _targets(task)] == ["M3", "M3", "B3", "B3", "L1"]


def test_inbound_task_unknown_start_uses_defaults(caplog):
    with caplog.at_level(logging.ERROR):
        task = generate_inbound_task(build_graph(), "NOWHERE")
    assert "Unknown start node NOWHERE" in caplog.text
    assert [t for _, t in _targets(task)] == ["M3", "M3", "B3", "B3", "L1"]


def test_task_and_step_ids_unique():
    graph = build_graph()
    tasks = [generate_inbound_task(graph, "L1") for _ in range(5)]
    assert len({t.id for t in tasks}) == 5
    step_ids = [s.id for t in tasks for s in t.steps]
    assert len(set(step_ids)) == len(step_ids)
