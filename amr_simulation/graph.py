"""Navigation graph builder and validation for the warehouse layout."""

from __future__ import annotations

import logging

from .constants import CHARGE_NODE, DEFAULT_DOCK_NODE, DEFAULT_PROCESSING_NODE, DEFAULT_STORAGE_NODE
from .models import GraphNode, Position
from .pathfinding import find_path, get_reachable_nodes

logger = logging.getLogger(__name__)

Graph = dict[str, GraphNode]


class GraphValidationError(ValueError):
    """Raised when the adjacency table is structurally broken."""


# node id -> ((x, y), neighbours)
WAREHOUSE_LAYOUT: dict[str, tuple[Position, list[str]]] = {
    # Left vertical path (dock)
    "L1": ((80, 100), ["L2", "T1"]),
    "L2": ((80, 200), ["L1", "L3"]),
    "L3": ((80, 300), ["L2", "L4", "M3"]),
    "L4": ((80, 400), ["L3", "L5"]),
    "L5": ((80, 500), ["L4", "B1"]),

    # Top horizontal path
    "T1": ((200, 100), ["L1", "T2", "V1"]),
    "T2": ((300, 100), ["T1", "T3"]),
    "T3": ((400, 100), ["T2", "T4", "M1"]),
    "T4": ((500, 100), ["T3", "T5"]),
    "T5": ((600, 100), ["T4", "R1"]),

    # Vertical connector at x=200
    "V1": ((200, 200), ["T1", "V2"]),
    "V2": ((200, 300), ["V1", "V3", "M3"]),
    "V3": ((200, 400), ["V2", "B1"]),

    # Middle horizontal path
    "M1": ((400, 200), ["T3", "M2"]),
    "M2": ((400, 300), ["M1", "M3", "M4", "M5"]),
    "M3": ((300, 300), ["L3", "M2", "V2"]),
    "M4": ((500, 300), ["M2", "R3"]),
    "M5": ((400, 400), ["M2", "B3"]),

    # Bottom horizontal path
    "B1": ((200, 500), ["L5", "B2", "V3"]),
    "B2": ((300, 500), ["B1", "B3"]),
    "B3": ((400, 500), ["B2", "B4", "M5"]),
    "B4": ((500, 500), ["B3", "B5"]),
    "B5": ((600, 500), ["B4", "R5"]),

    # Right vertical path (shares corners with T5 and B5)
    "R1": ((600, 100), ["T5", "R2"]),
    "R2": ((600, 200), ["R1", "R3"]),
    "R3": ((600, 300), ["R2", "R4", "M4", CHARGE_NODE]),
    "R4": ((600, 400), ["R3", "R5"]),
    "R5": ((600, 500), ["R4", "B5"]),

    # Charging station
    CHARGE_NODE: ((700, 300), ["R3"]),
}


def validate_graph(graph: Graph) -> None:
    """Raise :class:`GraphValidationError` unless every edge resolves and is mutual."""
    problems: list[str] = []
    for node_id, node in graph.items():
        if node.id != node_id:
            problems.append(f"{node_id}: keyed under a different id ({node.id})")
        if len(set(node.neighbors)) != len(node.neighbors):
            problems.append(f"{node_id}: duplicate neighbour entries")
        for neighbor_id in node.neighbors:
            if neighbor_id == node_id:
                problems.append(f"{node_id}: self loop")
                continue
            neighbor = graph.get(neighbor_id)
            if neighbor is None:
                problems.append(f"{node_id} -> {neighbor_id}: unknown node")
            elif node_id not in neighbor.neighbors:
                problems.append(f"{node_id} -> {neighbor_id}: edge is not mutual")
    if problems:
        raise GraphValidationError("invalid navigation graph: " + "; ".join(problems))


def build_graph(
    layout: dict[str, tuple[Position, list[str]]] | None = None,
) -> Graph:
    """Create the navigation graph from *layout* and validate it.

    Returns ``{node_id: GraphNode, ...}``. Defaults to the warehouse layout.
    """
    if layout is None:
        layout = WAREHOUSE_LAYOUT
    graph: Graph = {}
    for node_id, ((x, y), neighbors) in layout.items():
        graph[node_id] = GraphNode(node_id, (float(x), float(y)), list(neighbors))
    validate_graph(graph)
    return graph


def count_components(graph: Graph) -> int:
    seen: set[str] = set()
    components = 0
    for node_id in graph:
        if node_id in seen:
            continue
        components += 1
        seen.update(get_reachable_nodes(graph, node_id))
    return components


def verify_graph(graph: Graph) -> None:
    """Log graph stats and test a few key routes at startup."""
    logger.info("--- Graph verification ---")
    logger.info("Graph nodes: %d", len(graph))
    total_edges = sum(len(n.neighbors) for n in graph.values()) // 2
    logger.info("Graph edges: %d", total_edges)
    components = count_components(graph)
    if components != 1:
        logger.warning("Graph has %d disconnected components", components)

    tests = [
        ("Dock → Processing", DEFAULT_DOCK_NODE, DEFAULT_PROCESSING_NODE),
        ("Processing → Storage", DEFAULT_PROCESSING_NODE, DEFAULT_STORAGE_NODE),
        ("Storage → Charger", DEFAULT_STORAGE_NODE, CHARGE_NODE),
    ]
    for desc, start, goal in tests:
        path = find_path(graph, start, goal)
        if path:
            logger.info("  %s: %d hops", desc, len(path) - 1)
        else:
            logger.info("  %s: NO PATH FOUND!", desc)
    logger.info("--- End verification ---")
