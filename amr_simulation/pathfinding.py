"""Breadth-first pathfinding on the warehouse navigation graph."""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import TYPE_CHECKING

from .constants import MAX_SEARCH_ITERATIONS

if TYPE_CHECKING:
    from .models import GraphNode, Position

logger = logging.getLogger(__name__)


def find_path(
    graph: dict[str, GraphNode],
    start_id: str,
    end_id: str,
    max_iterations: int = MAX_SEARCH_ITERATIONS,
) -> list[Position]:
    """BFS over the unweighted adjacency lists.

    Returns the waypoint positions from *start_id* to *end_id* inclusive (fewest
    hops), a single position when both ids are equal, or ``[]`` if either id is
    unknown, the nodes are disconnected, or *max_iterations* dequeues pass
    without reaching the goal.
    """
    if start_id not in graph or end_id not in graph:
        logger.error("find_path: node not found: start=%s end=%s", start_id, end_id)
        return []

    if start_id == end_id:
        return [graph[start_id].position]

    queue: deque[str] = deque([start_id])
    visited: set[str] = {start_id}
    came_from: dict[str, str] = {}
    iterations = 0

    while queue and iterations < max_iterations:
        iterations += 1
        current = queue.popleft()

        for neighbor_id in graph[current].neighbors:
            if neighbor_id in visited or neighbor_id not in graph:
                continue
            visited.add(neighbor_id)
            came_from[neighbor_id] = current

            if neighbor_id == end_id:
                node_id: str | None = end_id
                path: list[Position] = []
                while node_id is not None:
                    path.append(graph[node_id].position)
                    node_id = came_from.get(node_id)
                path.reverse()
                return path

            queue.append(neighbor_id)

    logger.error("find_path: no path from %s to %s", start_id, end_id)
    return []


def find_nearest_node(graph: dict[str, GraphNode], position: Position) -> str | None:
    """Return the id of the node closest to *position* (first seen wins ties)."""
    nearest: str | None = None
    best = float("inf")
    for node_id, node in graph.items():
        dist = math.hypot(position[0] - node.position[0], position[1] - node.position[1])
        if dist < best:
            best = dist
            nearest = node_id
    return nearest


def get_reachable_nodes(graph: dict[str, GraphNode], start_id: str) -> list[str]:
    """Return every node id reachable from *start_id*, in BFS order."""
    if start_id not in graph:
        return []
    reachable: dict[str, None] = {start_id: None}
    queue: deque[str] = deque([start_id])
    while queue:
        current = queue.popleft()
        for neighbor_id in graph[current].neighbors:
            if neighbor_id in graph and neighbor_id not in reachable:
                reachable[neighbor_id] = None
                queue.append(neighbor_id)
    return list(reachable)


def path_exists(graph: dict[str, GraphNode], start_id: str, end_id: str) -> bool:
    return end_id in get_reachable_nodes(graph, start_id)
