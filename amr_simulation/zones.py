"""Zone registry: named warehouse regions mapped onto graph nodes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .enums import StepAction, ZoneType
from .constants import CHARGE_NODE, DEFAULT_PROCESSING_NODE, DEFAULT_STORAGE_NODE
from .models import Zone
from .pathfinding import get_reachable_nodes

if TYPE_CHECKING:
    from .models import GraphNode

logger = logging.getLogger(__name__)


class ZoneConfigError(ValueError):
    """Raised when a zone references no nodes or unknown nodes."""


def build_zones() -> dict[str, Zone]:
    """Return a fresh copy of the warehouse zone table."""
    return {
        "DOCK_LEFT": Zone(
            "DOCK_LEFT", "Left Dock", ZoneType.DOCK,
            ["L1", "L2", "L3", "L4", "L5"],
            [StepAction.MOVE, StepAction.LOAD, StepAction.WAIT],
            capacity=5, color="#3b82f6",
        ),
        # M3 and V2 are directly reachable from the dock
        "PROCESSING_CENTER": Zone(
            "PROCESSING_CENTER", "Pallet Pickup Zone", ZoneType.PROCESSING,
            ["M3", "V2", "L3"],
            [StepAction.MOVE, StepAction.LOAD, StepAction.UNLOAD, StepAction.WAIT],
            capacity=3, color="#f59e0b",
        ),
        "STORAGE_TOP": Zone(
            "STORAGE_TOP", "Top Storage Rack", ZoneType.STORAGE,
            ["T2", "T3", "T4"],
            [StepAction.MOVE, StepAction.UNLOAD, StepAction.WAIT],
            capacity=3, color="#22c55e",
        ),
        "STORAGE_BOTTOM": Zone(
            "STORAGE_BOTTOM", "Bottom Storage Rack", ZoneType.STORAGE,
            ["B2", "B3", "B4"],
            [StepAction.MOVE, StepAction.UNLOAD, StepAction.WAIT],
            capacity=3, color="#22c55e",
        ),
        "CHARGING": Zone(
            "CHARGING", "Charging Station", ZoneType.CHARGING,
            [CHARGE_NODE],
            [StepAction.MOVE, StepAction.WAIT],
            capacity=1, color="#10b981",
        ),
    }


ZONES: dict[str, Zone] = build_zones()

# Storage zones are tried in this order
STORAGE_ZONE_ORDER = ["STORAGE_TOP", "STORAGE_BOTTOM"]


def validate_zones(zones: dict[str, Zone], graph: dict[str, GraphNode]) -> None:
    """Raise :class:`ZoneConfigError` for empty or dangling zone node lists."""
    for zone_id, zone in zones.items():
        if not zone.node_ids:
            raise ZoneConfigError(f"zone {zone_id} has no nodes")
        unknown = [n for n in zone.node_ids if n not in graph]
        if unknown:
            raise ZoneConfigError(f"zone {zone_id} references unknown nodes {unknown}")


def get_zone_by_node_id(node_id: str, zones: dict[str, Zone] | None = None) -> Zone | None:
    for zone in (ZONES if zones is None else zones).values():
        if node_id in zone.node_ids:
            return zone
    return None


def get_zones_by_type(zone_type: ZoneType, zones: dict[str, Zone] | None = None) -> list[Zone]:
    return [z for z in (ZONES if zones is None else zones).values() if z.zone_type == zone_type]


def get_first_available_node(zone: Zone) -> str | None:
    # Occupancy is not tracked; the first node is always "available".
    return zone.node_ids[0] if zone.node_ids else None


def get_reachable_nodes_from(
    graph: dict[str, GraphNode],
    start_node_id: str,
    zone: Zone,
) -> list[str]:
    """Return the nodes of *zone* reachable from *start_node_id*, in zone order."""
    reachable = set(get_reachable_nodes(graph, start_node_id))
    return [n for n in zone.node_ids if n in reachable]


def find_best_processing_node(
    graph: dict[str, GraphNode],
    start_node_id: str,
    zones: dict[str, Zone] | None = None,
) -> str:
    """First reachable processing node, or ``DEFAULT_PROCESSING_NODE``."""
    if zones is None:
        zones = ZONES
    zone = zones.get("PROCESSING_CENTER")
    if zone is not None:
        nodes = get_reachable_nodes_from(graph, start_node_id, zone)
        if nodes:
            return nodes[0]
    logger.warning(
        "No processing node reachable from %s, falling back to %s",
        start_node_id, DEFAULT_PROCESSING_NODE,
    )
    return DEFAULT_PROCESSING_NODE


def find_best_storage_node(
    graph: dict[str, GraphNode],
    start_node_id: str,
    zones: dict[str, Zone] | None = None,
) -> str:
    """First reachable storage node (top rack before bottom), or ``DEFAULT_STORAGE_NODE``."""
    if zones is None:
        zones = ZONES
    for zone_id in STORAGE_ZONE_ORDER:
        zone = zones.get(zone_id)
        if zone is None:
            continue
        nodes = get_reachable_nodes_from(graph, start_node_id, zone)
        if nodes:
            return nodes[0]
    logger.warning(
        "No storage node reachable from %s, falling back to %s",
        start_node_id, DEFAULT_STORAGE_NODE,
    )
    return DEFAULT_STORAGE_NODE
