"""All pygame rendering functions for the AMR simulation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

from .enums import AMRStatus, LogType
from .constants import (
    MAP_WIDTH, MAP_HEIGHT, PANEL_WIDTH, AMR_RADIUS,
    BG_COLOR, GRID_DOT_COLOR, EDGE_COLOR, NODE_COLOR, LABEL_COLOR, HEAT_COLOR,
    ZONE_COLORS,
    PANEL_BG, PANEL_TEXT, PANEL_HEADER, PANEL_SEPARATOR,
    PANEL_GREEN, PANEL_YELLOW, PANEL_RED,
)

if TYPE_CHECKING:
    from .models import AMR, GraphNode, Zone
    from .movement import MovementDriver
    from .store import SimulationStore

NODE_RADIUS = 5
ZONE_RADIUS = 20
GRID_SPACING = 25
NODE_PICK_RADIUS = 15

_LOG_COLORS = {
    LogType.INFO: PANEL_TEXT,
    LogType.WARNING: PANEL_YELLOW,
    LogType.ERROR: PANEL_RED,
}


def _point(pos: tuple[float, float]) -> tuple[int, int]:
    return int(round(pos[0])), int(round(pos[1]))


def node_at(graph: dict[str, GraphNode], pos: tuple[int, int]) -> str | None:
    """Return the id of the node under a click at *pos*, if any."""
    best_id = None
    best_dist = float(NODE_PICK_RADIUS)
    for node in graph.values():
        dist = ((node.position[0] - pos[0]) ** 2 + (node.position[1] - pos[1]) ** 2) ** 0.5
        if dist <= best_dist:
            best_id = node.id
            best_dist = dist
    return best_id


def draw_background(surface: pygame.Surface) -> None:
    surface.fill(BG_COLOR)
    for x in range(0, MAP_WIDTH, GRID_SPACING):
        for y in range(0, MAP_HEIGHT, GRID_SPACING):
            surface.set_at((x, y), GRID_DOT_COLOR)


def draw_zones(
    surface: pygame.Surface,
    graph: dict[str, GraphNode],
    zones: dict[str, Zone],
    font: pygame.font.Font,
) -> None:
    """Shade every zone node and label the zone at its first node."""
    overlay = pygame.Surface((MAP_WIDTH, MAP_HEIGHT), pygame.SRCALPHA)
    for zone in zones.values():
        r, g, b = ZONE_COLORS[zone.zone_type]
        for node_id in zone.node_ids:
            node = graph.get(node_id)
            if node is not None:
                pygame.draw.circle(overlay, (r, g, b, 60), _point(node.position), ZONE_RADIUS)
    surface.blit(overlay, (0, 0))

    for zone in zones.values():
        node = graph.get(zone.node_ids[0]) if zone.node_ids else None
        if node is None:
            continue
        txt = font.render(zone.name, True, ZONE_COLORS[zone.zone_type])
        x, y = _point(node.position)
        surface.blit(txt, (x - txt.get_width() // 2, y - ZONE_RADIUS - 14))


def draw_graph(
    surface: pygame.Surface,
    graph: dict[str, GraphNode],
    font: pygame.font.Font,
) -> None:
    """Draw each undirected edge once, then the nodes and their ids."""
    for node in graph.values():
        for nid in node.neighbors:
            if node.id < nid and nid in graph:
                pygame.draw.line(
                    surface, EDGE_COLOR,
                    _point(node.position), _point(graph[nid].position), 2,
                )
    for node in graph.values():
        center = _point(node.position)
        pygame.draw.circle(surface, NODE_COLOR, center, NODE_RADIUS)
        txt = font.render(node.id, True, LABEL_COLOR)
        surface.blit(txt, (center[0] + 6, center[1] + 4))


def draw_heatmap(
    surface: pygame.Surface,
    graph: dict[str, GraphNode],
    node_visits: dict[str, int],
) -> None:
    if not node_visits:
        return
    peak = max(node_visits.values())
    overlay = pygame.Surface((MAP_WIDTH, MAP_HEIGHT), pygame.SRCALPHA)
    for node_id, visits in node_visits.items():
        node = graph.get(node_id)
        if node is None or visits <= 0:
            continue
        weight = visits / peak
        radius = int(8 + 16 * weight)
        pygame.draw.circle(overlay, (*HEAT_COLOR, int(40 + 120 * weight)), _point(node.position), radius)
    surface.blit(overlay, (0, 0))


def draw_amr(
    surface: pygame.Surface,
    amr: AMR,
    font: pygame.font.Font,
    selected: bool = False,
    blocked: bool = False,
) -> None:
    """Draw an AMR as a status-coloured circle with its number, plus its path dots."""
    for wp in amr.path:
        pygame.draw.circle(surface, (0, 200, 0), _point(wp), 3)

    center = _point(amr.position)
    pygame.draw.circle(surface, amr.get_color(), center, AMR_RADIUS)
    pygame.draw.circle(surface, (0, 0, 0), center, AMR_RADIUS, 2)
    if selected:
        pygame.draw.circle(surface, PANEL_HEADER, center, AMR_RADIUS + 4, 2)
    if blocked:
        pygame.draw.circle(surface, (255, 140, 0), center, AMR_RADIUS + 2, 2)

    id_text = font.render(amr.id.split("-")[-1], True, (255, 255, 255))
    surface.blit(id_text, id_text.get_rect(center=center))


def draw_metrics_panel(
    surface: pygame.Surface,
    font_sm: pygame.font.Font,
    font_md: pygame.font.Font,
    store: SimulationStore,
    driver: MovementDriver | None = None,
) -> None:
    """Draw the 300px metrics panel on the right side of the window."""
    px = MAP_WIDTH
    panel_rect = pygame.Rect(px, 0, PANEL_WIDTH, MAP_HEIGHT)
    pygame.draw.rect(surface, PANEL_BG, panel_rect)

    y = 10
    line_h = 16
    section_gap = 8

    def header(text: str) -> None:
        nonlocal y
        pygame.draw.line(surface, PANEL_SEPARATOR, (px + 10, y), (px + PANEL_WIDTH - 10, y))
        y += 4
        txt = font_md.render(text, True, PANEL_HEADER)
        surface.blit(txt, (px + 10, y))
        y += line_h + 4

    def row(label_text: str, value: str, color: tuple = PANEL_TEXT) -> None:
        nonlocal y
        txt = font_sm.render(f"  {label_text}: {value}", True, color)
        surface.blit(txt, (px + 8, y))
        y += line_h

    def row_raw(text: str, color: tuple = PANEL_TEXT) -> None:
        nonlocal y
        txt = font_sm.render(f"  {text}", True, color)
        surface.blit(txt, (px + 8, y))
        y += line_h

    # 1. SIMULATION
    header("SIMULATION")
    elapsed = store.now_ms / 1000.0
    mins = int(elapsed // 60)
    secs = int(elapsed % 60)
    row("Elapsed", f"{mins:02d}:{secs:02d}")
    row("Speed", f"{store.speed}x")
    row("Status", "Running" if store.is_running else "PAUSED",
        PANEL_GREEN if store.is_running else PANEL_RED)
    row("Auto-assign", "ON" if store.auto_assign_tasks else "OFF",
        PANEL_GREEN if store.auto_assign_tasks else PANEL_TEXT)
    row("Collision", "ON" if store.collision_avoidance_enabled else "OFF",
        PANEL_GREEN if store.collision_avoidance_enabled else PANEL_TEXT)
    y += section_gap

    # 2. FLEET
    header("FLEET")
    faulted = sum(1 for a in store.amrs if not a.healthy)
    idle = sum(1 for a in store.amrs if a.healthy and a.status == AMRStatus.IDLE)
    row("AMRs", f"{len(store.amrs) - idle - faulted} busy / {idle} idle / {faulted} fault",
        PANEL_RED if faulted else PANEL_TEXT)
    y += section_gap

    # 3. TASKS
    header("TASKS")
    m = store.metrics()
    row("Active / Pending", f"{m['active_tasks']} / {m['pending_tasks']}")
    row("Completed", str(m["total_tasks_completed"]))
    row("Failed", str(m["total_tasks_failed"]),
        PANEL_RED if m["total_tasks_failed"] else PANEL_TEXT)
    row("Cargo stored", str(m["total_cargo_moved"]))
    avg = m["average_task_completion_time_ms"] / 1000.0
    row("Avg task", f"{avg:.1f}s" if avg > 0 else "--")
    row("Tasks/hr", f"{m['throughput_per_hour']:.1f}")
    row("Efficiency", f"{m['system_efficiency']:.0f}%")
    y += section_gap

    # 4. SELECTED AMR
    header("SELECTED AMR")
    amr = store.get_robot(store.selected_amr_id)
    if amr is not None:
        row("ID", amr.id)
        row("Status", amr.status.value, PANEL_TEXT if amr.healthy else PANEL_RED)
        row("Battery", f"{amr.battery:.0f}%", PANEL_YELLOW if amr.battery < 20 else PANEL_TEXT)
        task = store.get_robot_task(amr.id)
        if task is not None and task.current_step is not None:
            row_raw(f"Step {task.current_step_index + 1}/{len(task.steps)}: "
                    f"{task.current_step.description}")
        if driver is not None and driver.is_blocked(amr.id):
            row("Blocked", f"{driver.blocked_ticks[amr.id]} ticks", PANEL_RED)
    else:
        row_raw("None (TAB to select)")
    y += section_gap

    # 5. LOG
    header("LOG")
    controls_y = MAP_HEIGHT - 36
    for entry in store.logs:
        if y > controls_y - line_h:
            break
        row_raw(entry.message[:42], _LOG_COLORS[entry.type])

    # 6. Controls hint
    for i, hint in enumerate((
        "Space:Run Up/Dn:Speed TAB:Select N:Task A:Auto",
        "C:Collide H:Heat F:Fault D:Dock G:Charge E:E-stop",
    )):
        txt = font_sm.render(hint, True, PANEL_SEPARATOR)
        surface.blit(txt, (px + 10, controls_y + i * line_h))


def render(
    screen: pygame.Surface,
    store: SimulationStore,
    font_sm: pygame.font.Font,
    font_md: pygame.font.Font,
    driver: MovementDriver | None = None,
) -> None:
    """Full frame render: background → zones → graph → heatmap → AMRs → panel."""
    draw_background(screen)
    draw_zones(screen, store.graph, store.zones, font_sm)
    draw_graph(screen, store.graph, font_sm)
    if store.show_heatmap:
        draw_heatmap(screen, store.graph, store.node_visits)
    for amr in store.amrs:
        draw_amr(
            screen, amr, font_sm,
            selected=amr.id == store.selected_amr_id,
            blocked=driver is not None and driver.is_blocked(amr.id),
        )
    draw_metrics_panel(screen, font_sm, font_md, store, driver)
