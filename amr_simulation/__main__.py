"""Interactive pygame entry point.

Run with::

    python -m amr_simulation
"""

from __future__ import annotations

import logging
import sys

import pygame

from .constants import (
    WINDOW_WIDTH, WINDOW_HEIGHT, MAP_WIDTH, FPS, SPEED_STEPS,
)
from .graph import verify_graph
from .movement import MovementDriver
from .renderer import node_at, render
from .settings import load_settings
from .store import SimulationStore

logger = logging.getLogger(__name__)

SCENARIO_KEYS = {
    pygame.K_1: "single",
    pygame.K_2: "standard",
    pygame.K_3: "rush",
    pygame.K_4: "stress",
}


def main() -> None:
    """Launch the interactive AMR warehouse simulation."""
    cfg = load_settings()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(message)s",
    )

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    pygame.display.set_caption("AMR Warehouse Simulation")
    clock = pygame.time.Clock()

    font_sm = pygame.font.SysFont("Arial", 11)
    font_md = pygame.font.SysFont("Arial", 14, bold=True)

    store = SimulationStore(
        seed=cfg.seed,
        auto_assign=cfg.auto_assign,
        collision_avoidance=cfg.collision_avoidance,
    )
    driver = MovementDriver(store)
    store.set_speed(cfg.speed)
    store.initialize_fleet(cfg.fleet_size)

    logger.info("Window:    %dx%d px", WINDOW_WIDTH, WINDOW_HEIGHT)
    logger.info("Controls: Space=run/pause, Up/Down=speed, TAB=select, Click=send/spawn")
    logger.info("          N=new task, A=auto-assign, C=collision, H=heatmap, F=fault")
    logger.info("          D=dock, G=charge, E=emergency stop, R=reset fleet, 1-4=scenario, X=export")
    logger.info("Press Q or close window to quit.")

    verify_graph(store.graph)

    speed_index = SPEED_STEPS.index(store.speed) if store.speed in SPEED_STEPS else 1
    tick_accum = 0.0

    running = True
    while running:
        dt_ms = clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                selected = store.selected_amr_id

                if event.key in (pygame.K_q, pygame.K_ESCAPE):
                    running = False

                elif event.key == pygame.K_SPACE:
                    store.toggle_simulation()

                elif event.key in (pygame.K_UP, pygame.K_DOWN):
                    step = 1 if event.key == pygame.K_UP else -1
                    speed_index = max(0, min(speed_index + step, len(SPEED_STEPS) - 1))
                    store.set_speed(SPEED_STEPS[speed_index])
                    logger.info("Speed: %sx", store.speed)

                elif event.key == pygame.K_TAB:
                    if store.amrs:
                        ids = [a.id for a in store.amrs]
                        idx = ids.index(selected) + 1 if selected in ids else 0
                        store.select_robot(ids[idx % len(ids)])
                        logger.info("Selected %s", store.selected_amr_id)

                elif event.key == pygame.K_a:
                    store.toggle_auto_assign()

                elif event.key == pygame.K_c:
                    store.toggle_collision_avoidance()

                elif event.key == pygame.K_h:
                    store.toggle_heatmap()

                elif event.key == pygame.K_e:
                    store.emergency_stop()

                elif event.key == pygame.K_r:
                    store.initialize_fleet(len(store.amrs) or cfg.fleet_size)

                elif event.key == pygame.K_n:
                    task_id = store.create_task()
                    if selected is not None:
                        store.assign_task(selected, task_id)
                        if store.is_running:
                            store.execute_next_step(selected)

                elif event.key == pygame.K_x:
                    logger.info("Report:\n%s", store.export_report())

                elif event.key in SCENARIO_KEYS:
                    if store.load_demo_scenario(SCENARIO_KEYS[event.key]):
                        speed_index = SPEED_STEPS.index(store.speed)

                elif selected is not None:
                    if event.key == pygame.K_f:
                        store.toggle_robot_health(selected)
                    elif event.key == pygame.K_d:
                        store.send_to_dock(selected)
                    elif event.key == pygame.K_g:
                        store.send_to_charging(selected)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                mx, my = event.pos
                if mx >= MAP_WIDTH:
                    continue
                node_id = node_at(store.graph, (mx, my))
                selected = store.selected_amr_id
                if node_id is None or selected is None:
                    continue
                if store.is_running:
                    store.navigate_to_node(selected, node_id)
                else:
                    store.set_spawn_node(selected, node_id)

        # Fixed logical ticks; nothing advances while paused
        if store.is_running:
            tick_accum += dt_ms
            while tick_accum >= cfg.tick_ms:
                tick_accum -= cfg.tick_ms
                driver.tick(cfg.tick_ms)
        else:
            tick_accum = 0.0

        render(screen, store, font_sm, font_md, driver)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
