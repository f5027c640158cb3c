"""Headless (no-GUI) simulation runner."""

from __future__ import annotations

import logging
import time as _time

from .enums import AMRStatus
from .constants import MAX_PATH_ATTEMPTS, TICK_INTERVAL_MS
from .movement import MovementDriver
from .store import SimulationStore

logger = logging.getLogger(__name__)


def run_headless(
    num_amrs: int = 3,
    sim_duration_s: float = 300.0,
    tick_ms: float = TICK_INTERVAL_MS,
    speed: float = 1.0,
    seed: int | None = None,
    collision_avoidance: bool = False,
    auto_assign: bool = True,
    max_path_attempts: int = MAX_PATH_ATTEMPTS,
) -> dict:
    """Run the simulation without pygame rendering, using a fixed timestep.

    Returns a dict of performance metrics: the store's summary figures plus
    fleet utilisation and run bookkeeping.
    """
    if num_amrs <= 0:
        raise ValueError(f"Cannot run a fleet of {num_amrs} AMRs")
    if tick_ms <= 0:
        raise ValueError(f"tick_ms must be positive, got {tick_ms}")

    wall_start = _time.monotonic()

    store = SimulationStore(
        seed=seed,
        max_path_attempts=max_path_attempts,
        auto_assign=auto_assign,
        collision_avoidance=collision_avoidance,
    )
    store.set_speed(speed)
    store.initialize_fleet(num_amrs)
    driver = MovementDriver(store)
    store.toggle_simulation()

    # Utilization tracking
    idle_ticks: dict[str, int] = {amr.id: 0 for amr in store.amrs}
    blocked_ticks: dict[str, int] = {amr.id: 0 for amr in store.amrs}
    total_tracked = 0

    sim_duration_ms = sim_duration_s * 1000.0
    while store.now_ms < sim_duration_ms:
        driver.tick(tick_ms)
        total_tracked += 1
        for amr in store.amrs:
            if amr.status == AMRStatus.IDLE:
                idle_ticks[amr.id] += 1
            if driver.is_blocked(amr.id):
                blocked_ticks[amr.id] += 1

    wall_elapsed = _time.monotonic() - wall_start

    total_t = total_tracked * num_amrs
    total_idle = sum(idle_ticks.values())
    total_blocked = sum(blocked_ticks.values())
    utilization = 1.0 - (total_idle / total_t) if total_t > 0 else 0.0
    blocked_fraction = total_blocked / total_t if total_t > 0 else 0.0

    results = dict(store.metrics())
    results.update({
        "num_amrs": num_amrs,
        "speed": speed,
        "collision_avoidance": collision_avoidance,
        "amr_utilization": utilization,
        "amr_blocked_fraction": blocked_fraction,
        "distance_traveled": sum(amr.distance_traveled for amr in store.amrs),
        "node_visits": dict(store.node_visits),
        "wall_clock_seconds": wall_elapsed,
        "total_ticks": driver.total_ticks,
    })
    logger.info(
        "Headless run: %d AMRs, %.0f s simulated, %d tasks completed",
        num_amrs, sim_duration_s, results["total_tasks_completed"],
    )
    return results
