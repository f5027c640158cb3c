"""Per-tick movement driver: moves robots along their path queues."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from .enums import AMRStatus
from .constants import (
    BATTERY_DRAIN_PER_UNIT, CHARGE_RATE, COLLISION_YIELD_TICKS, MOVE_STEP,
    TICK_INTERVAL_MS,
)

if TYPE_CHECKING:
    from .models import AMR, Position
    from .store import SimulationStore

logger = logging.getLogger(__name__)


def step_toward(position: Position, target: Position, step: float) -> tuple[Position, bool]:
    """Return ``(new_position, reached)`` after moving *step* units toward *target*."""
    dx = target[0] - position[0]
    dy = target[1] - position[1]
    dist = math.hypot(dx, dy)
    if dist <= step:
        return target, True
    return (position[0] + dx / dist * step, position[1] + dy / dist * step), False


class MovementDriver:
    """Advances the store's clock and robot positions once per tick.

    Robots are processed in fleet order. With collision avoidance on, a robot
    whose next position is inside another robot's safety radius skips the
    update. When a group of robots has been blocking each other for
    ``COLLISION_YIELD_TICKS`` ticks, the one earliest in fleet order moves
    anyway.
    """

    def __init__(self, store: SimulationStore, step_size: float = MOVE_STEP) -> None:
        self.store = store
        self.step_size: float = step_size
        self.blocked_ticks: dict[str, int] = {}
        self.total_ticks: int = 0

    def is_blocked(self, robot_id: str) -> bool:
        return self.blocked_ticks.get(robot_id, 0) > 0

    def tick(self, dt_ms: float = TICK_INTERVAL_MS) -> None:
        store = self.store
        if not store.is_running:
            return
        store.clock.advance(dt_ms)
        self.total_ticks += 1

        step = self.step_size * store.speed
        order = {amr.id: i for i, amr in enumerate(store.amrs)}
        for amr in list(store.amrs):
            if not amr.healthy:
                self.blocked_ticks.pop(amr.id, None)
                continue
            if amr.status == AMRStatus.CHARGING and not amr.path:
                self._charge(amr)
                continue
            if not amr.path:
                self.blocked_ticks.pop(amr.id, None)
                continue

            proposed, reached = step_toward(amr.position, amr.path[0], step)

            if store.collision_avoidance_enabled:
                blockers = store.collision_blockers(amr.id, proposed)
                if blockers:
                    if not self._may_override(amr, blockers, order):
                        self.blocked_ticks[amr.id] = self.blocked_ticks.get(amr.id, 0) + 1
                        continue
                    logger.debug("%s overriding block by %s", amr.id, blockers)
                else:
                    self.blocked_ticks[amr.id] = 0

            self._commit(amr, proposed, reached)

    def _may_override(self, amr: AMR, blockers: list[str], order: dict[str, int]) -> bool:
        if self.blocked_ticks.get(amr.id, 0) < COLLISION_YIELD_TICKS:
            return False
        rank = order[amr.id]
        for other_id in blockers:
            if not self.is_blocked(other_id):
                return False
            if order.get(other_id, rank) < rank:
                return False
        return True

    def _commit(self, amr: AMR, proposed: Position, reached: bool) -> None:
        travelled = math.hypot(proposed[0] - amr.position[0], proposed[1] - amr.position[1])
        self.store.update_position(amr.id, proposed)
        amr.distance_traveled += travelled
        amr.battery = max(0.0, amr.battery - travelled * BATTERY_DRAIN_PER_UNIT)
        if reached:
            self.store.shift_waypoint(amr.id)

    def _charge(self, amr: AMR) -> None:
        amr.battery = min(100.0, amr.battery + CHARGE_RATE)
        if amr.battery >= 100.0:
            self.store.finish_charging(amr.id)
