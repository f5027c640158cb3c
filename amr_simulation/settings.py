"""Environment-backed run configuration for the viewer, headless runner and sweep."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_FLEET_SIZE, TICK_INTERVAL_MS

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _int_env(name: str, default: int) -> int:
    """Parse an integer env var with a fallback."""
    raw = os.getenv(name, "")
    if raw == "":
        return default
    return int(raw)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if raw == "":
        return default
    return float(raw)


def _optional_int_env(name: str) -> int | None:
    raw = os.getenv(name, "")
    if raw == "":
        return None
    return int(raw)


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw == "":
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Simulation configuration parsed from environment."""
    fleet_size: int = DEFAULT_FLEET_SIZE
    speed: float = 1.0
    seed: int | None = None
    auto_assign: bool = True
    collision_avoidance: bool = False
    duration_s: float = 300.0
    tick_ms: float = TICK_INTERVAL_MS
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read ``AMR_SIM_*`` variables; unset ones keep their defaults."""
    defaults = Settings()
    return Settings(
        fleet_size=_int_env("AMR_SIM_FLEET_SIZE", defaults.fleet_size),
        speed=_float_env("AMR_SIM_SPEED", defaults.speed),
        seed=_optional_int_env("AMR_SIM_SEED"),
        auto_assign=_bool_env("AMR_SIM_AUTO_ASSIGN", defaults.auto_assign),
        collision_avoidance=_bool_env("AMR_SIM_COLLISION_AVOIDANCE", defaults.collision_avoidance),
        duration_s=_float_env("AMR_SIM_DURATION_S", defaults.duration_s),
        tick_ms=_float_env("AMR_SIM_TICK_MS", defaults.tick_ms),
        log_level=os.getenv("AMR_SIM_LOG_LEVEL", defaults.log_level).upper(),
    )
