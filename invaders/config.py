import os
import time
from dataclasses import dataclass

from invaders.projectiles import DEFAULT_CAPACITY


def _env_float(name, default=None):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


def _env_int(name, default=None):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


@dataclass(frozen=True)
class SimulationConfig:
    """Knobs shared by the coordinator and every invader process.

    Defaults come from ``INVADERS_*`` environment variables so a launcher
    can tune a run without touching the command line. ``shutdown_timeout``
    of None keeps the terminate handshake waiting forever.
    """

    rows: int | None = None
    cols: int | None = None
    tick_seconds: float = _env_float("INVADERS_TICK_SECONDS", 1.0)
    pool_capacity: int = _env_int("INVADERS_POOL_CAPACITY", DEFAULT_CAPACITY)
    shutdown_timeout: float | None = _env_float("INVADERS_SHUTDOWN_TIMEOUT")
    max_ticks: int | None = None
    seed: int | None = None
    quiet: bool = False

    def __post_init__(self):
        if self.tick_seconds < 0:
            raise ValueError("tick_seconds must be >= 0")
        if self.pool_capacity < 1:
            raise ValueError("pool_capacity must be >= 1")
        if self.shutdown_timeout is not None and self.shutdown_timeout < 0:
            raise ValueError("shutdown_timeout must be >= 0")
        if self.max_ticks is not None and self.max_ticks < 1:
            raise ValueError("max_ticks must be >= 1")

    def process_seed(self, rank):
        base = self.seed if self.seed is not None else int(time.time())
        return base + rank
