"""
Game configuration.

Rule constants (lane count, height, sizes) are fixed and live in
engine_core.state. This covers only how a host runs a game.

Environment:
    CUPSTACK_SEED          Seed for the lane picker (default: clock)
    CUPSTACK_LOG_LEVEL     Logging level name (default: WARNING)
    CUPSTACK_FORCED_LOSS   Set to 0/false to skip the forced-loss oracle
"""

from __future__ import annotations
from dataclasses import dataclass
import os

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class GameConfig:
    """Settings for one game."""
    seed: int | None = None
    log_level: str = "WARNING"
    detect_forced_loss: bool = True
    initial_drops: int = 2

    @classmethod
    def from_env(cls, environ=None) -> GameConfig:
        """Build a config from environment variables."""
        env = os.environ if environ is None else environ
        seed_text = env.get("CUPSTACK_SEED")
        seed = int(seed_text) if seed_text not in (None, "") else None
        return cls(
            seed=seed,
            log_level=env.get("CUPSTACK_LOG_LEVEL", "WARNING").upper(),
            detect_forced_loss=env.get("CUPSTACK_FORCED_LOSS", "1").strip().lower() not in _FALSE_VALUES,
        )
