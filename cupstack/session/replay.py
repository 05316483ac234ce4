"""
Replay - Rebuild a game from its seed and recorded inputs.

The lane picker and id source are both values seeded from the game
seed, so the same inputs always give the same board and events.
"""

from __future__ import annotations
from dataclasses import replace
import logging
from typing import Iterable

from ..config import GameConfig
from ..engine_core.errors import ReplayError
from .game_loop import GameLoop, TurnInput

logger = logging.getLogger(__name__)


def replay(
    seed: int, inputs: Iterable[TurnInput], config: GameConfig | None = None
) -> GameLoop:
    """
    Replay `inputs` on a fresh game seeded with `seed`.

    Raises ReplayError when an input is rejected or arrives after the
    game has ended.
    """
    config = replace(config or GameConfig(), seed=seed)
    loop = GameLoop(config)
    loop.start()

    for turn_input in inputs:
        if loop.phase.is_terminal:
            raise ReplayError(loop.turn_number, f"game already {loop.phase.value}")
        result = loop.apply(turn_input)
        if not result.accepted:
            raise ReplayError(loop.turn_number, result.message)

    logger.debug("Replayed %d turns, phase %s", len(loop.history), loop.phase.value)
    return loop
