"""
Session Module - Runs one play-through on top of the engine.

A session:
- Seeds the lane picker and runs the opening drops
- Walks the turn state machine (select, resolve, end)
- Records every accepted input so the game can be replayed

Nothing is persisted; a GameRecord snapshot is enough to rebuild a game.
"""

from .game_loop import GameLoop, TurnInput, TurnResult, new_game
from .replay import replay

__all__ = [
    "GameLoop",
    "TurnInput",
    "TurnResult",
    "new_game",
    "replay",
]
