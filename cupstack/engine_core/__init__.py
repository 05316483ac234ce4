"""
Engine Core - Deterministic board simulation.

The engine:
1. Holds the Board (four lanes of cups)
2. Resolves player moves
3. Resolves forced drops
4. Detects wins
5. Proves forced losses by lookahead
6. Picks the next drop lane from an explicit RNG

Every resolver is pure and returns a new board plus ordered events.
"""

from .state import (
    Board, Cup, IdSource, Lane, TurnPhase,
    LANE_COUNT, MAX_HEIGHT, MAX_SIZE, MIN_SIZE,
    check_lane_index, is_lane_index, moving_group, moving_group_start, validate_board,
)
from .errors import BoardValidationError, CupStackError, EngineContractError, ReplayError
from .event import DropResult, Event, EventType, MoveResult, Outcome
from .move_resolver import resolve_move
from .drop_resolver import resolve_drop
from .win_detector import check_win, find_winning_lane
from .move_generator import Move, candidate_moves, legal_moves
from .oracle import Escape, detect_forced_loss, find_escape
from .lane_picker import LaneRng, pick_next_lane

__all__ = [
    "Board",
    "Cup",
    "IdSource",
    "Lane",
    "TurnPhase",
    "LANE_COUNT",
    "MAX_HEIGHT",
    "MAX_SIZE",
    "MIN_SIZE",
    "check_lane_index",
    "is_lane_index",
    "moving_group",
    "moving_group_start",
    "validate_board",
    "BoardValidationError",
    "CupStackError",
    "EngineContractError",
    "ReplayError",
    "DropResult",
    "Event",
    "EventType",
    "MoveResult",
    "Outcome",
    "resolve_move",
    "resolve_drop",
    "check_win",
    "find_winning_lane",
    "Move",
    "candidate_moves",
    "legal_moves",
    "Escape",
    "detect_forced_loss",
    "find_escape",
    "LaneRng",
    "pick_next_lane",
]
