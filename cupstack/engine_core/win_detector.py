"""
Win Detector - Finds a completed 5-4-3-2-1 chain.

Only sizes and links matter; cup ids never do.
"""

from __future__ import annotations

from .state import Board, Lane, WIN_PATTERN


def _lane_wins(lane: Lane) -> bool:
    width = len(WIN_PATTERN)
    if len(lane) < width:
        return False
    for start in range(len(lane) - width + 1):
        window = lane[start:start + width]
        if tuple(cup.size for cup in window) != WIN_PATTERN:
            continue
        # The base cup's own link is irrelevant.
        if all(cup.linked for cup in window[1:]):
            return True
    return False


def find_winning_lane(board: Board) -> int | None:
    """Index of the first lane holding a winning window, or None."""
    for idx, lane in enumerate(board.lanes):
        if _lane_wins(lane):
            return idx
    return None


def check_win(board: Board) -> bool:
    """True when any lane holds a linked 5-4-3-2-1 window."""
    return find_winning_lane(board) is not None
