"""
Move Generator - Enumerates the moves a player could make.

Used by:
1. The forced-loss oracle to search every option
2. Hosts that want to highlight available moves
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

from .event import MoveResult
from .move_resolver import resolve_move
from .state import Board, IdSource


@dataclass(frozen=True)
class Move:
    """A (from, to) lane pair."""
    from_lane: int
    to_lane: int


def candidate_moves(board: Board) -> Iterator[Move]:
    """Every ordered pair of distinct lanes whose source is non-empty."""
    for from_lane, source in enumerate(board.lanes):
        if not source:
            continue
        for to_lane in range(len(board.lanes)):
            if to_lane != from_lane:
                yield Move(from_lane, to_lane)


def accepted_moves(board: Board, ids: IdSource | None = None) -> Iterator[tuple[Move, MoveResult]]:
    """Candidate moves the resolver accepts, with their results."""
    ids = ids if ids is not None else IdSource()
    for move in candidate_moves(board):
        result = resolve_move(board, move.from_lane, move.to_lane, ids)
        if result.accepted:
            yield move, result


def legal_moves(board: Board) -> list[Move]:
    """Convenience wrapper returning only the accepted pairs."""
    return [move for move, _ in accepted_moves(board, IdSource(prefix="sim"))]
