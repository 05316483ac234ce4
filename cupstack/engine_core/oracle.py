"""
Forced-Loss Oracle - Proves a position lost before the drop lands.

Runs after every board change, before the player acts. When the next
drop lane's top is a locked 1, every option is tried:
1. Skip, then drop
2. Each accepted move, then drop

If none survives, the position is lost now. The search is a flat
loop over lane pairs with an early exit on the first safe option.

Simulations use their own IdSource, so live cup ids are untouched.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .drop_resolver import resolve_drop
from .move_generator import accepted_moves
from .state import Board, IdSource, MAX_HEIGHT, check_lane_index

logger = logging.getLogger(__name__)

SIMULATION_PREFIX = "sim"


@dataclass(frozen=True)
class Escape:
    """A player option that survives the next drop."""
    kind: str  # "skip" or "move"
    from_lane: int | None = None
    to_lane: int | None = None


def _simulation_ids() -> IdSource:
    return IdSource(prefix=SIMULATION_PREFIX)


def find_escape(board: Board, next_drop_lane: int) -> Escape | None:
    """
    Find the first option that survives the drop on `next_drop_lane`.

    Returns None when every option loses.
    """
    check_lane_index(board, next_drop_lane, role="drop lane")

    skip = resolve_drop(board, next_drop_lane, _simulation_ids())
    if not skip.lost:
        return Escape(kind="skip")

    for move, result in accepted_moves(board, _simulation_ids()):
        if result.lost:
            continue
        if result.won:
            # The game ends before the drop.
            return Escape(kind="move", from_lane=move.from_lane, to_lane=move.to_lane)
        drop = resolve_drop(result.next_board, next_drop_lane, result.ids)
        if not drop.lost:
            return Escape(kind="move", from_lane=move.from_lane, to_lane=move.to_lane)
    return None


def detect_forced_loss(board: Board, next_drop_lane: int) -> str | None:
    """
    Return a loss message when the next drop cannot be survived.

    None means the player still has a way out, or there is no threat.
    """
    check_lane_index(board, next_drop_lane, role="drop lane")
    lane = board[next_drop_lane]
    label = f"lane {next_drop_lane + 1}"

    if len(lane) >= MAX_HEIGHT:
        logger.info("Forced loss: %s is full", label)
        return f"No room left in {label} for the next drop."

    top = lane[-1] if lane else None
    if top is None or not (top.linked and top.size == 1):
        return None

    escape = find_escape(board, next_drop_lane)
    if escape is not None:
        logger.debug("Locked 1 on %s has an escape: %s", label, escape)
        return None

    logger.info("Forced loss: no move avoids the locked 1 on %s", label)
    return f"No move can save the locked 1 in {label} from the next drop."
