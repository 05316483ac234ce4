"""
Move Resolver - Moves a lane's top group onto another lane.

The resolver is a pure function: (board, from, to, ids) -> MoveResult.

Rules:
- Onto an empty lane: the group moves as is
- Onto a larger cup: the group moves, links recomputed bottom to top
- Onto a smaller cup: rejected
- Onto an equal cup: a single unlocked cup below size 5 merges,
  anything else is rejected

Rejections never raise. They return the input board, no events and
a message explaining why.
"""

from __future__ import annotations
import logging

from .event import Event, MoveResult, Outcome
from .state import (
    Board, Cup, IdSource, Lane, MAX_HEIGHT, MAX_SIZE,
    is_lane_index, moving_group_start, should_link,
)
from .win_detector import check_win

logger = logging.getLogger(__name__)


def _relink(below: Cup | None, group: Lane) -> tuple[list[Cup], list[int]]:
    """
    Recompute links for a group placed on `below`.

    Returns the rebuilt cups and the positions (within the group) of
    cups whose link flipped on.
    """
    rebuilt: list[Cup] = []
    newly_linked: list[int] = []
    for idx, cup in enumerate(group):
        neighbor = below if idx == 0 else rebuilt[idx - 1]
        linked = should_link(neighbor, cup)
        if linked and not cup.linked:
            newly_linked.append(idx)
        rebuilt.append(cup.with_linked(linked))
    return rebuilt, newly_linked


def _finish(
    board: Board, to_lane: int, events: list[Event], message: str, ids: IdSource
) -> MoveResult:
    """Height and win checks shared by every accepted move."""
    if board.height(to_lane) > MAX_HEIGHT:
        overflow = f"Lane {to_lane + 1} overflowed past height {MAX_HEIGHT}."
        events.append(Event.game_over(overflow, Outcome.LOST))
        logger.info("Move overflowed lane %d", to_lane)
        return MoveResult(
            next_board=board, events=events, message=overflow, ids=ids,
            accepted=True, lost=True,
        )
    return MoveResult(
        next_board=board, events=events, message=message, ids=ids,
        accepted=True, won=check_win(board),
    )


def _place_group(
    board: Board, from_lane: int, to_lane: int, start: int, ids: IdSource
) -> MoveResult:
    source = board[from_lane]
    target = board[to_lane]
    group = source[start:]
    below = target[-1] if target else None

    rebuilt, newly_linked = _relink(below, group)

    events: list[Event] = []
    for offset, cup in enumerate(rebuilt):
        events.append(Event.move(cup.id, from_lane, to_lane, len(target) + offset))
    for offset in newly_linked:
        events.append(Event.link(rebuilt[offset].id, to_lane, len(target) + offset))

    next_board = (
        board.with_lane(from_lane, source[:start])
        .with_lane(to_lane, target + tuple(rebuilt))
    )
    if below is None:
        message = f"Moved from lane {from_lane + 1} to empty lane {to_lane + 1}."
    else:
        message = f"Moved from lane {from_lane + 1} to lane {to_lane + 1}."
    return _finish(next_board, to_lane, events, message, ids)


def _merge(
    board: Board, from_lane: int, to_lane: int, start: int, ids: IdSource
) -> MoveResult:
    source = board[from_lane]
    target = board[to_lane]
    base = source[start]
    target_top = target[-1]

    remaining = target[:-1]
    below = remaining[-1] if remaining else None
    merged_id, ids = ids.issue()
    merged_size = base.size + 1
    merged = Cup(id=merged_id, size=merged_size)
    merged = merged.with_linked(should_link(below, merged))
    index = len(remaining)

    events = [Event.merge(merged_id, to_lane, index, merged_size, (base.id, target_top.id))]
    if merged.linked:
        events.append(Event.link(merged_id, to_lane, index))

    next_board = (
        board.with_lane(from_lane, source[:start])
        .with_lane(to_lane, remaining + (merged,))
    )
    logger.debug("Merged %s and %s into %s (size %d)", base.id, target_top.id, merged_id, merged_size)
    message = (
        f"Size {base.size} cups from lanes {from_lane + 1} and {to_lane + 1} "
        f"merged into a {merged_size}."
    )
    return _finish(next_board, to_lane, events, message, ids)


def _reject(board: Board, ids: IdSource, message: str) -> MoveResult:
    logger.debug("Move rejected: %s", message)
    return MoveResult.rejected(board, ids, message)


def resolve_move(
    board: Board, from_lane: int, to_lane: int, ids: IdSource | None = None
) -> MoveResult:
    """
    Move the top group of `from_lane` onto `to_lane`.

    Returns a MoveResult. The input board is never modified.
    """
    ids = ids if ids is not None else IdSource()

    if not is_lane_index(board, from_lane) or not is_lane_index(board, to_lane):
        return _reject(board, ids, f"Lanes must be numbered 1 to {len(board.lanes)}.")
    if from_lane == to_lane:
        return _reject(board, ids, "Source and destination must be different lanes.")

    source = board[from_lane]
    if not source:
        return _reject(board, ids, f"Lane {from_lane + 1} has no cups to move.")

    start = moving_group_start(source)
    group_len = len(source) - start
    base = source[start]
    target_top = board.top(to_lane)

    if target_top is None or base.size < target_top.size:
        return _place_group(board, from_lane, to_lane, start, ids)

    if base.size > target_top.size:
        return _reject(board, ids, "A larger cup cannot go on top of a smaller one.")

    if group_len > 1:
        return _reject(board, ids, "Linked groups cannot merge.")
    if base.size >= MAX_SIZE:
        return _reject(board, ids, f"Size {MAX_SIZE} cups cannot merge any further.")
    if target_top.linked or base.linked:
        return _reject(board, ids, "Locked cups cannot merge.")

    return _merge(board, from_lane, to_lane, start, ids)
