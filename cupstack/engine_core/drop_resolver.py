"""
Drop Resolver - The forced size-1 drop that follows every turn.

Pure function: (board, lane, ids) -> DropResult.
"""

from __future__ import annotations
import logging

from .event import DropResult, Event, Outcome
from .state import Board, Cup, IdSource, MAX_HEIGHT, check_lane_index, should_link

logger = logging.getLogger(__name__)


def _lost(board: Board, ids: IdSource, events: list[Event], message: str) -> DropResult:
    events.append(Event.game_over(message, Outcome.LOST))
    logger.info("Drop lost the game: %s", message)
    return DropResult(next_board=board, events=events, message=message, ids=ids, lost=True)


def resolve_drop(board: Board, lane_index: int, ids: IdSource | None = None) -> DropResult:
    """
    Drop a size-1 cup onto `lane_index`.

    A full lane or a locked size-1 top ends the game without placing
    the cup. An unlocked size-1 top merges with the new cup into a 2.
    """
    check_lane_index(board, lane_index, role="drop lane")
    ids = ids if ids is not None else IdSource()
    lane = board[lane_index]
    label = f"lane {lane_index + 1}"

    if len(lane) >= MAX_HEIGHT:
        return _lost(board, ids, [], f"The drop overflowed {label}.")

    top = lane[-1] if lane else None
    if top is not None and top.linked and top.size == 1:
        # The dropped cup never lands.
        return _lost(board, ids, [], f"A 1 landed on a locked 1 in {label}.")

    dropped_id, ids = ids.issue()
    events: list[Event] = []

    if top is None:
        new_lane = (Cup(id=dropped_id, size=1),)
        events.append(Event.drop(dropped_id, lane_index, 0))
        message = f"A 1 dropped into {label}."

    elif top.size == 1:
        events.append(Event.drop(dropped_id, lane_index, len(lane)))
        rest = lane[:-1]
        below = rest[-1] if rest else None
        merged_id, ids = ids.issue()
        merged = Cup(id=merged_id, size=2)
        merged = merged.with_linked(should_link(below, merged))
        index = len(rest)
        events.append(Event.merge(merged_id, lane_index, index, 2, (top.id, dropped_id)))
        if merged.linked:
            events.append(Event.link(merged_id, lane_index, index))
        new_lane = rest + (merged,)
        logger.debug("Drop merged %s and %s into %s", top.id, dropped_id, merged_id)
        message = f"Two 1s merged into a 2 in {label}."

    else:
        cup = Cup(id=dropped_id, size=1, linked=top.size == 2)
        index = len(lane)
        events.append(Event.drop(dropped_id, lane_index, index))
        if cup.linked:
            events.append(Event.link(dropped_id, lane_index, index))
        new_lane = lane + (cup,)
        message = f"A 1 dropped into {label}."

    next_board = board.with_lane(lane_index, new_lane)
    if len(new_lane) > MAX_HEIGHT:
        return _lost(next_board, ids, events, f"The drop overflowed {label}.")
    return DropResult(next_board=next_board, events=events, message=message, ids=ids)
