"""
Event System - Events and resolver results.

Events are declarative facts about what changed on the board:
- move: a cup now sits at a new lane/index
- merge: two cups were consumed into a new, larger cup
- link: a cup became chained to the cup below it
- drop: a new cup landed
- game_over: the game ended

Consumers apply them in order; timing and rendering are theirs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Board, IdSource


class EventType(Enum):
    """Types of board events."""
    MOVE = "move"
    MERGE = "merge"
    LINK = "link"
    DROP = "drop"
    GAME_OVER = "game_over"


class Outcome(Enum):
    """How a game ended."""
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class Event:
    """
    A single ordered fact emitted by a resolver.

    Fields not used by an event type stay None.
    """
    event_type: EventType
    cup_id: str | None = None
    lane: int | None = None
    index: int | None = None
    size: int | None = None
    from_lane: int | None = None
    consumed: tuple[str, ...] = ()
    outcome: Outcome | None = None
    message: str | None = None

    @classmethod
    def move(cls, cup_id: str, from_lane: int, lane: int, index: int) -> Event:
        """Factory for move event."""
        return cls(EventType.MOVE, cup_id=cup_id, from_lane=from_lane, lane=lane, index=index)

    @classmethod
    def merge(
        cls, cup_id: str, lane: int, index: int, size: int, consumed: tuple[str, ...]
    ) -> Event:
        """Factory for merge event."""
        return cls(
            EventType.MERGE, cup_id=cup_id, lane=lane, index=index, size=size,
            consumed=tuple(consumed),
        )

    @classmethod
    def link(cls, cup_id: str, lane: int, index: int) -> Event:
        """Factory for link event."""
        return cls(EventType.LINK, cup_id=cup_id, lane=lane, index=index)

    @classmethod
    def drop(cls, cup_id: str, lane: int, index: int, size: int = 1) -> Event:
        """Factory for drop event."""
        return cls(EventType.DROP, cup_id=cup_id, lane=lane, index=index, size=size)

    @classmethod
    def game_over(cls, message: str, outcome: Outcome = Outcome.LOST) -> Event:
        """Factory for terminal event."""
        return cls(EventType.GAME_OVER, outcome=outcome, message=message)

    def to_dict(self) -> dict[str, Any]:
        """Tagged plain mapping with only the fields this event type uses."""
        data: dict[str, Any] = {"type": self.event_type.value}
        for key in ("cup_id", "lane", "index", "size", "from_lane", "message"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.consumed:
            data["consumed"] = list(self.consumed)
        if self.outcome is not None:
            data["outcome"] = self.outcome.value
        return data


@dataclass
class MoveResult:
    """
    Result of resolving a move.

    A rejected move has accepted=False, no events and the input board.
    """
    next_board: Board
    events: list[Event] = field(default_factory=list)
    message: str = ""
    ids: IdSource = field(default_factory=IdSource)
    accepted: bool = False
    lost: bool = False
    won: bool = False

    @classmethod
    def rejected(cls, board: Board, ids: IdSource, message: str) -> MoveResult:
        """Create a no-op result."""
        return cls(next_board=board, events=[], message=message, ids=ids, accepted=False)


@dataclass
class DropResult:
    """Result of resolving a forced drop."""
    next_board: Board
    events: list[Event] = field(default_factory=list)
    message: str = ""
    ids: IdSource = field(default_factory=IdSource)
    lost: bool = False
