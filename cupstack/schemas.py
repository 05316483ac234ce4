"""
Pydantic Schemas - Plain snapshots of boards, events and games.

These models are the only wire format the engine has:
- BoardSnapshot: four lanes of {id, size, linked} records
- EventRecord: one tagged event from a resolver
- GameRecord: seed, settings and recorded inputs, enough to replay a game

All models round-trip through JSON with model_dump_json() /
model_validate_json().
"""

from __future__ import annotations
from dataclasses import replace
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .config import GameConfig
from .engine_core.errors import BoardValidationError
from .engine_core.event import Event, EventType, Outcome
from .engine_core.state import Board, Cup, LANE_COUNT, MAX_SIZE, MIN_SIZE, validate_board
from .session.game_loop import GameLoop, TurnInput


# =============================================================================
# Enums
# =============================================================================

class EventKind(str, Enum):
    """Event tags."""
    MOVE = "move"
    MERGE = "merge"
    LINK = "link"
    DROP = "drop"
    GAME_OVER = "game_over"


class InputKind(str, Enum):
    """Recorded player decisions."""
    SKIP = "skip"
    MOVE = "move"


# =============================================================================
# Board
# =============================================================================

class CupRecord(BaseModel):
    """A single cup."""
    id: str
    size: int = Field(..., ge=MIN_SIZE, le=MAX_SIZE)
    linked: bool = False

    model_config = {"from_attributes": True}


class BoardSnapshot(BaseModel):
    """The board, each lane listed bottom first."""
    lanes: list[list[CupRecord]] = Field(
        default_factory=lambda: [[] for _ in range(LANE_COUNT)],
        description="Exactly four lanes, index 0 is the bottom cup",
    )

    @classmethod
    def from_board(cls, board: Board) -> BoardSnapshot:
        return cls(lanes=[
            [CupRecord(id=cup.id, size=cup.size, linked=cup.linked) for cup in lane]
            for lane in board.lanes
        ])

    def to_board(self, validate: bool = True) -> Board:
        """
        Build a Board from the snapshot.

        Raises BoardValidationError when the board breaks a rule
        invariant and `validate` is set.
        """
        board = Board.from_lanes(
            [Cup(id=c.id, size=c.size, linked=c.linked) for c in lane]
            for lane in self.lanes
        )
        if validate:
            errors = validate_board(board)
            if errors:
                raise BoardValidationError(errors)
        return board


# =============================================================================
# Events
# =============================================================================

class EventRecord(BaseModel):
    """One event in a turn's stream."""
    type: EventKind
    cup_id: Optional[str] = None
    lane: Optional[int] = None
    index: Optional[int] = None
    size: Optional[int] = None
    from_lane: Optional[int] = None
    consumed: list[str] = Field(default_factory=list)
    outcome: Optional[str] = Field(None, description="won or lost, game_over only")
    message: Optional[str] = None

    @classmethod
    def from_event(cls, event: Event) -> EventRecord:
        return cls(
            type=EventKind(event.event_type.value),
            cup_id=event.cup_id,
            lane=event.lane,
            index=event.index,
            size=event.size,
            from_lane=event.from_lane,
            consumed=list(event.consumed),
            outcome=event.outcome.value if event.outcome else None,
            message=event.message,
        )

    def to_event(self) -> Event:
        return Event(
            event_type=EventType(self.type.value),
            cup_id=self.cup_id,
            lane=self.lane,
            index=self.index,
            size=self.size,
            from_lane=self.from_lane,
            consumed=tuple(self.consumed),
            outcome=Outcome(self.outcome) if self.outcome else None,
            message=self.message,
        )


# =============================================================================
# Games
# =============================================================================

class TurnInputRecord(BaseModel):
    """A recorded skip or move."""
    kind: InputKind
    from_lane: Optional[int] = Field(None, ge=0, lt=LANE_COUNT)
    to_lane: Optional[int] = Field(None, ge=0, lt=LANE_COUNT)

    @classmethod
    def from_input(cls, turn_input: TurnInput) -> TurnInputRecord:
        return cls(
            kind=InputKind(turn_input.kind),
            from_lane=turn_input.from_lane,
            to_lane=turn_input.to_lane,
        )

    def to_input(self) -> TurnInput:
        if self.kind == InputKind.SKIP:
            return TurnInput.skip()
        return TurnInput.move(self.from_lane, self.to_lane)


class GameRecord(BaseModel):
    """Seed, settings and inputs of a game, plus where it ended up."""
    seed: int
    detect_forced_loss: bool = True
    initial_drops: int = Field(2, ge=0)
    inputs: list[TurnInputRecord] = Field(default_factory=list)
    turn_number: int = 0
    phase: Optional[str] = None
    board: Optional[BoardSnapshot] = None

    @classmethod
    def from_loop(cls, loop: GameLoop) -> GameRecord:
        if loop.seed is None:
            raise ValueError("game has not been started")
        return cls(
            seed=loop.seed,
            detect_forced_loss=loop.config.detect_forced_loss,
            initial_drops=loop.config.initial_drops,
            inputs=[TurnInputRecord.from_input(i) for i in loop.history],
            turn_number=loop.turn_number,
            phase=loop.phase.value,
            board=BoardSnapshot.from_board(loop.board),
        )

    def apply_settings(self, config: GameConfig) -> GameConfig:
        """Copy of `config` with the settings this game was played with."""
        return replace(
            config,
            detect_forced_loss=self.detect_forced_loss,
            initial_drops=self.initial_drops,
        )

    def turn_inputs(self) -> list[TurnInput]:
        return [record.to_input() for record in self.inputs]
