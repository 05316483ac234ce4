"""
Game Loop - The turn state machine around the engine.

The loop:
1. Player selects a source lane (or calls move()/skip() directly)
2. Player selects a destination, or the same lane again to skip
3. Engine resolves the move, checks for a win
4. Engine resolves the forced drop, checks for loss and win
5. Engine picks the next drop lane and runs the forced-loss oracle
6. Repeat until WON or LOST

Each accepted turn yields one ordered event stream. The host renders
it, then takes the board from the same TurnResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..config import GameConfig
from ..engine_core.drop_resolver import resolve_drop
from ..engine_core.event import Event, Outcome
from ..engine_core.lane_picker import LaneRng, pick_next_lane
from ..engine_core.move_resolver import resolve_move
from ..engine_core.oracle import detect_forced_loss
from ..engine_core.state import Board, IdSource, TurnPhase, is_lane_index
from ..engine_core.win_detector import check_win

logger = logging.getLogger(__name__)

WIN_MESSAGE = "Victory! 5-4-3-2-1 is complete."


@dataclass(frozen=True)
class TurnInput:
    """A recorded player decision: a skip or a move."""
    kind: str  # "skip" or "move"
    from_lane: int | None = None
    to_lane: int | None = None

    @classmethod
    def skip(cls) -> TurnInput:
        return cls(kind="skip")

    @classmethod
    def move(cls, from_lane: int, to_lane: int) -> TurnInput:
        return cls(kind="move", from_lane=from_lane, to_lane=to_lane)


@dataclass
class TurnResult:
    """
    Result of one call into the loop.

    `events` is the full ordered stream for the call; `board` is the
    board to show once the stream has been consumed.
    """
    accepted: bool
    phase: TurnPhase
    board: Board
    next_drop_lane: int
    turn_number: int
    events: list[Event] = field(default_factory=list)
    message: str = ""
    errors: list[str] = field(default_factory=list)
    selected_lane: int | None = None

    @property
    def is_game_over(self) -> bool:
        return self.phase.is_terminal


class GameLoop:
    """
    The turn driver.

    Usage:
        loop = GameLoop(GameConfig(seed=42))
        result = loop.start()

        result = loop.select_lane(0)   # pick up lane 1
        result = loop.select_lane(2)   # put it on lane 3, then drop

        for event in result.events:
            render(event)
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self.seed: int | None = None
        self.board = Board.empty()
        self.ids = IdSource()
        self.rng = LaneRng()
        self.next_drop_lane = 0
        self.turn_number = 0
        self.phase = TurnPhase.SELECT_SOURCE
        self.selected_lane: int | None = None
        self.message = ""
        self.history: list[TurnInput] = []

    @property
    def started(self) -> bool:
        return self.turn_number > 0

    def start(self) -> TurnResult:
        """Reset to an empty board and run the opening drops."""
        if self.config.seed is not None:
            self.seed = self.config.seed & 0xFFFFFFFF
            self.rng = LaneRng.seeded(self.seed)
        else:
            self.rng = LaneRng.from_clock()
            self.seed = self.rng.state

        self.board = Board.empty()
        self.ids = IdSource()
        self.history = []
        self.selected_lane = None
        self.turn_number = 1
        self.phase = TurnPhase.RESOLVING

        events: list[Event] = []
        last_lane = 0
        for _ in range(self.config.initial_drops):
            last_lane, self.rng = pick_next_lane(self.rng, None)
            drop = resolve_drop(self.board, last_lane, self.ids)
            self.board, self.ids = drop.next_board, drop.ids
            events.extend(drop.events)
            if drop.lost:
                return self._end(TurnPhase.LOST, events, drop.message)

        self.next_drop_lane, self.rng = pick_next_lane(self.rng, last_lane)
        logger.info("Game started with seed %s, next drop lane %d", self.seed, self.next_drop_lane)
        return self._after_board_change(events, "Game started! Pick a lane to move from.")

    def select_lane(self, index: int) -> TurnResult:
        """
        Handle a tap on a lane.

        First tap picks the source; a second tap on another lane moves,
        on the same lane skips the move.
        """
        error = self._input_error()
        if error:
            return self._rejected(error, error=True)
        if not is_lane_index(self.board, index):
            return self._rejected(f"Lanes are numbered 1 to {len(self.board)}.")

        if self.phase == TurnPhase.SELECT_SOURCE:
            if not self.board[index]:
                return self._rejected("An empty lane cannot be selected.")
            self.selected_lane = index
            self.phase = TurnPhase.SELECT_DESTINATION
            self.message = f"Lane {index + 1} selected. Pick a destination, or the same lane to skip."
            return self._result(True, [], self.message)

        source = self.selected_lane
        if source == index:
            return self.skip()
        return self.move(source, index)

    def skip(self) -> TurnResult:
        """Skip the move and go straight to the drop."""
        error = self._input_error()
        if error:
            return self._rejected(error, error=True)
        self.selected_lane = None
        return self._resolve_turn(TurnInput.skip())

    def move(self, from_lane: int, to_lane: int) -> TurnResult:
        """Move the top group of `from_lane` onto `to_lane`, then drop."""
        error = self._input_error()
        if error:
            return self._rejected(error, error=True)
        self.selected_lane = None
        return self._resolve_turn(TurnInput.move(from_lane, to_lane))

    def apply(self, turn_input: TurnInput) -> TurnResult:
        """Apply a recorded input."""
        if turn_input.kind == "skip":
            return self.skip()
        if turn_input.kind == "move":
            return self.move(turn_input.from_lane, turn_input.to_lane)
        return self._rejected(f"Unknown turn input: {turn_input.kind}", error=True)

    def _input_error(self) -> str | None:
        if not self.started:
            return "Game not started - call start() first"
        if self.phase.is_terminal:
            return "Game is over - no moves allowed"
        return None

    def _resolve_turn(self, turn_input: TurnInput) -> TurnResult:
        self.phase = TurnPhase.RESOLVING
        events: list[Event] = []
        messages: list[str] = []

        if turn_input.kind == "move":
            moved = resolve_move(self.board, turn_input.from_lane, turn_input.to_lane, self.ids)
            if not moved.accepted:
                self.phase = TurnPhase.SELECT_SOURCE
                return self._rejected(moved.message)
            self.board, self.ids = moved.next_board, moved.ids
            events.extend(moved.events)
            self.history.append(turn_input)
            if moved.lost:
                return self._end(TurnPhase.LOST, events, moved.message)
            if moved.won:
                return self._end(TurnPhase.WON, events, WIN_MESSAGE)
            messages.append(moved.message)
        else:
            self.history.append(turn_input)
            messages.append("Skipped. Dropping.")

        drop = resolve_drop(self.board, self.next_drop_lane, self.ids)
        self.board, self.ids = drop.next_board, drop.ids
        events.extend(drop.events)
        if drop.lost:
            return self._end(TurnPhase.LOST, events, drop.message)
        if check_win(self.board):
            return self._end(TurnPhase.WON, events, WIN_MESSAGE)
        messages.append(drop.message)

        self.next_drop_lane, self.rng = pick_next_lane(self.rng, self.next_drop_lane)
        self.turn_number += 1
        return self._after_board_change(events, " ".join(messages))

    def _after_board_change(self, events: list[Event], message: str) -> TurnResult:
        """Run the forced-loss oracle before handing control back."""
        if self.config.detect_forced_loss:
            forced = detect_forced_loss(self.board, self.next_drop_lane)
            if forced:
                events.append(Event.game_over(forced, Outcome.LOST))
                return self._end(TurnPhase.LOST, events, forced)
        self.phase = TurnPhase.SELECT_SOURCE
        self.message = message
        return self._result(True, events, message)

    def _end(self, phase: TurnPhase, events: list[Event], message: str) -> TurnResult:
        # Resolvers already emit their own loss events.
        if phase == TurnPhase.WON:
            events.append(Event.game_over(message, Outcome.WON))
        self.phase = phase
        self.selected_lane = None
        self.message = message
        logger.info("Game ended (%s) on turn %d: %s", phase.value, self.turn_number, message)
        return self._result(True, events, message)

    def _rejected(self, message: str, error: bool = False) -> TurnResult:
        if not error:
            self.selected_lane = None
            if not self.phase.is_terminal and self.started:
                self.phase = TurnPhase.SELECT_SOURCE
            self.message = message
        return self._result(False, [], message, errors=[message] if error else [])

    def _result(
        self, accepted: bool, events: list[Event], message: str, errors: list[str] | None = None
    ) -> TurnResult:
        return TurnResult(
            accepted=accepted,
            phase=self.phase,
            board=self.board,
            next_drop_lane=self.next_drop_lane,
            turn_number=self.turn_number,
            events=events,
            message=message,
            errors=errors or [],
            selected_lane=self.selected_lane,
        )


def new_game(config: GameConfig | None = None) -> tuple[GameLoop, TurnResult]:
    """Create a loop and run its opening drops."""
    loop = GameLoop(config)
    return loop, loop.start()
